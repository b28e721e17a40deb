# tests/test_admin.py
import pytest
from predictpro import db
from predictpro.core.database import User, AuditLog
from predictpro.repositories.base import keyset_page
from conftest import buy_and_approve

def test_user_listing_is_staff_only(client, make_user):
    _, headers = make_user('punter@example.com')
    _, assistant = make_user('helper@example.com', role='Assistant')
    assert client.get('/api/admin/users', headers=headers).status_code == 403

    response = client.get('/api/admin/users', headers=assistant)
    assert response.status_code == 200
    assert [u['email'] for u in response.json['users']] == ['helper@example.com', 'punter@example.com']

def test_user_listing_pages_and_filters(app, client, make_user):
    _, admin = make_user('admin@example.com', role='Admin')
    for i in range(3):
        make_user(f'user{i}@example.com')

    first = client.get('/api/admin/users?limit=3', headers=admin).json
    assert len(first['users']) == 3
    second = client.get(f"/api/admin/users?limit=3&cursor={first['next_cursor']}", headers=admin).json
    assert len(second['users']) == 1
    assert second['next_cursor'] is None

    recent = client.get('/api/admin/users?new_since_hours=24', headers=admin).json
    assert len(recent['users']) == 4
    assert client.get('/api/admin/users?new_since_hours=0', headers=admin).status_code == 400

def test_lookup(client, make_user):
    _, headers = make_user('punter@example.com')
    _, admin = make_user('admin@example.com', role='Admin')
    buy_and_approve(client, headers, admin)

    response = client.get('/api/admin/users/lookup?email=PUNTER@example.com', headers=admin)
    assert response.status_code == 200
    assert response.json['user']['email'] == 'punter@example.com'
    assert response.json['licenses'][0]['rounds_remaining'] == 100
    assert response.json['transactions'][0]['status'] == 'verified'

    assert client.get('/api/admin/users/lookup?email=ghost@example.com', headers=admin).status_code == 404

def test_admin_updates_user(app, client, make_user):
    user_id, _ = make_user('punter@example.com')
    _, admin = make_user('admin@example.com', role='Admin')

    response = client.patch(f'/api/admin/users/{user_id}', headers=admin, json={
        'role': 'Assistant', 'premium_status': 'pro',
    })
    assert response.status_code == 200
    assert response.json['role'] == 'Assistant'
    assert response.json['premium_status'] == 'pro'
    with app.app_context():
        entry = AuditLog.query.filter_by(action='user_updated').one()
        assert 'role User -> Assistant' in entry.details

    response = client.patch(f'/api/admin/users/{user_id}', headers=admin, json={'premium_status': 'gold'})
    assert response.status_code == 400

def test_only_superadmin_manages_admin_roles(client, make_user):
    user_id, _ = make_user('punter@example.com')
    other_admin_id, _ = make_user('other@example.com', role='Admin')
    _, admin = make_user('admin@example.com', role='Admin')
    _, superadmin = make_user('root@example.com', role='SuperAdmin')

    assert client.patch(f'/api/admin/users/{user_id}', headers=admin, json={'role': 'Admin'}).status_code == 403
    assert client.patch(f'/api/admin/users/{other_admin_id}', headers=admin, json={'role': 'User'}).status_code == 403

    response = client.patch(f'/api/admin/users/{user_id}', headers=superadmin, json={'role': 'Admin'})
    assert response.status_code == 200
    assert response.json['role'] == 'Admin'

def test_superadmin_cannot_be_suspended(client, make_user):
    root_id, _ = make_user('root@example.com', role='SuperAdmin')
    _, other_root = make_user('root2@example.com', role='SuperAdmin')
    response = client.patch(f'/api/admin/users/{root_id}', headers=other_root, json={'is_suspended': True})
    assert response.status_code == 403

def test_suspend_and_reinstate(app, client, make_user):
    user_id, headers = make_user('punter@example.com')
    _, admin = make_user('admin@example.com', role='Admin')

    response = client.patch(f'/api/admin/users/{user_id}', headers=admin, json={'is_suspended': True})
    assert response.json['is_suspended'] is True
    assert client.get('/api/licenses', headers=headers).status_code == 403

    client.patch(f'/api/admin/users/{user_id}', headers=admin, json={'is_suspended': False})
    assert client.get('/api/licenses', headers=headers).status_code == 200

def test_audit_log_search(client, make_user):
    _, headers = make_user('punter@example.com')
    _, admin = make_user('admin@example.com', role='Admin')
    buy_and_approve(client, headers, admin)

    logs = client.get('/api/admin/audit-logs?action=payment_submitted', headers=admin).json['logs']
    assert len(logs) == 1
    assert 'punter@example.com' in logs[0]['details']

    logs = client.get('/api/admin/audit-logs?limit=2', headers=admin).json['logs']
    assert len(logs) == 2
    assert logs[0]['action'] == 'payment_verified'

    assert client.get('/api/admin/audit-logs?action=unknown', headers=admin).status_code == 400

def test_analytics(app, client, make_user):
    user_id, headers = make_user('punter@example.com')
    _, admin = make_user('admin@example.com', role='Admin')
    make_user('banned@example.com')
    buy_and_approve(client, headers, admin)
    ids = [client.post('/api/games/aviator/predict', headers=headers, json={}).json['prediction']['id']
           for _ in range(3)]
    client.post(f'/api/predictions/{ids[0]}/feedback', headers=headers, json={'status': 'won'})
    client.post(f'/api/predictions/{ids[1]}/feedback', headers=headers, json={'status': 'lost'})
    with app.app_context():
        User.query.filter_by(email='banned@example.com').one().is_suspended = True
        db.session.commit()

    data = client.get('/api/admin/analytics', headers=admin).json
    assert data['total_users'] == 3
    assert [u['email'] for u in data['suspended_users']] == ['banned@example.com']
    assert data['predictions_by_game'] == {'aviator': 3}
    assert data['won'] == 1
    assert data['lost'] == 1
    assert data['success_rate'] == 50.0
    assert data['verified_revenue'] == 799.0

def test_non_positive_page_size_is_rejected(app):
    with app.app_context(), pytest.raises(ValueError):
        keyset_page(User.query, User.id, 0)
