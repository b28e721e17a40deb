# tests/test_predictions.py
import pytest
from predictpro import db
from predictpro.core.database import License, AuditLog
from conftest import buy_and_approve

@pytest.fixture
def licensed(client, make_user):
    """A punter holding a verified Aviator license, and an admin."""
    user_id, headers = make_user('punter@example.com')
    _, admin = make_user('admin@example.com', role='Admin')
    buy_and_approve(client, headers, admin, 'aviator')
    return user_id, headers, admin

def set_rounds(app, user_id, game_type, rounds):
    with app.app_context():
        license = License.query.filter_by(user_id=user_id, game_type=game_type).one()
        license.rounds_remaining = rounds
        db.session.commit()

def test_prediction_requires_betting_account(client, make_user):
    _, headers = make_user('punter@example.com', one_x_bet_id=None)
    response = client.post('/api/games/aviator/predict', headers=headers, json={})
    assert response.status_code == 403
    assert '1xBet' in response.json['error']

def test_prediction_requires_license(client, make_user):
    _, headers = make_user('punter@example.com')
    response = client.post('/api/games/aviator/predict', headers=headers, json={})
    assert response.status_code == 403

def test_prediction_refused_while_payment_pending(client, make_user):
    _, headers = make_user('punter@example.com')
    client.post('/api/purchase', headers=headers, json={'plan_id': 'crash', 'payment_method': 'mpesa'})
    response = client.post('/api/games/crash/predict', headers=headers, json={})
    assert response.status_code == 403
    assert 'verification' in response.json['error']

def test_unknown_game(client, licensed):
    _, headers, _ = licensed
    response = client.post('/api/games/roulette/predict', headers=headers, json={})
    assert response.status_code == 404

def test_prediction_consumes_one_round(app, client, licensed):
    _, headers, _ = licensed
    response = client.post('/api/games/aviator/predict', headers=headers, json={})
    assert response.status_code == 201
    assert response.json['rounds_remaining'] == 99
    prediction = response.json['prediction']
    assert prediction['status'] == 'pending'
    assert prediction['prediction_data']['targetCashout'].endswith('x')
    assert prediction['disclaimer'] == 'Play responsibly. Predictions are not guaranteed.'
    with app.app_context():
        assert AuditLog.query.filter_by(action='prediction_request').count() == 1

def test_last_round_deactivates_license(app, client, licensed):
    user_id, headers, _ = licensed
    set_rounds(app, user_id, 'aviator', 1)

    response = client.post('/api/games/aviator/predict', headers=headers, json={})
    assert response.status_code == 201
    assert response.json['rounds_remaining'] == 0
    license = client.get('/api/licenses', headers=headers).json['licenses'][0]
    assert license['is_active'] is False

    response = client.post('/api/games/aviator/predict', headers=headers, json={})
    assert response.status_code == 403
    assert 'expired' in response.json['error']
    with app.app_context():
        assert AuditLog.query.filter_by(action='license_expired').count() == 1
        assert License.query.filter_by(user_id=user_id).one().rounds_remaining == 0

def test_disabled_game_is_refused_with_reason(client, licensed):
    _, headers, admin = licensed
    response = client.patch('/api/admin/games/aviator', headers=admin, json={'is_enabled': False})
    assert response.status_code == 400

    response = client.patch('/api/admin/games/aviator', headers=admin, json={
        'is_enabled': False, 'disabled_reason': 'Scheduled maintenance',
    })
    assert response.status_code == 200
    response = client.post('/api/games/aviator/predict', headers=headers, json={})
    assert response.status_code == 403
    assert 'Scheduled maintenance' in response.json['error']

    games = {g['id']: g for g in client.get('/api/games').json['games']}
    assert games['aviator']['is_enabled'] is False

def test_vip_slip_requires_teams(client, make_user):
    _, headers = make_user('punter@example.com')
    _, admin = make_user('admin@example.com', role='Admin')
    buy_and_approve(client, headers, admin, 'vip-slip')

    response = client.post('/api/games/vip-slip/predict', headers=headers, json={'team1': 'Arsenal'})
    assert response.status_code == 400

    response = client.post('/api/games/vip-slip/predict', headers=headers, json={
        'team1': 'Arsenal', 'team2': 'Chelsea',
    })
    assert response.status_code == 201
    assert response.json['prediction']['prediction_data']['teams'] == 'Arsenal vs Chelsea'
    assert response.json['rounds_remaining'] == 99

def test_feedback_is_recorded_once(client, licensed):
    _, headers, _ = licensed
    prediction_id = client.post('/api/games/aviator/predict', headers=headers, json={}).json['prediction']['id']

    response = client.post(f'/api/predictions/{prediction_id}/feedback', headers=headers, json={'status': 'won'})
    assert response.status_code == 200
    assert response.json['status'] == 'won'
    assert response.json['resolved_at'] is not None

    response = client.post(f'/api/predictions/{prediction_id}/feedback', headers=headers, json={'status': 'lost'})
    assert response.status_code == 409

def test_feedback_validation(client, licensed):
    _, headers, _ = licensed
    prediction_id = client.post('/api/games/aviator/predict', headers=headers, json={}).json['prediction']['id']

    response = client.post(f'/api/predictions/{prediction_id}/feedback', headers=headers, json={'status': 'pending'})
    assert response.status_code == 400
    response = client.post(f'/api/predictions/{prediction_id}/feedback', headers=headers, json={
        'status': 'lost', 'mine_locations': [3, 7],
    })
    assert response.status_code == 400

def test_feedback_on_someone_elses_prediction(client, licensed, make_user):
    _, headers, _ = licensed
    _, other = make_user('other@example.com')
    prediction_id = client.post('/api/games/aviator/predict', headers=headers, json={}).json['prediction']['id']
    response = client.post(f'/api/predictions/{prediction_id}/feedback', headers=other, json={'status': 'won'})
    assert response.status_code == 404

def test_gems_mines_feedback_stores_mines(client, make_user):
    _, headers = make_user('punter@example.com')
    _, admin = make_user('admin@example.com', role='Admin')
    buy_and_approve(client, headers, admin, 'gems-mines')

    prediction = client.post('/api/games/gems-mines/predict', headers=headers, json={}).json['prediction']
    tiles = prediction['prediction_data']['safeTileIndices']
    assert 1 <= len(tiles) <= 5
    assert tiles == sorted(tiles)

    response = client.post(f"/api/predictions/{prediction['id']}/feedback", headers=headers, json={
        'status': 'lost', 'mine_locations': [7, 3, 7],
    })
    assert response.status_code == 200
    assert response.json['mine_locations'] == [3, 7]

def test_history_is_paged_newest_first(client, licensed):
    _, headers, _ = licensed
    ids = [client.post('/api/games/aviator/predict', headers=headers, json={}).json['prediction']['id']
           for _ in range(3)]

    first = client.get('/api/predictions?limit=2', headers=headers).json
    assert [p['id'] for p in first['predictions']] == [ids[2], ids[1]]
    second = client.get(f"/api/predictions?limit=2&cursor={first['next_cursor']}", headers=headers).json
    assert [p['id'] for p in second['predictions']] == [ids[0]]
    assert second['next_cursor'] is None

    assert client.get('/api/predictions?game_type=crash', headers=headers).json['predictions'] == []

def test_lost_vip_slip_refunds_a_round(app, client, make_user):
    _, headers = make_user('punter@example.com')
    _, admin = make_user('admin@example.com', role='Admin')
    buy_and_approve(client, headers, admin, 'vip-slip')
    prediction_id = client.post('/api/games/vip-slip/predict', headers=headers, json={
        'team1': 'Gor Mahia', 'team2': 'AFC Leopards',
    }).json['prediction']['id']

    response = client.post(f'/api/predictions/{prediction_id}/feedback', headers=headers, json={'status': 'lost'})
    assert response.status_code == 403

    response = client.post(f'/api/admin/predictions/{prediction_id}/resolve', headers=admin, json={'outcome': 'lost'})
    assert response.status_code == 200
    assert response.json['refunded'] is True
    license = client.get('/api/licenses', headers=headers).json['licenses'][0]
    assert license['rounds_remaining'] == 100
    assert license['is_active'] is True

    notifications = client.get('/api/notifications', headers=headers).json['notifications']
    assert any('refunded' in n['message'] for n in notifications)

    response = client.post(f'/api/admin/predictions/{prediction_id}/resolve', headers=admin, json={'outcome': 'won'})
    assert response.status_code == 409

def test_won_vip_slip_refunds_nothing(client, make_user):
    _, headers = make_user('punter@example.com')
    _, admin = make_user('admin@example.com', role='Admin')
    buy_and_approve(client, headers, admin, 'vip-slip')
    prediction_id = client.post('/api/games/vip-slip/predict', headers=headers, json={
        'team1': 'Arsenal', 'team2': 'Chelsea',
    }).json['prediction']['id']

    response = client.post(f'/api/admin/predictions/{prediction_id}/resolve', headers=admin, json={'outcome': 'won'})
    assert response.json['refunded'] is False
    assert client.get('/api/licenses', headers=headers).json['licenses'][0]['rounds_remaining'] == 99

def test_ai_engine_prediction(app, client, licensed, fake_openai):
    _, headers, _ = licensed
    app.config['PREDICTION_ENGINE'] = 'ai'
    fake_openai.reply('```json\n{"predictionData": {"targetCashout": "2.35x", "riskLevel": "Low", '
                      '"confidence": 81}, "disclaimer": "Predictions are approximations and not guaranteed."}\n```')

    response = client.post('/api/games/aviator/predict', headers=headers, json={})
    assert response.status_code == 201
    assert response.json['prediction']['prediction_data'] == {
        'targetCashout': '2.35x', 'riskLevel': 'Low', 'confidence': 81,
    }
    request = fake_openai.responses.calls[0]
    assert request['model'] == 'test-model'
    assert 'Aviator' in request['input'][0]['content']

def test_invalid_ai_output_costs_no_round(app, client, licensed, fake_openai):
    _, headers, _ = licensed
    app.config['PREDICTION_ENGINE'] = 'ai'
    fake_openai.reply('I cannot help with that.')

    response = client.post('/api/games/aviator/predict', headers=headers, json={})
    assert response.status_code == 502
    license = client.get('/api/licenses', headers=headers).json['licenses'][0]
    assert license['rounds_remaining'] == 100

def test_gems_mines_stays_local_with_ai_engine(app, client, make_user, fake_openai):
    _, headers = make_user('punter@example.com')
    _, admin = make_user('admin@example.com', role='Admin')
    buy_and_approve(client, headers, admin, 'gems-mines')
    app.config['PREDICTION_ENGINE'] = 'ai'

    response = client.post('/api/games/gems-mines/predict', headers=headers, json={})
    assert response.status_code == 201
    assert fake_openai.responses.calls == []
