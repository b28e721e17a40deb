# tests/conftest.py
import json
from types import SimpleNamespace
import pytest
from predictpro import create_app, db
from predictpro.config.settings import Config
from predictpro.core.constants import ROLE_USER
from predictpro.core.database import User
from predictpro.services.ai_gateway import AIGateway
from predictpro.services.prompt_service import PromptService

PASSWORD = 'password123'

class TestConfig(Config):
    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SECRET_KEY = 'test-secret-key'
    JWT_SECRET_KEY = 'test-jwt-secret-key-that-is-long-enough'
    OPENAI_API_KEY = None
    PREDICTION_ENGINE = 'local'
    AI_FEEDBACK_ADAPTATION = False
    SEED_DEFAULTS = True

class FakeResponses:
    def __init__(self):
        self.queue = []
        self.calls = []

    def create(self, **kwargs):
        self.calls.append({**kwargs, 'input': list(kwargs['input'])} if 'input' in kwargs else kwargs)
        item = self.queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

class FakeOpenAI:
    """Stands in for openai.OpenAI; queue responses with reply() or tool_call()."""

    def __init__(self):
        self.responses = FakeResponses()

    def reply(self, text):
        self.responses.queue.append(SimpleNamespace(output_text=text, output=[]))

    def reply_json(self, payload):
        self.reply(json.dumps(payload))

    def tool_call(self, name, arguments, call_id='call_1'):
        call = SimpleNamespace(type='function_call', name=name, arguments=json.dumps(arguments), call_id=call_id)
        self.responses.queue.append(SimpleNamespace(output_text='', output=[call]))

@pytest.fixture
def fake_openai():
    return FakeOpenAI()

@pytest.fixture
def app(fake_openai):
    app = create_app(TestConfig)
    app.extensions['ai_gateway'] = AIGateway(model='test-model', client=fake_openai)
    PromptService.clear_cache()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()
    PromptService.clear_cache()

@pytest.fixture
def client(app):
    return app.test_client()

def register(client, email, password=PASSWORD, **extra):
    return client.post('/api/auth/register', json=dict(email=email, password=password, **extra))

def login(client, email, password=PASSWORD):
    response = client.post('/api/auth/login', json={'email': email, 'password': password})
    return {'Authorization': f"Bearer {response.json['access_token']}"}

@pytest.fixture
def make_user(app, client):
    """Register a user, adjust stored fields directly, then log in.

    Returns (user_id, auth headers).
    """
    def _make_user(email, role=ROLE_USER, one_x_bet_id='ABC123', referral_code=None, **fields):
        extra = {'referral_code': referral_code} if referral_code else {}
        response = register(client, email, full_name=email.split('@')[0], **extra)
        assert response.status_code == 201, response.json
        user_id = response.json['user']['id']
        with app.app_context():
            user = db.session.get(User, user_id)
            user.role = role
            user.one_x_bet_id = one_x_bet_id
            for key, value in fields.items():
                setattr(user, key, value)
            db.session.commit()
        return user_id, login(client, email)
    return _make_user

def buy_and_approve(client, user_headers, admin_headers, plan_id='aviator'):
    purchase = client.post('/api/purchase', headers=user_headers, json={
        'plan_id': plan_id, 'payment_method': 'mpesa', 'transaction_code': 'QWE123RTY',
    })
    assert purchase.status_code == 201, purchase.json
    txn_id = purchase.json['transaction']['id']
    response = client.post(f'/api/admin/payments/{txn_id}', headers=admin_headers, json={'action': 'approve'})
    assert response.status_code == 200, response.json
    return txn_id
