# tests/test_ai_gateway.py
from types import SimpleNamespace
import pytest
from openai import OpenAIError
from predictpro import db
from predictpro.core.database import Prompt
from predictpro.services.ai_gateway import AIGateway, strip_code_fences
from predictpro.services.prompt_service import PromptService
from predictpro.utils.exceptions import UpstreamError, NotFoundError

def user(**fields):
    defaults = dict(id=1, premium_status='standard')
    defaults.update(fields)
    return SimpleNamespace(**defaults)

def test_strip_code_fences():
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences('  {"a": 1} ') == '{"a": 1}'

def test_game_prediction_validates_output(app, fake_openai):
    gateway = AIGateway(client=fake_openai)
    fake_openai.reply_json({
        "predictionData": {"targetCashout": "3.54x", "riskLevel": "Medium", "confidence": 72},
        "disclaimer": "Predictions are approximations and not guaranteed.",
    })
    with app.app_context():
        result = gateway.generate_game_prediction('crash', user())
    assert result['prediction_data']['targetCashout'] == '3.54x'
    assert 'Crash' in fake_openai.responses.calls[0]['input'][0]['content']

def test_game_prediction_rejects_out_of_range_confidence(app, fake_openai):
    gateway = AIGateway(client=fake_openai)
    fake_openai.reply_json({
        "predictionData": {"targetCashout": "3.54x", "riskLevel": "Medium", "confidence": 180},
        "disclaimer": "x",
    })
    with app.app_context(), pytest.raises(UpstreamError):
        gateway.generate_game_prediction('aviator', user())

def test_vip_slip_prompt_reflects_premium_tier(app, fake_openai):
    gateway = AIGateway(client=fake_openai)
    fake_openai.reply_json({
        "market": "Double Chance", "prediction": "1X", "confidence": 77,
        "analysisSummary": "Home side unbeaten in five.", "disclaimer": "Not guaranteed.",
    })
    with app.app_context():
        result = gateway.generate_vip_slip(user(premium_status='enterprise'), SimpleNamespace(id=5), 'Arsenal', 'Chelsea')
    assert result['prediction_data']['teams'] == 'Arsenal vs Chelsea'
    assert result['disclaimer'] == 'Not guaranteed.'
    prompt = fake_openai.responses.calls[0]['input'][0]['content']
    assert 'ENTERPRISE' in prompt
    assert 'Team 1: Arsenal' in prompt

def test_provider_failure_is_upstream_error(app, fake_openai):
    gateway = AIGateway(client=fake_openai)
    fake_openai.responses.queue.append(OpenAIError('rate limited'))
    with app.app_context(), pytest.raises(UpstreamError):
        gateway.generate_game_prediction('aviator', user())

def test_missing_api_key(app):
    gateway = AIGateway(api_key=None)
    with app.app_context(), pytest.raises(UpstreamError):
        gateway.generate_game_prediction('aviator', user())

def test_support_response_runs_tools(app, fake_openai):
    gateway = AIGateway(client=fake_openai)
    seen = {}

    def lookup(email):
        seen['email'] = email
        return {"id": 42}

    tools = {"lookup": ({"type": "function", "name": "lookup"}, lookup)}
    fake_openai.tool_call('lookup', {'email': 'a@example.com'})
    fake_openai.reply('User 42 found.')
    with app.app_context():
        reply = gateway.generate_support_response('manager', 'find a@example.com', [], user(), tools=tools)

    assert reply == 'User 42 found.'
    assert seen == {'email': 'a@example.com'}
    second_input = fake_openai.responses.calls[1]['input']
    assert second_input[-1]['type'] == 'function_call_output'
    assert second_input[-1]['output'] == '{"id": 42}'

def test_support_response_reports_tool_errors_to_model(app, fake_openai):
    gateway = AIGateway(client=fake_openai)

    def fails():
        raise ValueError('nope')

    fake_openai.tool_call('fails', {})
    fake_openai.reply('Sorry, that did not work.')
    with app.app_context():
        gateway.generate_support_response('manager', 'go', [], user(),
                                          tools={"fails": ({"type": "function", "name": "fails"}, fails)})
    assert '"success": false' in fake_openai.responses.calls[1]['input'][-1]['output']

def test_support_response_tool_limit(app, fake_openai):
    gateway = AIGateway(client=fake_openai, max_tool_rounds=1)
    tools = {"noop": ({"type": "function", "name": "noop"}, lambda: {})}
    for _ in range(2):
        fake_openai.tool_call('noop', {})
    with app.app_context(), pytest.raises(UpstreamError):
        gateway.generate_support_response('manager', 'loop', [], user(), tools=tools)

def test_support_request_is_validated(app, fake_openai):
    gateway = AIGateway(client=fake_openai)
    with app.app_context(), pytest.raises(ValueError):
        gateway.generate_support_response('sales', 'hi', [], user())

def test_prompt_cache_and_invalidation(app):
    with app.app_context():
        service = PromptService()
        original = service.get_prompt('adapt_feedback')
        prompt = db.session.get(Prompt, 'adapt_feedback')
        prompt.content = 'Changed {{ feedback }}'
        db.session.commit()

        assert service.get_prompt('adapt_feedback') == original
        PromptService.clear_cache('adapt_feedback')
        assert service.render('adapt_feedback', feedback='won') == 'Changed won'

def test_missing_prompt(app):
    with app.app_context(), pytest.raises(NotFoundError):
        PromptService().get_prompt('does_not_exist')
