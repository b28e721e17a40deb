# predictpro/services/ai_gateway.py
import json
import re
from flask import current_app
from openai import OpenAI, OpenAIError
from pydantic import ValidationError
from ..core.constants import GAME_AVIATOR, GAME_CRASH
from ..core.schemas import GamePredictionOutput, VipSlipOutput, SupportRequest
from ..utils.exceptions import APIError, UpstreamError
from ..utils.logger import setup_logger
from .prompt_service import PromptService

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)

GAME_PROMPTS = {
    GAME_AVIATOR: ("aviator_prediction", "Aviator"),
    GAME_CRASH: ("crash_prediction", "Crash"),
}

def strip_code_fences(text):
    return _FENCE_RE.sub('', text.strip()).strip()

def get_ai_gateway():
    return current_app.extensions['ai_gateway']

class AIGateway:
    """Thin wrapper over the OpenAI Responses API.

    Prompts come from PromptService; structured answers are validated with
    the pydantic models in core.schemas. Tool calls are dispatched to plain
    callables supplied by the caller.
    """

    def __init__(self, api_key=None, model='gpt-4o-mini', client=None, max_tool_rounds=4):
        self.api_key = api_key
        self.model = model
        self.max_tool_rounds = max_tool_rounds
        self._client = client
        self.prompts = PromptService()
        self.logger = setup_logger()

    @classmethod
    def from_config(cls, config):
        return cls(
            api_key=config.get('OPENAI_API_KEY'),
            model=config.get('OPENAI_MODEL', 'gpt-4o-mini'),
            max_tool_rounds=config.get('AI_MAX_TOOL_ROUNDS', 4),
        )

    @property
    def client(self):
        if self._client is None:
            if not self.api_key:
                raise UpstreamError("AI provider is not configured")
            self._client = OpenAI(api_key=self.api_key)
        return self._client

    def _create(self, input_items, tools=None):
        kwargs = {"model": self.model, "input": input_items}
        if tools:
            kwargs["tools"] = tools
        try:
            return self.client.responses.create(**kwargs)
        except OpenAIError as e:
            self.logger.error(f"Gateway: AI provider call failed: {str(e)}")
            raise UpstreamError(f"AI provider error: {str(e)}")

    def _structured(self, prompt_text, schema, request_text):
        response = self._create([
            {"role": "system", "content": prompt_text},
            {"role": "user", "content": request_text},
        ])
        text = strip_code_fences(getattr(response, 'output_text', '') or '')
        try:
            return schema.model_validate(json.loads(text))
        except (json.JSONDecodeError, ValidationError) as e:
            self.logger.error(f"Gateway: Invalid structured output for {schema.__name__}: {str(e)}")
            raise UpstreamError("AI provider returned an invalid prediction")

    def generate_game_prediction(self, game_type, user):
        """Gateway: Aviator/Crash prediction as {'prediction_data', 'disclaimer'}"""
        if game_type not in GAME_PROMPTS:
            raise ValueError(f"Unsupported game type for AI predictions: {game_type}")
        prompt_id, game_name = GAME_PROMPTS[game_type]
        prompt_text = self.prompts.render(
            prompt_id,
            game_name=game_name,
            user_id=user.id,
            premium_status=user.premium_status,
        )
        output = self._structured(prompt_text, GamePredictionOutput, f"Generate the {game_name} prediction now.")
        self.logger.info(f"Gateway: Generated {game_type} prediction for user {user.id}")
        return {"prediction_data": output.predictionData.model_dump(), "disclaimer": output.disclaimer}

    def generate_vip_slip(self, user, license, team1, team2):
        prompt_text = self.prompts.render(
            'vip_slip',
            user_id=user.id,
            license_id=license.id,
            team1=team1,
            team2=team2,
            premium_status=user.premium_status,
        )
        output = self._structured(prompt_text, VipSlipOutput, f"Analyze {team1} vs {team2}.")
        data = output.model_dump(exclude={'disclaimer'})
        data['teams'] = f"{team1} vs {team2}"
        self.logger.info(f"Gateway: Generated VIP slip for user {user.id}")
        return {"prediction_data": data, "disclaimer": output.disclaimer}

    def generate_support_response(self, chat_type, message, history, user, plans=(), tools=None):
        """Gateway: Support chat reply, running tool calls until the model answers in text.

        `tools` maps a tool name to (spec, handler); handler(**arguments)
        returns a JSON-serialisable result.
        """
        try:
            request = SupportRequest(chat_type=chat_type, message=message, history=history, user_id=user.id)
        except ValidationError as e:
            raise ValueError(f"Invalid support request: {e.errors()[0]['msg']}")

        instructions = self.prompts.render(
            'support_response',
            chat_type=request.chat_type,
            user_id=request.user_id,
            plans=[p.to_dict() for p in plans],
        )
        input_items = [{"role": "system", "content": instructions}]
        input_items += [
            {"role": "user" if turn.is_user else "assistant", "content": turn.text}
            for turn in request.history
        ]
        input_items.append({"role": "user", "content": request.message})

        tools = tools or {}
        specs = [spec for spec, _ in tools.values()]
        for _ in range(self.max_tool_rounds + 1):
            response = self._create(input_items, tools=specs)
            calls = [item for item in (getattr(response, 'output', None) or [])
                     if getattr(item, 'type', None) == 'function_call']
            if not calls:
                reply = (getattr(response, 'output_text', '') or '').strip()
                if not reply:
                    raise UpstreamError("AI provider returned an empty reply")
                return reply
            input_items.extend(response.output)
            for call in calls:
                result = self._run_tool(tools, call)
                input_items.append({
                    "type": "function_call_output",
                    "call_id": call.call_id,
                    "output": json.dumps(result, default=str),
                })
        raise UpstreamError("AI assistant exceeded the tool call limit")

    def _run_tool(self, tools, call):
        if call.name not in tools:
            return {"error": f"Unknown tool '{call.name}'"}
        _, handler = tools[call.name]
        try:
            arguments = json.loads(call.arguments or '{}')
            result = handler(**arguments)
            self.logger.info(f"Gateway: Tool {call.name} executed")
            return result
        except (APIError, ValueError, TypeError) as e:
            # The model gets the failure as the tool result and explains it to the user
            self.logger.warning(f"Gateway: Tool {call.name} failed: {str(e)}")
            return {"success": False, "error": getattr(e, 'message', str(e))}

    def adapt_to_feedback(self, game_type, prediction_data, feedback):
        prompt_text = self.prompts.render(
            'adapt_feedback',
            game_type=game_type,
            prediction_data=json.dumps(prediction_data),
            feedback=feedback,
        )
        response = self._create([
            {"role": "system", "content": prompt_text},
            {"role": "user", "content": f"The prediction was {feedback}."},
        ])
        return (getattr(response, 'output_text', '') or '').strip()
