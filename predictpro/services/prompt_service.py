# predictpro/services/prompt_service.py
import threading
import time
from flask import current_app
from jinja2 import TemplateError
from jinja2.sandbox import SandboxedEnvironment
from ..repositories.catalog_repository import CatalogRepository
from ..utils.exceptions import NotFoundError
from ..utils.logger import setup_logger

# prompt_id -> (content, fetched_at)
_cache = {}
_cache_lock = threading.Lock()
_env = SandboxedEnvironment(autoescape=False, trim_blocks=True)

class PromptService:
    """Reads admin-editable prompt templates with a short in-process cache."""

    def __init__(self):
        self.repository = CatalogRepository()
        self.logger = setup_logger()

    @staticmethod
    def clear_cache(prompt_id=None):
        with _cache_lock:
            if prompt_id is None:
                _cache.clear()
            else:
                _cache.pop(prompt_id, None)

    @staticmethod
    def validate(content):
        try:
            _env.parse(content)
        except TemplateError as e:
            raise ValueError(f"Prompt template is invalid: {str(e)}")

    def get_prompt(self, prompt_id):
        ttl = current_app.config.get('PROMPT_CACHE_TTL', 300)
        with _cache_lock:
            cached = _cache.get(prompt_id)
        if cached and time.monotonic() - cached[1] < ttl:
            return cached[0]

        prompt = self.repository.get_prompt(prompt_id)
        if prompt is None:
            self.logger.error(f"Prompt with ID '{prompt_id}' not found")
            raise NotFoundError(f"Prompt '{prompt_id}' not found. Please create it in the admin dashboard.")
        if not isinstance(prompt.content, str) or not prompt.content.strip():
            raise ValueError(f"Prompt '{prompt_id}' has invalid or missing content.")

        with _cache_lock:
            _cache[prompt_id] = (prompt.content, time.monotonic())
        return prompt.content

    def render(self, prompt_id, **variables):
        """Service: Interpolate a stored prompt with request parameters"""
        content = self.get_prompt(prompt_id)
        try:
            return _env.from_string(content).render(**variables)
        except TemplateError as e:
            self.logger.error(f"Service: Prompt '{prompt_id}' failed to render: {str(e)}")
            raise ValueError(f"Prompt '{prompt_id}' could not be rendered: {str(e)}")
