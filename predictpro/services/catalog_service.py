# predictpro/services/catalog_service.py
from ..repositories.catalog_repository import CatalogRepository
from ..utils.exceptions import NotFoundError
from ..utils.logger import setup_logger
from .access import require_admin
from .prompt_service import PromptService
from .. import db

class CatalogService:
    """Pricing plans, game availability and prompt templates."""

    def __init__(self):
        self.repository = CatalogRepository()
        self.logger = setup_logger()

    def list_plans(self):
        return self.repository.list_plans()

    def get_plan(self, plan_id):
        plan = self.repository.get_plan(plan_id)
        if plan is None:
            raise NotFoundError(f"Plan '{plan_id}' not found")
        return plan

    def update_plan(self, actor, plan_id, price=None, rounds=None):
        """Service: Change a plan's price or round count"""
        require_admin(actor, "edit pricing")
        plan = self.get_plan(plan_id)
        try:
            if price is not None:
                if price < 0:
                    raise ValueError("Price cannot be negative")
                plan.price = float(price)
            if rounds is not None:
                if rounds <= 0:
                    raise ValueError("Rounds must be a positive number")
                plan.rounds = int(rounds)
            db.session.commit()
            self.logger.info(f"Service: Plan {plan_id} updated by {actor.email}")
            return plan
        except Exception as e:
            db.session.rollback()
            self.logger.error(f"Service: Failed to update plan {plan_id}: {str(e)}")
            raise

    def list_game_statuses(self):
        return self.repository.list_game_statuses()

    def get_game_status(self, game_id):
        status = self.repository.get_game_status(game_id)
        if status is None:
            raise NotFoundError(f"Game '{game_id}' not found")
        return status

    def update_game_status(self, actor, game_id, is_enabled, disabled_reason=''):
        """Service: Enable or disable a game for every user"""
        require_admin(actor, "control games")
        status = self.get_game_status(game_id)
        try:
            disabled_reason = (disabled_reason or '').strip()
            if not is_enabled and not disabled_reason:
                raise ValueError("A reason is required when disabling a game")
            status.is_enabled = bool(is_enabled)
            status.disabled_reason = '' if is_enabled else disabled_reason
            db.session.commit()
            self.logger.info(f"Service: Game {game_id} {'enabled' if is_enabled else 'disabled'} by {actor.email}")
            return status
        except Exception as e:
            db.session.rollback()
            self.logger.error(f"Service: Failed to update game {game_id}: {str(e)}")
            raise

    def list_prompts(self, actor):
        require_admin(actor, "view prompts")
        return self.repository.list_prompts()

    def update_prompt(self, actor, prompt_id, content, name=None):
        """Service: Replace a prompt template and drop it from the cache"""
        require_admin(actor, "edit prompts")
        prompt = self.repository.get_prompt(prompt_id)
        if prompt is None:
            raise NotFoundError(f"Prompt '{prompt_id}' not found")
        try:
            if not (content or '').strip():
                raise ValueError("Prompt content cannot be empty")
            PromptService.validate(content)
            prompt.content = content
            if name:
                prompt.name = name
            db.session.commit()
            PromptService.clear_cache(prompt_id)
            self.logger.info(f"Service: Prompt {prompt_id} updated by {actor.email}")
            return prompt
        except Exception as e:
            db.session.rollback()
            self.logger.error(f"Service: Failed to update prompt {prompt_id}: {str(e)}")
            raise
