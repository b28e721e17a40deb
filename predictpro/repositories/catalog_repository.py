# predictpro/repositories/catalog_repository.py
from ..core.database import Plan, GameStatus, Prompt
from .. import db

class CatalogRepository:
    """Admin-editable configuration: plans, game switches and prompt templates."""

    def get_plan(self, plan_id):
        return db.session.get(Plan, plan_id)

    def list_plans(self):
        return Plan.query.order_by(Plan.id).all()

    def get_game_status(self, game_id):
        return db.session.get(GameStatus, game_id)

    def list_game_statuses(self):
        return GameStatus.query.order_by(GameStatus.id).all()

    def get_prompt(self, prompt_id):
        return db.session.get(Prompt, prompt_id)

    def list_prompts(self):
        return Prompt.query.order_by(Prompt.id).all()
