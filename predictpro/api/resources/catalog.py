# predictpro/api/resources/catalog.py
from flask_restful import Resource, reqparse, inputs
from ...services.catalog_service import CatalogService
from ...utils.exceptions import APIError
from ..middleware import admin_required, current_user

class Plans(Resource):
    def get(self):
        return {"plans": [p.to_dict() for p in CatalogService().list_plans()]}, 200

class Games(Resource):
    def get(self):
        return {"games": [g.to_dict() for g in CatalogService().list_game_statuses()]}, 200

class AdminPlan(Resource):
    @admin_required
    def patch(self, plan_id):
        """Controller: Edit a plan's price or rounds"""
        parser = reqparse.RequestParser()
        parser.add_argument('price', type=float, location='json')
        parser.add_argument('rounds', type=int, location='json')
        args = parser.parse_args()

        try:
            plan = CatalogService().update_plan(current_user(), plan_id, args['price'], args['rounds'])
            return plan.to_dict(), 200
        except ValueError as e:
            raise APIError(str(e), status_code=400)

class AdminGame(Resource):
    @admin_required
    def patch(self, game_id):
        """Controller: Enable or disable a game"""
        parser = reqparse.RequestParser()
        parser.add_argument('is_enabled', type=inputs.boolean, required=True, location='json',
                            help="is_enabled is required")
        parser.add_argument('disabled_reason', type=str, location='json')
        args = parser.parse_args()

        try:
            status = CatalogService().update_game_status(
                current_user(), game_id, args['is_enabled'], args['disabled_reason'],
            )
            return status.to_dict(), 200
        except ValueError as e:
            raise APIError(str(e), status_code=400)

class AdminPrompts(Resource):
    @admin_required
    def get(self):
        return {"prompts": [p.to_dict() for p in CatalogService().list_prompts(current_user())]}, 200

class AdminPrompt(Resource):
    @admin_required
    def put(self, prompt_id):
        """Controller: Replace a prompt template"""
        parser = reqparse.RequestParser()
        parser.add_argument('content', type=str, required=True, location='json', help="Content is required")
        parser.add_argument('name', type=str, location='json')
        args = parser.parse_args()

        try:
            prompt = CatalogService().update_prompt(current_user(), prompt_id, args['content'], args['name'])
            return prompt.to_dict(), 200
        except ValueError as e:
            raise APIError(str(e), status_code=400)
