# predictpro/api/resources/predictions.py
from flask_restful import Resource, reqparse
from ...services.prediction_service import PredictionService
from ...utils.exceptions import APIError
from ..middleware import authenticated, admin_required, current_user, client_ip, add_page_arguments, page_limit

class Predict(Resource):
    @authenticated
    def post(self, game_type):
        """Controller: Generate a prediction, spending one license round"""
        parser = reqparse.RequestParser()
        parser.add_argument('team1', type=str, location='json')
        parser.add_argument('team2', type=str, location='json')
        args = parser.parse_args()

        teams = None
        if args['team1'] or args['team2']:
            teams = {"team1": (args['team1'] or '').strip(), "team2": (args['team2'] or '').strip()}
        try:
            prediction, license = PredictionService().request_prediction(
                current_user(), game_type, teams=teams, ip_address=client_ip(),
            )
            return {
                "prediction": prediction.to_dict(),
                "rounds_remaining": license.rounds_remaining,
            }, 201
        except ValueError as e:
            raise APIError(str(e), status_code=400)

class Predictions(Resource):
    @authenticated
    def get(self):
        parser = add_page_arguments(reqparse.RequestParser())
        parser.add_argument('game_type', type=str, location='args')
        args = parser.parse_args()

        try:
            items, next_cursor = PredictionService().history(
                current_user(), page_limit(args['limit']), args['cursor'], args['game_type'],
            )
            return {"predictions": [p.to_dict() for p in items], "next_cursor": next_cursor}, 200
        except ValueError as e:
            raise APIError(str(e), status_code=400)

class PredictionFeedback(Resource):
    @authenticated
    def post(self, prediction_id):
        """Controller: Report whether a prediction won or lost"""
        parser = reqparse.RequestParser()
        parser.add_argument('status', type=str, required=True, location='json', help="status is required")
        parser.add_argument('mine_locations', type=int, action='append', location='json')
        args = parser.parse_args()

        try:
            prediction = PredictionService().submit_feedback(
                current_user(), prediction_id, args['status'], args['mine_locations'],
            )
            return prediction.to_dict(), 200
        except ValueError as e:
            raise APIError(str(e), status_code=400)

class AdminResolveVipSlip(Resource):
    @admin_required
    def post(self, prediction_id):
        """Controller: Settle a VIP slip; a lost slip refunds its round"""
        parser = reqparse.RequestParser()
        parser.add_argument('outcome', type=str, required=True, location='json', help="outcome is required")
        args = parser.parse_args()

        try:
            prediction, refunded = PredictionService().resolve_vip_slip(current_user(), prediction_id, args['outcome'])
            return {"prediction": prediction.to_dict(), "refunded": refunded}, 200
        except ValueError as e:
            raise APIError(str(e), status_code=400)
