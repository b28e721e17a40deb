# predictpro/api/resources/auth.py
from flask_restful import Resource, reqparse
from ...services.auth_service import AuthService
from ...utils.exceptions import APIError
from ..middleware import authenticated, current_user, client_ip

class Register(Resource):
    def post(self):
        """Controller: Register a new user"""
        parser = reqparse.RequestParser()
        parser.add_argument('email', type=str, required=True, location='json', help="Email is required")
        parser.add_argument('password', type=str, required=True, location='json', help="Password is required")
        parser.add_argument('full_name', type=str, location='json')
        parser.add_argument('referral_code', type=str, location='json')
        args = parser.parse_args()

        try:
            auth_service = AuthService()
            user = auth_service.register(
                args['email'], args['password'], args['full_name'],
                referral_code=args['referral_code'], ip_address=client_ip(),
            )
            return {"message": "User registered successfully", "user": user.to_dict()}, 201
        except ValueError as e:
            raise APIError(f"Registration failed: {str(e)}", status_code=400)

class Login(Resource):
    def post(self):
        """Controller: Login and return JWT token"""
        parser = reqparse.RequestParser()
        parser.add_argument('email', type=str, required=True, location='json', help="Email is required")
        parser.add_argument('password', type=str, required=True, location='json', help="Password is required")
        args = parser.parse_args()

        try:
            token = AuthService().login(args['email'], args['password'])
            return {"access_token": token}, 200
        except ValueError as e:
            raise APIError(f"Login failed: {str(e)}", status_code=401)

class CurrentUser(Resource):
    @authenticated
    def get(self):
        """Controller: Get current user info"""
        return current_user().to_dict(), 200

    @authenticated
    def patch(self):
        """Controller: Update the current user's profile"""
        parser = reqparse.RequestParser()
        parser.add_argument('full_name', type=str, location='json')
        parser.add_argument('one_x_bet_id', type=str, location='json')
        args = parser.parse_args()

        try:
            user = AuthService().update_profile(current_user(), args['full_name'], args['one_x_bet_id'])
            return user.to_dict(), 200
        except ValueError as e:
            raise APIError(str(e), status_code=400)
