# predictpro/api/resources/admin.py
from flask_restful import Resource, reqparse, inputs
from ...services.admin_service import AdminService
from ...services.license_service import LicenseService
from ...services.notification_service import NotificationService
from ...services.payment_service import PaymentService
from ...utils.exceptions import APIError
from ..middleware import (
    admin_required, staff_required, current_user, client_ip, add_page_arguments, page_limit,
)

class AdminPayments(Resource):
    @admin_required
    def get(self):
        pending = PaymentService().pending_payments(current_user())
        return {"payments": [
            dict(txn.to_dict(), user_email=txn.user.email) for txn in pending
        ]}, 200

class AdminPayment(Resource):
    @admin_required
    def post(self, txn_id):
        """Controller: Approve or reject a pending payment"""
        parser = reqparse.RequestParser()
        parser.add_argument('action', type=str, required=True, location='json', help="action is required")
        args = parser.parse_args()

        try:
            txn, commission = PaymentService().verify_payment(
                current_user(), txn_id, args['action'], ip_address=client_ip(),
            )
            return {
                "transaction": txn.to_dict(),
                "commission": commission.to_dict() if commission else None,
            }, 200
        except ValueError as e:
            raise APIError(str(e), status_code=400)

class AdminCredits(Resource):
    @admin_required
    def get(self):
        parser = reqparse.RequestParser()
        parser.add_argument('status', type=str, location='args')
        args = parser.parse_args()
        credits = PaymentService().list_credits(current_user(), args['status'])
        return {"credits": [c.to_dict() for c in credits]}, 200

    @admin_required
    def post(self):
        """Controller: Register a payment already confirmed on the statement"""
        parser = reqparse.RequestParser()
        parser.add_argument('transaction_id', type=str, required=True, location='json',
                            help="transaction_id is required")
        parser.add_argument('amount', type=float, required=True, location='json', help="amount must be a number")
        args = parser.parse_args()

        try:
            credit = PaymentService().register_credit(
                current_user(), args['transaction_id'], args['amount'], ip_address=client_ip(),
            )
            return credit.to_dict(), 201
        except ValueError as e:
            raise APIError(str(e), status_code=400)

class AdminUsers(Resource):
    @staff_required
    def get(self):
        parser = add_page_arguments(reqparse.RequestParser())
        parser.add_argument('new_since_hours', type=int, location='args')
        args = parser.parse_args()

        try:
            users, next_cursor = AdminService().list_users(
                current_user(), page_limit(args['limit']), args['cursor'], args['new_since_hours'],
            )
            return {"users": [u.to_dict() for u in users], "next_cursor": next_cursor}, 200
        except ValueError as e:
            raise APIError(str(e), status_code=400)

class AdminUserLookup(Resource):
    @staff_required
    def get(self):
        parser = reqparse.RequestParser()
        parser.add_argument('email', type=str, required=True, location='args', help="email is required")
        args = parser.parse_args()
        return AdminService().lookup(current_user(), args['email']), 200

class AdminUser(Resource):
    @admin_required
    def patch(self, user_id):
        """Controller: Change a user's role, suspension or premium tier"""
        parser = reqparse.RequestParser()
        parser.add_argument('role', type=str, location='json')
        parser.add_argument('is_suspended', type=inputs.boolean, location='json')
        parser.add_argument('premium_status', type=str, location='json')
        args = parser.parse_args()

        try:
            user = AdminService().update_user(
                current_user(), user_id,
                role=args['role'],
                is_suspended=args['is_suspended'],
                premium_status=args['premium_status'],
                ip_address=client_ip(),
            )
            return user.to_dict(), 200
        except ValueError as e:
            raise APIError(str(e), status_code=400)

class AdminUserLicenses(Resource):
    @staff_required
    def get(self, user_id):
        licenses = AdminService().user_licenses(current_user(), user_id)
        return {"licenses": [l.to_dict() for l in licenses]}, 200

    @admin_required
    def post(self, user_id):
        """Controller: Activate a license without a payment"""
        parser = reqparse.RequestParser()
        parser.add_argument('game_type', type=str, required=True, location='json', help="game_type is required")
        args = parser.parse_args()

        license = LicenseService().activate_license(current_user(), user_id, args['game_type'])
        return license.to_dict(), 200

class AdminBroadcasts(Resource):
    @admin_required
    def post(self):
        """Controller: Send a notification to an audience"""
        parser = reqparse.RequestParser()
        parser.add_argument('message', type=str, required=True, location='json', help="message is required")
        parser.add_argument('audience', type=str, default='all', location='json')
        args = parser.parse_args()

        try:
            notification = NotificationService().broadcast(current_user(), args['message'], args['audience'])
            return notification.to_dict(), 201
        except ValueError as e:
            raise APIError(str(e), status_code=400)

class AdminAuditLogs(Resource):
    @staff_required
    def get(self):
        parser = reqparse.RequestParser()
        parser.add_argument('action', type=str, location='args')
        parser.add_argument('limit', type=int, default=10, location='args')
        args = parser.parse_args()

        try:
            logs = AdminService().audit_logs(current_user(), args['action'], page_limit(args['limit']))
            return {"logs": [entry.to_dict() for entry in logs]}, 200
        except ValueError as e:
            raise APIError(str(e), status_code=400)

class AdminAnalytics(Resource):
    @admin_required
    def get(self):
        return AdminService().analytics(current_user()), 200
