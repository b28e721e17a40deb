# predictpro/api/resources/licenses.py
from flask_restful import Resource, reqparse
from ...services.license_service import LicenseService
from ...services.wallet_service import WalletService
from ...core.constants import TXN_COMPLETED
from ...utils.exceptions import APIError
from ..middleware import authenticated, current_user, client_ip, add_page_arguments, page_limit

class Purchase(Resource):
    @authenticated
    def post(self):
        """Controller: Order a license; it activates once the payment is verified"""
        parser = reqparse.RequestParser()
        parser.add_argument('plan_id', type=str, required=True, location='json', help="plan_id is required")
        parser.add_argument('payment_method', type=str, required=True, location='json',
                            help="payment_method is required")
        parser.add_argument('transaction_code', type=str, location='json')
        parser.add_argument('amount', type=float, location='json', help="amount must be a number")
        args = parser.parse_args()

        try:
            txn = LicenseService().purchase(
                current_user(), args['plan_id'], args['payment_method'],
                submitted_tx_id=args['transaction_code'], amount=args['amount'], ip_address=client_ip(),
            )
            if txn.status == TXN_COMPLETED:
                message = "Payment verified. Your license is now active."
            else:
                message = "Payment submitted. Your license will be activated once the payment is verified."
            return {
                "message": message,
                "transaction": txn.to_dict(),
            }, 201
        except ValueError as e:
            raise APIError(str(e), status_code=400)

class Licenses(Resource):
    @authenticated
    def get(self):
        licenses = LicenseService().list_licenses(current_user())
        return {"licenses": [l.to_dict() for l in licenses]}, 200

class Wallet(Resource):
    @authenticated
    def get(self):
        args = add_page_arguments(reqparse.RequestParser()).parse_args()
        try:
            return WalletService().wallet(current_user(), page_limit(args['limit']), args['cursor']), 200
        except ValueError as e:
            raise APIError(str(e), status_code=400)

class Referrals(Resource):
    @authenticated
    def get(self):
        return WalletService().referrals(current_user()), 200
