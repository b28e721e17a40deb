# predictpro/services/wallet_service.py
from ..repositories.user_repository import UserRepository
from ..repositories.transaction_repository import TransactionRepository

class WalletService:
    def __init__(self):
        self.user_repository = UserRepository()
        self.transaction_repository = TransactionRepository()

    def referrals(self, user):
        referred = self.user_repository.list_referrals(user.id)
        return {
            "referral_code": user.referral_code,
            "referred_users": [
                {"id": u.id, "email": u.email, "has_purchased": u.has_purchased, "joined_at": u.to_dict()["created_at"]}
                for u in referred
            ],
            "successful_referrals": sum(1 for u in referred if u.has_purchased),
            "total_commission": self.transaction_repository.total_commission(user.id),
        }

    def wallet(self, user, limit, cursor=None):
        transactions, next_cursor = self.transaction_repository.list_for_user(user.id, limit, cursor)
        return {
            "balance": user.balance,
            "transactions": [t.to_dict() for t in transactions],
            "next_cursor": next_cursor,
        }
