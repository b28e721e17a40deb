# predictpro/repositories/credit_repository.py
from sqlalchemy import update
from ..core.database import PreVerifiedPayment, utcnow
from ..core.constants import CREDIT_AVAILABLE, CREDIT_CLAIMED
from .. import db
from ..utils.logger import setup_logger

class CreditRepository:
    def __init__(self):
        self.logger = setup_logger()

    def create(self, transaction_id, amount, currency, admin_id):
        credit = PreVerifiedPayment(
            transaction_id=transaction_id,
            amount=amount,
            currency=currency,
            admin_id=admin_id,
        )
        db.session.add(credit)
        db.session.flush()
        self.logger.info(f"Repository: Registered pre-verified payment {transaction_id}")
        return credit

    def get(self, transaction_id):
        return db.session.get(PreVerifiedPayment, transaction_id)

    def list_credits(self, status=None):
        query = PreVerifiedPayment.query
        if status:
            query = query.filter_by(status=status)
        return query.order_by(PreVerifiedPayment.created_at.desc()).all()

    def claim(self, credit, user_id):
        """Repository: Mark an available credit as used; False if someone claimed it first"""
        result = db.session.execute(
            update(PreVerifiedPayment)
            .where(PreVerifiedPayment.transaction_id == credit.transaction_id,
                   PreVerifiedPayment.status == CREDIT_AVAILABLE)
            .values(status=CREDIT_CLAIMED, claimed_by_id=user_id, claimed_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return False
        db.session.refresh(credit)
        self.logger.info(f"Repository: Pre-verified payment {credit.transaction_id} claimed by user {user_id}")
        return True
