# predictpro/repositories/transaction_repository.py
from sqlalchemy import func, update
from ..core.database import Transaction
from ..core.constants import (
    TXN_PURCHASE, TXN_COMMISSION, TXN_PENDING, TXN_VERIFIED, TXN_COMPLETED, TXN_TRANSITIONS,
)
from .. import db
from ..utils.logger import setup_logger
from .base import keyset_page

# Purchases approved by an admin end as verified; auto-verified ones as completed
PAID_PURCHASE_STATUSES = (TXN_VERIFIED, TXN_COMPLETED)

class TransactionRepository:
    def __init__(self):
        self.logger = setup_logger()

    def create(self, **fields):
        """Repository: Record a transaction"""
        txn = Transaction(**fields)
        db.session.add(txn)
        db.session.flush()
        self.logger.info(f"Repository: Created {txn.type} transaction {txn.id} for user {txn.user_id}")
        return txn

    def get_by_id(self, txn_id):
        return db.session.get(Transaction, txn_id)

    def list_pending_purchases(self):
        return (Transaction.query
                .filter_by(type=TXN_PURCHASE, status=TXN_PENDING)
                .order_by(Transaction.created_at.asc(), Transaction.id.asc())
                .all())

    def list_for_user(self, user_id, limit, cursor=None):
        return keyset_page(Transaction.query.filter_by(user_id=user_id), Transaction.id, limit, cursor)

    def transition(self, txn, new_status):
        """Repository: Move a transaction forward from its current status.

        The update is conditional on the status read by the caller, so a
        second decision on the same transaction changes nothing and
        returns False.
        """
        if new_status not in TXN_TRANSITIONS.get(txn.status, ()):
            raise ValueError(f"Transaction cannot move from '{txn.status}' to '{new_status}'")
        result = db.session.execute(
            update(Transaction)
            .where(Transaction.id == txn.id, Transaction.status == txn.status)
            .values(status=new_status)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return False
        db.session.refresh(txn)
        self.logger.info(f"Repository: Transaction {txn.id} moved to {new_status}")
        return True

    def has_verified_purchase(self, user_id, exclude_id=None):
        query = Transaction.query.filter(Transaction.user_id == user_id,
                                         Transaction.type == TXN_PURCHASE,
                                         Transaction.status.in_(PAID_PURCHASE_STATUSES))
        if exclude_id is not None:
            query = query.filter(Transaction.id != exclude_id)
        return query.first() is not None

    def total_commission(self, user_id):
        total = (db.session.query(func.coalesce(func.sum(Transaction.amount), 0.0))
                 .filter(Transaction.user_id == user_id, Transaction.type == TXN_COMMISSION)
                 .scalar())
        return float(total)

    def verified_revenue(self):
        total = (db.session.query(func.coalesce(func.sum(Transaction.amount), 0.0))
                 .filter(Transaction.type == TXN_PURCHASE, Transaction.status.in_(PAID_PURCHASE_STATUSES))
                 .scalar())
        return float(total)
