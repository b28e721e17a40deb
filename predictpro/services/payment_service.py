# predictpro/services/payment_service.py
from flask import current_app
from ..repositories.license_repository import LicenseRepository
from ..repositories.transaction_repository import TransactionRepository
from ..repositories.audit_repository import AuditRepository
from ..repositories.user_repository import UserRepository
from ..repositories.credit_repository import CreditRepository
from ..core.constants import (
    TXN_PURCHASE, TXN_COMMISSION, TXN_PENDING, TXN_VERIFIED, TXN_FAILED, TXN_COMPLETED,
    AUDIT_PAYMENT_VERIFIED, AUDIT_PAYMENT_REJECTED, AUDIT_CREDIT_REGISTERED,
)
from ..utils.exceptions import NotFoundError, ConflictError
from ..utils.logger import setup_logger
from .access import require_admin
from .realtime_service import get_realtime
from .. import db

APPROVE = 'approve'
REJECT = 'reject'

class PaymentService:
    """Manual verification of license purchases and referral commissions."""

    def __init__(self):
        self.license_repository = LicenseRepository()
        self.transaction_repository = TransactionRepository()
        self.audit_repository = AuditRepository()
        self.user_repository = UserRepository()
        self.credit_repository = CreditRepository()
        self.logger = setup_logger()

    def pending_payments(self, actor):
        require_admin(actor, "view pending payments")
        return self.transaction_repository.list_pending_purchases()

    def verify_payment(self, actor, txn_id, action, ip_address=None):
        """Service: Approve or reject a pending purchase in one database transaction.

        Approval credits the license and, on the buyer's first verified
        purchase, pays the referrer's commission. A transaction that was
        already decided raises ConflictError and nothing is written.
        """
        require_admin(actor, "verify payments")
        if action not in (APPROVE, REJECT):
            raise ValueError("Action must be 'approve' or 'reject'")
        txn = self.transaction_repository.get_by_id(txn_id)
        if txn is None or txn.type != TXN_PURCHASE:
            raise NotFoundError("Transaction not found")

        commission = None
        try:
            new_status = TXN_VERIFIED if action == APPROVE else TXN_FAILED
            if txn.status != TXN_PENDING or not self.transaction_repository.transition(txn, new_status):
                raise ConflictError(f"Transaction {txn.id} has already been {txn.status}")

            buyer = self.user_repository.get_user_by_id(txn.user_id)
            license = self.license_repository.get_by_id(txn.license_id) if txn.license_id else None
            if action == APPROVE:
                if license is not None:
                    self.license_repository.add_rounds(license, txn.rounds or 0, verified=True)
                commission = self.pay_referral_commission(buyer, txn)
                buyer.has_purchased = True
                self.audit_repository.log(
                    AUDIT_PAYMENT_VERIFIED,
                    user_id=buyer.id,
                    details=f"Admin {actor.email} approved payment for transaction {txn.id}.",
                    ip_address=ip_address,
                )
            else:
                self.audit_repository.log(
                    AUDIT_PAYMENT_REJECTED,
                    user_id=buyer.id,
                    details=f"Admin {actor.email} rejected payment for transaction {txn.id}.",
                    ip_address=ip_address,
                )
            db.session.commit()
            self.logger.info(f"Service: Transaction {txn.id} {new_status} by {actor.email}")
        except Exception as e:
            db.session.rollback()
            self.logger.error(f"Service: Verification of transaction {txn_id} failed: {str(e)}")
            raise

        if action == APPROVE and license is not None:
            get_realtime().emit_to_user(buyer.id, 'license_activated', license.to_dict())
        return txn, commission

    def pay_referral_commission(self, buyer, txn):
        """Service: Credit the referrer when txn is the buyer's first paid purchase. Caller commits."""
        if buyer.referred_by_id is None:
            return None
        if self.transaction_repository.has_verified_purchase(buyer.id, exclude_id=txn.id):
            return None
        referrer = self.user_repository.get_user_by_id(buyer.referred_by_id)
        if referrer is None:
            self.logger.warning(f"Referrer {buyer.referred_by_id} not found. Skipping commission.")
            return None

        amount = current_app.config['COMMISSION_AMOUNT']
        commission = self.transaction_repository.create(
            user_id=referrer.id,
            type=TXN_COMMISSION,
            description=f"Referral commission from {buyer.email}",
            amount=amount,
            currency=current_app.config['DEFAULT_CURRENCY'],
            status=TXN_COMPLETED,
        )
        self.user_repository.increment_balance(referrer.id, amount)
        return commission

    def register_credit(self, actor, transaction_id, amount, ip_address=None):
        """Service: Record a payment seen on the statement so a matching purchase verifies itself"""
        require_admin(actor, "register pre-verified payments")
        try:
            transaction_id = (transaction_id or '').strip().upper()
            if not transaction_id:
                raise ValueError("Transaction ID is required")
            if amount is None or amount <= 0:
                raise ValueError("Amount must be a positive number")
            if self.credit_repository.get(transaction_id) is not None:
                raise ConflictError(f"Payment {transaction_id} is already registered")
            credit = self.credit_repository.create(
                transaction_id, float(amount), current_app.config['DEFAULT_CURRENCY'], actor.id,
            )
            self.audit_repository.log(
                AUDIT_CREDIT_REGISTERED,
                user_id=actor.id,
                details=f"Admin {actor.email} registered pre-verified payment {transaction_id} of {credit.currency} {credit.amount}.",
                ip_address=ip_address,
            )
            db.session.commit()
            self.logger.info(f"Service: Pre-verified payment {transaction_id} registered by {actor.email}")
            return credit
        except Exception as e:
            db.session.rollback()
            self.logger.error(f"Service: Registering pre-verified payment failed: {str(e)}")
            raise

    def list_credits(self, actor, status=None):
        require_admin(actor, "view pre-verified payments")
        return self.credit_repository.list_credits(status)
