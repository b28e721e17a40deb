# predictpro/services/license_service.py
from ..repositories.license_repository import LicenseRepository
from ..repositories.transaction_repository import TransactionRepository
from ..repositories.audit_repository import AuditRepository
from ..repositories.user_repository import UserRepository
from ..repositories.credit_repository import CreditRepository
from ..core.constants import (
    PAYMENT_METHODS, TXN_PURCHASE, TXN_PENDING, TXN_COMPLETED, CREDIT_AVAILABLE,
    AUDIT_PAYMENT_SUBMITTED, AUDIT_PAYMENT_VERIFIED, AUDIT_LICENSE_ACTIVATED,
)
from ..utils.exceptions import NotFoundError, ConflictError
from ..utils.logger import setup_logger
from .access import require_admin
from .catalog_service import CatalogService
from .payment_service import PaymentService
from .realtime_service import get_realtime
from .. import db

class LicenseService:
    def __init__(self):
        self.license_repository = LicenseRepository()
        self.transaction_repository = TransactionRepository()
        self.audit_repository = AuditRepository()
        self.user_repository = UserRepository()
        self.credit_repository = CreditRepository()
        self.payments = PaymentService()
        self.catalog = CatalogService()
        self.logger = setup_logger()

    def list_licenses(self, user):
        return self.license_repository.list_for_user(user.id)

    def purchase(self, user, plan_id, payment_method, submitted_tx_id=None, amount=None, ip_address=None):
        """Service: Place a license order.

        The license row is created inactive when the user has none for the
        game. When the submitted reference matches an unclaimed pre-verified
        payment that covers the plan price, the order is verified on the spot:
        the credit is claimed, the rounds and any referral commission are paid
        and everything lands in a single commit. Otherwise the transaction
        waits for an admin.
        """
        plan = self.catalog.get_plan(plan_id)
        auto_verified = False
        try:
            if payment_method not in PAYMENT_METHODS:
                raise ValueError(f"Payment method must be one of: {', '.join(PAYMENT_METHODS)}")
            if amount is not None and amount <= 0:
                raise ValueError("Amount must be a positive number")
            game = self.catalog.get_game_status(plan.id)
            if not game.is_enabled:
                raise ValueError(f"{game.name} is currently unavailable: {game.disabled_reason}")

            reference = (submitted_tx_id or '').strip().upper() or None
            credit = self.credit_repository.get(reference) if reference else None
            if credit is not None and (credit.status != CREDIT_AVAILABLE or credit.amount < plan.price):
                credit = None

            license = self.license_repository.get_or_create(user.id, plan.id)
            txn = self.transaction_repository.create(
                user_id=user.id,
                license_id=license.id,
                type=TXN_PURCHASE,
                description=(f"Auto-verified purchase of {plan.name} license" if credit is not None
                             else f"Purchase of {plan.name} license"),
                amount=plan.price,
                claimed_amount=float(amount) if amount is not None else plan.price,
                currency=plan.currency,
                payment_method=payment_method,
                rounds=plan.rounds,
                submitted_tx_id=reference,
                status=TXN_COMPLETED if credit is not None else TXN_PENDING,
            )
            self.audit_repository.log(
                AUDIT_PAYMENT_SUBMITTED,
                user_id=user.id,
                details=f"User {user.email} ordered {plan.name} ({plan.currency} {plan.price}) as transaction {txn.id}.",
                ip_address=ip_address,
            )
            if credit is not None:
                if not self.credit_repository.claim(credit, user.id):
                    raise ConflictError(f"Payment {reference} has already been used")
                self.license_repository.add_rounds(license, plan.rounds, verified=True)
                self.payments.pay_referral_commission(user, txn)
                user.has_purchased = True
                self.audit_repository.log(
                    AUDIT_PAYMENT_VERIFIED,
                    user_id=user.id,
                    details=f"Transaction {txn.id} auto-verified against pre-verified payment {reference}.",
                    ip_address=ip_address,
                )
                auto_verified = True
            db.session.commit()
            self.logger.info(f"Service: Purchase {txn.id} of {plan.id} placed by user {user.id} ({txn.status})")
        except Exception as e:
            db.session.rollback()
            self.logger.error(f"Service: Purchase of {plan_id} failed for user {user.id}: {str(e)}")
            raise

        if auto_verified:
            get_realtime().emit_to_user(user.id, 'license_activated', license.to_dict())
        return txn

    def activate_license(self, actor, user_id, game_type):
        """Service: Grant a plan's rounds directly, bypassing the payment queue"""
        require_admin(actor, "activate licenses")
        user = self.user_repository.get_user_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        plan = self.catalog.get_plan(game_type)
        try:
            license = self.license_repository.get_or_create(user.id, plan.id)
            self.license_repository.add_rounds(license, plan.rounds, verified=True)
            self.audit_repository.log(
                AUDIT_LICENSE_ACTIVATED,
                user_id=user.id,
                details=f"Admin {actor.email} activated {plan.name} license ({plan.rounds} rounds) for {user.email}.",
            )
            db.session.commit()
            self.logger.info(f"Service: {plan.name} license activated for user {user.id} by {actor.email}")
        except Exception as e:
            db.session.rollback()
            self.logger.error(f"Service: License activation failed for user {user_id}: {str(e)}")
            raise
        get_realtime().emit_to_user(user.id, 'license_activated', license.to_dict())
        return license
