# predictpro/services/admin_service.py
from datetime import timedelta
from ..repositories.user_repository import UserRepository
from ..repositories.license_repository import LicenseRepository
from ..repositories.transaction_repository import TransactionRepository
from ..repositories.prediction_repository import PredictionRepository
from ..repositories.audit_repository import AuditRepository
from ..core.constants import (
    ROLES, ROLE_SUPERADMIN, ADMIN_ROLES, PREMIUM_TIERS, AUDIT_ACTIONS, AUDIT_USER_UPDATED,
    PREDICTION_WON, PREDICTION_LOST,
)
from ..core.database import utcnow
from ..utils.exceptions import ForbiddenError, NotFoundError
from ..utils.logger import setup_logger
from .access import require_admin, require_staff
from .. import db

class AdminService:
    def __init__(self):
        self.user_repository = UserRepository()
        self.license_repository = LicenseRepository()
        self.transaction_repository = TransactionRepository()
        self.prediction_repository = PredictionRepository()
        self.audit_repository = AuditRepository()
        self.logger = setup_logger()

    def list_users(self, actor, limit, cursor=None, new_since_hours=None):
        require_staff(actor, "list users")
        created_since = None
        if new_since_hours is not None:
            if new_since_hours <= 0:
                raise ValueError("new_since_hours must be positive")
            created_since = utcnow() - timedelta(hours=new_since_hours)
        return self.user_repository.list_users(limit, cursor, created_since)

    def get_user(self, user_id):
        user = self.user_repository.get_user_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def lookup(self, actor, email):
        """Service: A user's account, licenses and latest transactions by email"""
        require_staff(actor, "look up users")
        user = self.user_repository.get_user_by_email((email or '').strip())
        if user is None:
            raise NotFoundError(f"No user registered with {email}")
        transactions, _ = self.transaction_repository.list_for_user(user.id, limit=20)
        return {
            "user": user.to_dict(),
            "licenses": [l.to_dict() for l in self.license_repository.list_for_user(user.id)],
            "transactions": [t.to_dict() for t in transactions],
        }

    def update_user(self, actor, user_id, role=None, is_suspended=None, premium_status=None, ip_address=None):
        """Service: Change a user's role, suspension or premium tier.

        Only a SuperAdmin may grant or revoke the Admin and SuperAdmin roles,
        and a SuperAdmin account can never be suspended.
        """
        require_admin(actor, "manage users")
        user = self.get_user(user_id)
        changes = []
        try:
            if role is not None and role != user.role:
                if role not in ROLES:
                    raise ValueError(f"Role must be one of: {', '.join(ROLES)}")
                if (role in ADMIN_ROLES or user.role in ADMIN_ROLES) and actor.role != ROLE_SUPERADMIN:
                    raise ForbiddenError("Only a SuperAdmin can grant or revoke admin roles")
                changes.append(f"role {user.role} -> {role}")
                user.role = role
            if is_suspended is not None and is_suspended != user.is_suspended:
                if is_suspended and user.role == ROLE_SUPERADMIN:
                    raise ForbiddenError("A SuperAdmin account cannot be suspended")
                if is_suspended and user.id == actor.id:
                    raise ValueError("You cannot suspend your own account")
                changes.append("suspended" if is_suspended else "reinstated")
                user.is_suspended = is_suspended
            if premium_status is not None and premium_status != user.premium_status:
                if premium_status not in PREMIUM_TIERS:
                    raise ValueError(f"Premium status must be one of: {', '.join(PREMIUM_TIERS)}")
                changes.append(f"premium {user.premium_status} -> {premium_status}")
                user.premium_status = premium_status

            if changes:
                self.audit_repository.log(
                    AUDIT_USER_UPDATED,
                    user_id=user.id,
                    details=f"{actor.email} updated {user.email}: {', '.join(changes)}.",
                    ip_address=ip_address,
                )
                db.session.commit()
                self.logger.info(f"Service: User {user.id} updated by {actor.email}: {', '.join(changes)}")
            return user
        except Exception as e:
            db.session.rollback()
            self.logger.error(f"Service: Updating user {user_id} failed: {str(e)}")
            raise

    def user_licenses(self, actor, user_id):
        require_staff(actor, "view licenses")
        return self.license_repository.list_for_user(self.get_user(user_id).id)

    def audit_logs(self, actor, action=None, limit=10):
        require_staff(actor, "view audit logs")
        if action and action not in AUDIT_ACTIONS:
            raise ValueError(f"Unknown audit action: {action}")
        return self.audit_repository.search(action, limit)

    def analytics(self, actor):
        require_admin(actor, "view analytics")
        by_status = self.prediction_repository.count_by_status()
        won = by_status.get(PREDICTION_WON, 0)
        lost = by_status.get(PREDICTION_LOST, 0)
        resolved = won + lost
        return {
            "total_users": self.user_repository.count_users(),
            "suspended_users": [u.to_dict() for u in self.user_repository.list_suspended()],
            "predictions_by_game": self.prediction_repository.count_by_game(),
            "won": won,
            "lost": lost,
            "success_rate": round(won / resolved * 100, 1) if resolved else 0.0,
            "verified_revenue": self.transaction_repository.verified_revenue(),
        }
