# predictpro/services/auth_service.py
import re
import secrets
from flask_jwt_extended import create_access_token
from ..repositories.user_repository import UserRepository
from ..repositories.audit_repository import AuditRepository
from ..core.constants import AUDIT_USER_REGISTERED
from ..utils.exceptions import ForbiddenError, NotFoundError
from ..utils.logger import setup_logger
from .. import db
import bcrypt

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 8

class AuthService:
    def __init__(self):
        self.user_repository = UserRepository()
        self.audit_repository = AuditRepository()
        self.logger = setup_logger()

    def _new_referral_code(self):
        while True:
            code = f"PRO-{secrets.token_hex(3).upper()}"
            if not self.user_repository.referral_code_exists(code):
                return code

    def register(self, email, password, full_name=None, referral_code=None, ip_address=None):
        """Service: Register a new user"""
        try:
            email = (email or '').strip()
            if not EMAIL_RE.match(email):
                raise ValueError("A valid email address is required")
            if len(password or '') < MIN_PASSWORD_LENGTH:
                raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
            if self.user_repository.get_user_by_email(email):
                raise ValueError("Email address is already registered")

            referred_by_id = None
            if referral_code:
                referrer = self.user_repository.get_user_by_referral_code(referral_code)
                if referrer is None:
                    raise ValueError("Unknown referral code")
                referred_by_id = referrer.id

            hashed_password = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt())
            user = self.user_repository.create_user(
                email,
                hashed_password.decode('utf-8'),
                full_name,
                self._new_referral_code(),
                referred_by_id,
            )
            self.audit_repository.log(
                AUDIT_USER_REGISTERED,
                user_id=user.id,
                details=f"User {email} registered" + (f" via referral {referral_code}" if referred_by_id else ""),
                ip_address=ip_address,
            )
            db.session.commit()
            self.logger.info(f"User registered: {email}")
            return user
        except Exception as e:
            db.session.rollback()
            self.logger.error(f"Registration failed: {str(e)}")
            raise

    def login(self, email, password):
        """Service: Authenticate user and return JWT token"""
        try:
            user = self.user_repository.get_user_by_email(email or '')
            if not user:
                raise ValueError("Invalid email or password")

            stored_password = user.password.encode('utf-8')
            if not bcrypt.checkpw((password or '').encode('utf-8'), stored_password):
                raise ValueError("Invalid email or password")
            if user.is_suspended:
                raise ForbiddenError("This account has been suspended")

            token = create_access_token(identity=str(user.id), additional_claims=self.claims_for(user))
            self.logger.info(f"User logged in: {email}")
            return token
        except Exception as e:
            self.logger.error(f"Login failed: {str(e)}")
            raise

    @staticmethod
    def claims_for(user):
        return {
            "role": user.role,
            "is_staff": user.is_staff,
            "has_purchased": user.has_purchased,
        }

    def get_user_by_id(self, user_id):
        """Service: Get user by ID"""
        user = self.user_repository.get_user_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def update_profile(self, user, full_name=None, one_x_bet_id=None):
        """Service: Update the editable profile fields"""
        try:
            if full_name is not None:
                user.full_name = full_name.strip() or None
            if one_x_bet_id is not None:
                one_x_bet_id = one_x_bet_id.strip()
                if one_x_bet_id and not one_x_bet_id.isalnum():
                    raise ValueError("Betting account ID must be alphanumeric")
                user.one_x_bet_id = one_x_bet_id or None
            db.session.commit()
            self.logger.info(f"Profile updated for user {user.id}")
            return user
        except Exception as e:
            db.session.rollback()
            self.logger.error(f"Profile update failed: {str(e)}")
            raise
