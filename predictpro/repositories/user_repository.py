# predictpro/repositories/user_repository.py
from sqlalchemy import func, update
from ..core.database import User
from .. import db
from ..utils.logger import setup_logger
from .base import keyset_page

class UserRepository:
    def __init__(self):
        self.logger = setup_logger()

    def create_user(self, email, hashed_password, full_name, referral_code, referred_by_id=None):
        """Repository: Create a new user"""
        try:
            user = User(
                email=email,
                password=hashed_password,
                full_name=full_name,
                referral_code=referral_code,
                referred_by_id=referred_by_id,
            )
            db.session.add(user)
            db.session.flush()
            self.logger.info(f"Repository: Created user {email}")
            return user
        except Exception as e:
            self.logger.error(f"Repository: Failed to create user {email}: {str(e)}")
            raise

    def get_user_by_email(self, email):
        """Repository: Get user by email (case-insensitive)"""
        return User.query.filter(func.lower(User.email) == email.lower()).first()

    def get_user_by_id(self, user_id):
        """Repository: Get user by ID"""
        return db.session.get(User, int(user_id))

    def get_user_by_referral_code(self, code):
        return User.query.filter_by(referral_code=code.strip().upper()).first()

    def referral_code_exists(self, code):
        return db.session.query(User.id).filter_by(referral_code=code).first() is not None

    def list_users(self, limit, cursor=None, created_since=None):
        """Repository: Page through users, newest first"""
        query = User.query
        if created_since is not None:
            query = query.filter(User.created_at >= created_since)
        return keyset_page(query, User.id, limit, cursor)

    def list_referrals(self, user_id):
        return User.query.filter_by(referred_by_id=user_id).order_by(User.created_at.desc()).all()

    def list_suspended(self):
        return User.query.filter_by(is_suspended=True).order_by(User.id).all()

    def count_users(self):
        return User.query.count()

    def increment_balance(self, user_id, amount):
        """Repository: Atomically add to a user's wallet balance"""
        db.session.execute(
            update(User)
            .where(User.id == user_id)
            .values(balance=User.balance + amount)
            .execution_options(synchronize_session=False)
        )
        self.logger.info(f"Repository: Incremented balance of user {user_id} by {amount}")
