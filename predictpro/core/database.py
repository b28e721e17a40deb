# predictpro/core/database.py
from datetime import datetime, timezone
from .. import db
from .constants import (
    ROLE_USER, STAFF_ROLES, TXN_PENDING, PREDICTION_PENDING, CREDIT_AVAILABLE,
)

def utcnow():
    # Naive UTC keeps MySQL DATETIME and SQLite comparisons consistent
    return datetime.now(timezone.utc).replace(tzinfo=None)

def _iso(value):
    return value.isoformat() if value else None

class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password = db.Column(db.String(120), nullable=False)
    full_name = db.Column(db.String(120), nullable=True)
    role = db.Column(db.String(20), nullable=False, default=ROLE_USER)
    is_suspended = db.Column(db.Boolean, nullable=False, default=False)
    balance = db.Column(db.Float, nullable=False, default=0.0)
    referral_code = db.Column(db.String(20), unique=True, nullable=True, index=True)
    referred_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    has_purchased = db.Column(db.Boolean, nullable=False, default=False)
    premium_status = db.Column(db.String(20), nullable=False, default='standard')
    one_x_bet_id = db.Column(db.String(64), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, index=True)

    referrer = db.relationship('User', remote_side=[id], backref='referrals')

    @property
    def is_staff(self):
        return self.role in STAFF_ROLES

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "full_name": self.full_name,
            "role": self.role,
            "is_suspended": self.is_suspended,
            "balance": self.balance,
            "referral_code": self.referral_code,
            "referred_by_id": self.referred_by_id,
            "has_purchased": self.has_purchased,
            "premium_status": self.premium_status,
            "one_x_bet_id": self.one_x_bet_id,
            "created_at": _iso(self.created_at),
        }

class Plan(db.Model):
    __tablename__ = 'plans'

    id = db.Column(db.String(32), primary_key=True)  # game slug
    name = db.Column(db.String(80), nullable=False)
    price = db.Column(db.Float, nullable=False)
    currency = db.Column(db.String(8), nullable=False, default='KES')
    rounds = db.Column(db.Integer, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "currency": self.currency,
            "rounds": self.rounds,
        }

class GameStatus(db.Model):
    __tablename__ = 'game_status'

    id = db.Column(db.String(32), primary_key=True)
    name = db.Column(db.String(80), nullable=False)
    is_enabled = db.Column(db.Boolean, nullable=False, default=True)
    disabled_reason = db.Column(db.String(255), nullable=False, default='')

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "is_enabled": self.is_enabled,
            "disabled_reason": self.disabled_reason,
        }

class License(db.Model):
    __tablename__ = 'licenses'
    __table_args__ = (db.UniqueConstraint('user_id', 'game_type', name='uq_license_user_game'),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    game_type = db.Column(db.String(32), nullable=False)
    rounds_remaining = db.Column(db.Integer, nullable=False, default=0)
    payment_verified = db.Column(db.Boolean, nullable=False, default=False)
    is_active = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "game_type": self.game_type,
            "rounds_remaining": self.rounds_remaining,
            "payment_verified": self.payment_verified,
            "is_active": self.is_active,
            "created_at": _iso(self.created_at),
        }

class Transaction(db.Model):
    __tablename__ = 'transactions'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    license_id = db.Column(db.Integer, db.ForeignKey('licenses.id'), nullable=True)
    type = db.Column(db.String(20), nullable=False)
    description = db.Column(db.String(255), nullable=False, default='')
    amount = db.Column(db.Float, nullable=False)
    claimed_amount = db.Column(db.Float, nullable=True)
    currency = db.Column(db.String(8), nullable=False, default='KES')
    payment_method = db.Column(db.String(20), nullable=True)
    rounds = db.Column(db.Integer, nullable=True)
    submitted_tx_id = db.Column(db.String(120), nullable=True)
    status = db.Column(db.String(20), nullable=False, default=TXN_PENDING, index=True)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    user = db.relationship('User', foreign_keys=[user_id])

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "license_id": self.license_id,
            "type": self.type,
            "description": self.description,
            "amount": self.amount,
            "claimed_amount": self.claimed_amount,
            "currency": self.currency,
            "payment_method": self.payment_method,
            "rounds": self.rounds,
            "submitted_tx_id": self.submitted_tx_id,
            "status": self.status,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }

class Prediction(db.Model):
    __tablename__ = 'predictions'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    license_id = db.Column(db.Integer, db.ForeignKey('licenses.id'), nullable=True)
    game_type = db.Column(db.String(32), nullable=False, index=True)
    prediction_data = db.Column(db.JSON, nullable=False)
    disclaimer = db.Column(db.String(255), nullable=False, default='')
    status = db.Column(db.String(10), nullable=False, default=PREDICTION_PENDING)
    mine_locations = db.Column(db.JSON, nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)
    resolved_at = db.Column(db.DateTime, nullable=True)

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "license_id": self.license_id,
            "game_type": self.game_type,
            "prediction_data": self.prediction_data,
            "disclaimer": self.disclaimer,
            "status": self.status,
            "mine_locations": self.mine_locations,
            "created_at": _iso(self.created_at),
            "resolved_at": _iso(self.resolved_at),
        }

class Prompt(db.Model):
    __tablename__ = 'prompts'

    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    content = db.Column(db.Text, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "content": self.content,
            "updated_at": _iso(self.updated_at),
        }

class AuditLog(db.Model):
    __tablename__ = 'audit_logs'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, nullable=True, index=True)
    action = db.Column(db.String(40), nullable=False, index=True)
    details = db.Column(db.Text, nullable=False, default='')
    ip_address = db.Column(db.String(45), nullable=False, default='not_collected')
    timestamp = db.Column(db.DateTime, default=utcnow, index=True)

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "action": self.action,
            "details": self.details,
            "ip_address": self.ip_address,
            "timestamp": _iso(self.timestamp),
        }

class Notification(db.Model):
    __tablename__ = 'notifications'

    id = db.Column(db.Integer, primary_key=True)
    message = db.Column(db.Text, nullable=False)
    target_audience = db.Column(db.String(20), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    sender_id = db.Column(db.String(64), nullable=False)
    sender_email = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "message": self.message,
            "target_audience": self.target_audience,
            "user_id": self.user_id,
            "sender_id": self.sender_id,
            "sender_email": self.sender_email,
            "created_at": _iso(self.created_at),
        }

class ChatMessage(db.Model):
    __tablename__ = 'chat_messages'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    chat_type = db.Column(db.String(20), nullable=False)
    is_user = db.Column(db.Boolean, nullable=False)
    text = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "chat_type": self.chat_type,
            "is_user": self.is_user,
            "text": self.text,
            "created_at": _iso(self.created_at),
        }

class PreVerifiedPayment(db.Model):
    """A payment an admin has already seen on the statement, claimable once by a purchase."""
    __tablename__ = 'pre_verified_payments'

    transaction_id = db.Column(db.String(120), primary_key=True)
    amount = db.Column(db.Float, nullable=False)
    currency = db.Column(db.String(8), nullable=False, default='KES')
    status = db.Column(db.String(20), nullable=False, default=CREDIT_AVAILABLE)
    admin_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    claimed_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)
    claimed_at = db.Column(db.DateTime, nullable=True)

    def to_dict(self):
        return {
            "transaction_id": self.transaction_id,
            "amount": self.amount,
            "currency": self.currency,
            "status": self.status,
            "admin_id": self.admin_id,
            "claimed_by_id": self.claimed_by_id,
            "created_at": _iso(self.created_at),
            "claimed_at": _iso(self.claimed_at),
        }
