# predictpro/core/constants.py
ROLE_USER = 'User'
ROLE_ASSISTANT = 'Assistant'
ROLE_ADMIN = 'Admin'
ROLE_SUPERADMIN = 'SuperAdmin'
ROLES = (ROLE_USER, ROLE_ASSISTANT, ROLE_ADMIN, ROLE_SUPERADMIN)
STAFF_ROLES = (ROLE_ASSISTANT, ROLE_ADMIN, ROLE_SUPERADMIN)
ADMIN_ROLES = (ROLE_ADMIN, ROLE_SUPERADMIN)

PREMIUM_TIERS = ('standard', 'pro', 'enterprise')

GAME_AVIATOR = 'aviator'
GAME_CRASH = 'crash'
GAME_GEMS_MINES = 'gems-mines'
GAME_VIP_SLIP = 'vip-slip'
GAME_TYPES = (GAME_AVIATOR, GAME_CRASH, GAME_GEMS_MINES, GAME_VIP_SLIP)

TXN_PURCHASE = 'purchase'
TXN_COMMISSION = 'commission'

TXN_PENDING = 'pending'
TXN_VERIFIED = 'verified'
TXN_FAILED = 'failed'
TXN_COMPLETED = 'completed'

CREDIT_AVAILABLE = 'available'
CREDIT_CLAIMED = 'claimed'

# Allowed forward moves; terminal states map to nothing
TXN_TRANSITIONS = {
    TXN_PENDING: (TXN_VERIFIED, TXN_FAILED),
    TXN_VERIFIED: (),
    TXN_FAILED: (),
    TXN_COMPLETED: (),
}

PAYMENT_METHODS = ('mpesa', 'airtel')

PREDICTION_PENDING = 'pending'
PREDICTION_WON = 'won'
PREDICTION_LOST = 'lost'
PREDICTION_OUTCOMES = (PREDICTION_WON, PREDICTION_LOST)

CHAT_SYSTEM = 'system'
CHAT_ASSISTANT = 'assistant'
CHAT_MANAGER = 'manager'
CHAT_TYPES = (CHAT_SYSTEM, CHAT_ASSISTANT, CHAT_MANAGER)

AUDIENCE_ALL = 'all'
AUDIENCE_PREMIUM = 'premium'
AUDIENCE_STAFF = 'staff'
AUDIENCE_USER = 'user'
BROADCAST_AUDIENCES = (AUDIENCE_ALL, AUDIENCE_PREMIUM, AUDIENCE_STAFF)

AUDIT_USER_REGISTERED = 'user_registered'
AUDIT_PREDICTION_REQUEST = 'prediction_request'
AUDIT_BYPASS_ATTEMPT = 'bypass_attempt'
AUDIT_LICENSE_EXPIRED = 'license_expired'
AUDIT_LICENSE_ACTIVATED = 'license_activated'
AUDIT_PAYMENT_SUBMITTED = 'payment_submitted'
AUDIT_PAYMENT_VERIFIED = 'payment_verified'
AUDIT_PAYMENT_REJECTED = 'payment_rejected'
AUDIT_USER_UPDATED = 'user_updated'
AUDIT_BROADCAST_SENT = 'broadcast_sent'
AUDIT_CREDIT_REGISTERED = 'credit_registered'
AUDIT_ACTIONS = (
    AUDIT_USER_REGISTERED, AUDIT_PREDICTION_REQUEST, AUDIT_BYPASS_ATTEMPT,
    AUDIT_LICENSE_EXPIRED, AUDIT_LICENSE_ACTIVATED, AUDIT_PAYMENT_SUBMITTED,
    AUDIT_PAYMENT_VERIFIED, AUDIT_PAYMENT_REJECTED, AUDIT_USER_UPDATED,
    AUDIT_BROADCAST_SENT, AUDIT_CREDIT_REGISTERED,
)

SYSTEM_SENDER_ID = 'SYSTEM'
ASSISTANT_SENDER_ID = 'AI_ASSISTANT'
