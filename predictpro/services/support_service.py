# predictpro/services/support_service.py
from ..repositories.chat_repository import ChatRepository
from ..repositories.audit_repository import AuditRepository
from ..core.constants import (
    CHAT_TYPES, CHAT_SYSTEM, CHAT_MANAGER, GAME_TYPES, PAYMENT_METHODS, ROLES,
    BROADCAST_AUDIENCES, AUDIT_ACTIONS, AUDIT_BYPASS_ATTEMPT,
)
from ..core.schemas import ChatTurn
from ..utils.exceptions import NotFoundError
from ..utils.logger import setup_logger
from .access import require_staff
from .admin_service import AdminService
from .ai_gateway import get_ai_gateway
from .catalog_service import CatalogService
from .license_service import LicenseService
from .notification_service import NotificationService
from .realtime_service import get_realtime
from .. import db

RESTRICTED_REPLY = "This action is restricted."
HISTORY_LIMIT = 30
MAX_TOOL_LIMIT = 100

def _tool_limit(value):
    return max(1, min(int(value), MAX_TOOL_LIMIT))

def _function(name, description, properties=None, required=()):
    return {
        "type": "function",
        "name": name,
        "description": description,
        "parameters": {
            "type": "object",
            "properties": properties or {},
            "required": list(required),
            "additionalProperties": False,
        },
    }

class SupportService:
    """Support chat: one conversation per user and chat type, answered by the AI gateway."""

    def __init__(self):
        self.chat_repository = ChatRepository()
        self.audit_repository = AuditRepository()
        self.catalog = CatalogService()
        self.licenses = LicenseService()
        self.admin = AdminService()
        self.notifications = NotificationService()
        self.logger = setup_logger()

    def _check_chat(self, user, chat_type):
        if chat_type not in CHAT_TYPES:
            raise NotFoundError(f"Unknown chat: {chat_type}")
        if chat_type == CHAT_MANAGER:
            require_staff(user, "use the manager chat")

    def history(self, user, chat_type):
        self._check_chat(user, chat_type)
        return self.chat_repository.history(user.id, chat_type)

    def send(self, user, chat_type, message, ip_address=None):
        """Service: Store the user's message, ask the assistant and store its reply"""
        self._check_chat(user, chat_type)
        message = (message or '').strip()
        if not message:
            raise ValueError("Message cannot be empty")

        previous = self.chat_repository.history(user.id, chat_type, limit=HISTORY_LIMIT)
        history = [ChatTurn(is_user=m.is_user, text=m.text) for m in previous]
        try:
            self.chat_repository.add_message(user.id, chat_type, True, message)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            self.logger.error(f"Service: Storing chat message for user {user.id} failed: {str(e)}")
            raise

        reply_text = get_ai_gateway().generate_support_response(
            chat_type, message, history, user,
            plans=self.catalog.list_plans(),
            tools=self._tools_for(user, chat_type, ip_address),
        )
        try:
            reply = self.chat_repository.add_message(user.id, chat_type, False, reply_text)
            if RESTRICTED_REPLY in reply_text:
                self.audit_repository.log(
                    AUDIT_BYPASS_ATTEMPT,
                    user_id=user.id,
                    details=f"Restricted request in {chat_type} chat: {message[:200]}",
                    ip_address=ip_address,
                )
            db.session.commit()
            self.logger.info(f"Service: {chat_type} chat reply stored for user {user.id}")
        except Exception as e:
            db.session.rollback()
            self.logger.error(f"Service: Storing chat reply for user {user.id} failed: {str(e)}")
            raise
        get_realtime().emit_to_user(user.id, 'chat_reply', reply.to_dict())
        return reply

    def _tools_for(self, user, chat_type, ip_address):
        if chat_type == CHAT_SYSTEM:
            return self._system_tools(user, ip_address)
        if chat_type == CHAT_MANAGER:
            return self._manager_tools(user, ip_address)
        return {}

    def _system_tools(self, user, ip_address):
        def request_license_activation(game_type, payment_method, payment_message):
            txn = self.licenses.purchase(
                user, game_type, payment_method,
                submitted_tx_id=payment_message[:120], ip_address=ip_address,
            )
            return {"success": True, "transaction_id": txn.id, "status": txn.status}

        return {
            "request_license_activation": (
                _function(
                    "request_license_activation",
                    "Submit the user's payment confirmation so an admin can verify it and activate the license.",
                    {
                        "game_type": {"type": "string", "enum": list(GAME_TYPES)},
                        "payment_method": {"type": "string", "enum": list(PAYMENT_METHODS)},
                        "payment_message": {"type": "string", "description": "The payment confirmation message pasted by the user."},
                    },
                    required=("game_type", "payment_method", "payment_message"),
                ),
                request_license_activation,
            ),
        }

    def _manager_tools(self, actor, ip_address):
        def lookup_id(email):
            return self.admin.lookup(actor, email)["user"]["id"]

        def get_all_users(limit=20):
            users, _ = self.admin.list_users(actor, _tool_limit(limit))
            return {"users": [u.to_dict() for u in users]}

        def get_audit_logs(action=None, limit=10):
            logs = self.admin.audit_logs(actor, action or None, _tool_limit(limit))
            return {"logs": [entry.to_dict() for entry in logs]}

        def send_broadcast_message(message, audience):
            notification = self.notifications.broadcast(actor, message, audience, via_assistant=True)
            return {"success": True, "notification_id": notification.id}

        def change_user_role(email, role):
            user = self.admin.update_user(actor, lookup_id(email), role=role, ip_address=ip_address)
            return {"success": True, "email": user.email, "role": user.role}

        def suspend_user_account(email):
            user = self.admin.update_user(actor, lookup_id(email), is_suspended=True, ip_address=ip_address)
            return {"success": True, "email": user.email, "is_suspended": user.is_suspended}

        def activate_license(email, game_type):
            license = self.licenses.activate_license(actor, lookup_id(email), game_type)
            return {"success": True, "license": license.to_dict()}

        email = {"type": "string", "description": "The user's email address."}
        return {
            "get_all_users": (
                _function("get_all_users", "List registered users, newest first.",
                          {"limit": {"type": "integer"}}),
                get_all_users,
            ),
            "get_audit_logs": (
                _function("get_audit_logs", "Search the audit log, optionally filtered by action.",
                          {"action": {"type": "string", "enum": list(AUDIT_ACTIONS)}, "limit": {"type": "integer"}}),
                get_audit_logs,
            ),
            "send_broadcast_message": (
                _function("send_broadcast_message", "Send a notification to an audience.",
                          {"message": {"type": "string"}, "audience": {"type": "string", "enum": list(BROADCAST_AUDIENCES)}},
                          required=("message", "audience")),
                send_broadcast_message,
            ),
            "change_user_role": (
                _function("change_user_role", "Change a user's role.",
                          {"email": email, "role": {"type": "string", "enum": list(ROLES)}},
                          required=("email", "role")),
                change_user_role,
            ),
            "suspend_user_account": (
                _function("suspend_user_account", "Suspend a user's account.", {"email": email}, required=("email",)),
                suspend_user_account,
            ),
            "activate_license": (
                _function("activate_license", "Activate a license for a user without a payment.",
                          {"email": email, "game_type": {"type": "string", "enum": list(GAME_TYPES)}},
                          required=("email", "game_type")),
                activate_license,
            ),
        }
