# predictpro/services/notification_service.py
from flask import current_app
from ..repositories.notification_repository import NotificationRepository
from ..repositories.audit_repository import AuditRepository
from ..core.constants import (
    BROADCAST_AUDIENCES, AUDIENCE_USER, AUDIT_BROADCAST_SENT, SYSTEM_SENDER_ID, ASSISTANT_SENDER_ID,
)
from ..utils.logger import setup_logger
from .access import require_admin
from .realtime_service import get_realtime
from .. import db

class NotificationService:
    def __init__(self):
        self.repository = NotificationRepository()
        self.audit_repository = AuditRepository()
        self.logger = setup_logger()

    def broadcast(self, actor, message, audience, via_assistant=False):
        """Service: Send an admin message to everyone in an audience"""
        require_admin(actor, "send broadcasts")
        try:
            message = (message or '').strip()
            if not message:
                raise ValueError("Broadcast message cannot be empty")
            if audience not in BROADCAST_AUDIENCES:
                raise ValueError(f"Audience must be one of: {', '.join(BROADCAST_AUDIENCES)}")
            if via_assistant:
                sender_id, sender_email = ASSISTANT_SENDER_ID, current_app.config['ASSISTANT_EMAIL']
            else:
                sender_id, sender_email = str(actor.id), actor.email
            notification = self.repository.create(message, audience, sender_id, sender_email)
            self.audit_repository.log(
                AUDIT_BROADCAST_SENT,
                user_id=actor.id,
                details=f"{actor.email} broadcast to '{audience}': {message[:100]}",
            )
            db.session.commit()
            self.logger.info(f"Service: Broadcast {notification.id} sent to '{audience}'")
        except Exception as e:
            db.session.rollback()
            self.logger.error(f"Service: Broadcast failed: {str(e)}")
            raise
        self.publish(notification)
        return notification

    def notify_user(self, user_id, message):
        """Stage a system notification for one user; the caller commits and publishes."""
        return self.repository.create(
            message, AUDIENCE_USER, SYSTEM_SENDER_ID,
            sender_email=current_app.config['SUPPORT_EMAIL'], user_id=user_id,
        )

    def publish(self, notification):
        realtime = get_realtime()
        if notification.target_audience == AUDIENCE_USER:
            realtime.emit_to_user(notification.user_id, 'notification', notification.to_dict())
        else:
            realtime.emit_broadcast(notification)

    def visible_notifications(self, user, limit=50):
        return self.repository.list_visible(user, limit)
