# predictpro/repositories/notification_repository.py
from sqlalchemy import and_, or_
from ..core.database import Notification
from ..core.constants import AUDIENCE_ALL, AUDIENCE_PREMIUM, AUDIENCE_STAFF, AUDIENCE_USER
from .. import db

class NotificationRepository:
    def create(self, message, target_audience, sender_id, sender_email=None, user_id=None):
        notification = Notification(
            message=message,
            target_audience=target_audience,
            sender_id=sender_id,
            sender_email=sender_email,
            user_id=user_id,
        )
        db.session.add(notification)
        db.session.flush()
        return notification

    def list_visible(self, user, limit):
        """Repository: Notifications addressed to the user's audiences, newest first"""
        audiences = [Notification.target_audience == AUDIENCE_ALL]
        if user.is_staff:
            audiences.append(Notification.target_audience == AUDIENCE_STAFF)
        if user.has_purchased:
            audiences.append(Notification.target_audience == AUDIENCE_PREMIUM)
        audiences.append(and_(Notification.target_audience == AUDIENCE_USER,
                              Notification.user_id == user.id))
        return (Notification.query
                .filter(or_(*audiences))
                .order_by(Notification.id.desc())
                .limit(limit)
                .all())
