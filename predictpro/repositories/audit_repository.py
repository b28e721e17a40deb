# predictpro/repositories/audit_repository.py
from ..core.database import AuditLog
from .. import db

class AuditRepository:
    def log(self, action, user_id=None, details='', ip_address=None):
        entry = AuditLog(
            action=action,
            user_id=user_id,
            details=details,
            ip_address=ip_address or 'not_collected',
        )
        db.session.add(entry)
        return entry

    def search(self, action=None, limit=10):
        if limit < 1:
            raise ValueError("limit must be a positive integer")
        query = AuditLog.query
        if action:
            query = query.filter_by(action=action)
        return query.order_by(AuditLog.timestamp.desc(), AuditLog.id.desc()).limit(limit).all()
