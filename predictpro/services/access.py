# predictpro/services/access.py
from ..core.constants import ADMIN_ROLES, STAFF_ROLES
from ..utils.exceptions import ForbiddenError

def require_role(user, roles, action="perform this action"):
    if user is None or user.role not in roles:
        raise ForbiddenError(f"You are not allowed to {action}")
    if user.is_suspended:
        raise ForbiddenError("This account has been suspended")

def require_admin(user, action="perform this action"):
    require_role(user, ADMIN_ROLES, action)

def require_staff(user, action="perform this action"):
    require_role(user, STAFF_ROLES, action)
