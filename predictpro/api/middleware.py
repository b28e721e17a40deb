# predictpro/api/middleware.py
from functools import wraps
from flask import current_app, g, request
from flask_jwt_extended import jwt_required, get_jwt_identity
from ..core.constants import STAFF_ROLES, ADMIN_ROLES
from ..services.auth_service import AuthService
from ..utils.exceptions import APIError, ForbiddenError

def authenticated(fn):
    """Require a valid bearer token and load the caller into `g.current_user`."""
    @wraps(fn)
    @jwt_required()
    def wrapper(*args, **kwargs):
        user = AuthService().get_user_by_id(get_jwt_identity())
        if user.is_suspended:
            raise ForbiddenError("This account has been suspended")
        g.current_user = user
        return fn(*args, **kwargs)
    return wrapper

def roles_required(*roles):
    def decorator(fn):
        @wraps(fn)
        @authenticated
        def wrapper(*args, **kwargs):
            if g.current_user.role not in roles:
                raise ForbiddenError("You do not have permission to access this resource")
            return fn(*args, **kwargs)
        return wrapper
    return decorator

staff_required = roles_required(*STAFF_ROLES)
admin_required = roles_required(*ADMIN_ROLES)

def current_user():
    return g.current_user

def client_ip():
    return request.headers.get('X-Forwarded-For', request.remote_addr or '').split(',')[0].strip() or None

def add_page_arguments(parser):
    parser.add_argument('limit', type=int, location='args')
    parser.add_argument('cursor', type=str, location='args')
    return parser

def page_limit(value):
    config = current_app.config
    if value is None:
        return config['PAGE_SIZE']
    if value < 1:
        raise APIError("limit must be a positive integer", status_code=400)
    return min(value, config['MAX_PAGE_SIZE'])
