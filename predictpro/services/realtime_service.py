# predictpro/services/realtime_service.py
from flask import current_app, request
from flask_jwt_extended import decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from flask_socketio import join_room
from jwt import PyJWTError
from ..core.constants import AUDIENCE_ALL, AUDIENCE_PREMIUM, AUDIENCE_STAFF
from ..repositories.user_repository import UserRepository
from ..utils.logger import setup_logger

def user_room(user_id):
    return f"user:{user_id}"

def get_realtime():
    return current_app.extensions["realtime"]

class RealtimeService:
    """Pushes broadcasts, license activations and chat replies over Socket.IO.

    Clients connect with their access token (`auth={"token": ...}`) and are
    placed in their own room plus the audience rooms they belong to.
    """

    def __init__(self, socketio):
        self.socketio = socketio
        self.logger = setup_logger()

    def register_handlers(self):
        @self.socketio.on('connect')
        def handle_connect(auth=None):
            token = (auth or {}).get('token')
            if not token:
                self.logger.warning(f"Realtime: Connection without token refused ({request.sid})")
                return False
            try:
                claims = decode_token(token)
            except (PyJWTError, JWTExtendedException) as e:
                self.logger.warning(f"Realtime: Invalid token refused: {str(e)}")
                return False
            # Rooms follow the stored account, not the claims frozen into the token
            user = UserRepository().get_user_by_id(claims['sub'])
            if user is None or user.is_suspended:
                self.logger.warning(f"Realtime: Connection for unknown or suspended user {claims['sub']} refused")
                return False
            for room in self.rooms_for(user):
                join_room(room)
            self.logger.info(f"Realtime: User {user.id} connected")
            return True

    @staticmethod
    def rooms_for(user):
        rooms = [user_room(user.id), AUDIENCE_ALL]
        if user.is_staff:
            rooms.append(AUDIENCE_STAFF)
        if user.has_purchased:
            rooms.append(AUDIENCE_PREMIUM)
        return rooms

    def emit_broadcast(self, notification):
        self.socketio.emit('broadcast', notification.to_dict(), to=notification.target_audience)

    def emit_to_user(self, user_id, event, payload):
        self.socketio.emit(event, payload, to=user_room(user_id))
