# predictpro/repositories/chat_repository.py
from ..core.database import ChatMessage
from .. import db

class ChatRepository:
    def add_message(self, user_id, chat_type, is_user, text):
        message = ChatMessage(user_id=user_id, chat_type=chat_type, is_user=is_user, text=text)
        db.session.add(message)
        db.session.flush()
        return message

    def history(self, user_id, chat_type, limit=50):
        """Repository: Last `limit` messages of a chat in chronological order"""
        messages = (ChatMessage.query
                    .filter_by(user_id=user_id, chat_type=chat_type)
                    .order_by(ChatMessage.id.desc())
                    .limit(limit)
                    .all())
        return list(reversed(messages))
