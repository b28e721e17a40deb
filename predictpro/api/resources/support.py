# predictpro/api/resources/support.py
from flask_restful import Resource, reqparse
from ...services.notification_service import NotificationService
from ...services.support_service import SupportService
from ...utils.exceptions import APIError
from ..middleware import authenticated, current_user, client_ip

class SupportChat(Resource):
    @authenticated
    def get(self, chat_type):
        messages = SupportService().history(current_user(), chat_type)
        return {"chat_type": chat_type, "messages": [m.to_dict() for m in messages]}, 200

    @authenticated
    def post(self, chat_type):
        """Controller: Send a message to the support assistant"""
        parser = reqparse.RequestParser()
        parser.add_argument('message', type=str, required=True, location='json', help="message is required")
        args = parser.parse_args()

        try:
            reply = SupportService().send(current_user(), chat_type, args['message'], ip_address=client_ip())
            return {"reply": reply.to_dict()}, 200
        except ValueError as e:
            raise APIError(str(e), status_code=400)

class Notifications(Resource):
    @authenticated
    def get(self):
        notifications = NotificationService().visible_notifications(current_user())
        return {"notifications": [n.to_dict() for n in notifications]}, 200
