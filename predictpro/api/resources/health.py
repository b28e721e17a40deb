from flask_restful import Resource

class HealthCheck(Resource):
    def get(self):
        """Controller: Check API health & list available routes"""
        routes = {
            "status": "healthy",
            "message": "PredictPro API is running",
            "routes": {
                "/": "Health check & list all routes",
                "/api/auth/register": "Register new user",
                "/api/auth/login": "Login user",
                "/api/auth/me": "Get or update current user profile",
                "/api/plans": "List license plans",
                "/api/games": "List game availability",
                "/api/purchase": "Order a license (pending payment verification)",
                "/api/licenses": "List current user's licenses",
                "/api/games/<game_type>/predict": "Request a prediction (uses one round)",
                "/api/predictions": "Prediction history",
                "/api/predictions/<id>/feedback": "Report a prediction outcome",
                "/api/wallet": "Wallet balance and transactions",
                "/api/referrals": "Referral code and earnings",
                "/api/notifications": "Notifications visible to the current user",
                "/api/support/<chat_type>": "Support chat history and messages",
                "/api/admin/payments": "Pending payments",
                "/api/admin/payments/<id>": "Approve or reject a payment",
                "/api/admin/pre-verified-payments": "List or register pre-verified payments",
                "/api/admin/users": "List users",
                "/api/admin/users/lookup": "Find a user by email",
                "/api/admin/users/<id>": "Update a user's role, suspension or premium tier",
                "/api/admin/users/<id>/licenses": "List or manually activate a user's licenses",
                "/api/admin/plans/<id>": "Edit pricing",
                "/api/admin/games/<id>": "Enable or disable a game",
                "/api/admin/prompts": "List prompt templates",
                "/api/admin/prompts/<id>": "Edit a prompt template",
                "/api/admin/broadcasts": "Send a broadcast",
                "/api/admin/audit-logs": "Search audit logs",
                "/api/admin/analytics": "Platform analytics",
                "/api/admin/predictions/<id>/resolve": "Resolve a VIP slip",
            }
        }
        return routes, 200
