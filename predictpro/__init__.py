from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
from flask_socketio import SocketIO
from flask_cors import CORS
from .config.settings import Config
from .utils.logger import setup_logger
from .utils.exceptions import handle_api_error, ErrorHandlingApi

db = SQLAlchemy()
jwt = JWTManager()
socketio = SocketIO()

def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize CORS
    CORS(app, resources={r"/api/*": {"origins": app.config['CORS_ORIGINS']}})

    # Initialize extensions
    db.init_app(app)
    jwt.init_app(app)
    socketio.init_app(app, cors_allowed_origins=app.config['CORS_ORIGINS'], async_mode='threading')
    api = ErrorHandlingApi(app)

    # Setup logger
    logger = setup_logger()
    logger.info("Initializing PredictPro backend")

    # Register error handler
    app.errorhandler(Exception)(handle_api_error)

    from .services.ai_gateway import AIGateway
    from .services.realtime_service import RealtimeService

    app.extensions['ai_gateway'] = AIGateway.from_config(app.config)
    realtime_service = RealtimeService(socketio)
    realtime_service.register_handlers()
    app.extensions['realtime'] = realtime_service

    # Register API resources
    from .api.resources.health import HealthCheck
    from .api.resources.auth import Register, Login, CurrentUser
    from .api.resources.catalog import Plans, Games, AdminPlan, AdminGame, AdminPrompts, AdminPrompt
    from .api.resources.licenses import Purchase, Licenses, Wallet, Referrals
    from .api.resources.predictions import Predict, Predictions, PredictionFeedback, AdminResolveVipSlip
    from .api.resources.support import SupportChat, Notifications
    from .api.resources.admin import (
        AdminPayments, AdminPayment, AdminCredits, AdminUsers, AdminUserLookup, AdminUser, AdminUserLicenses,
        AdminBroadcasts, AdminAuditLogs, AdminAnalytics,
    )

    api.add_resource(HealthCheck, '/')
    api.add_resource(Register, '/api/auth/register')
    api.add_resource(Login, '/api/auth/login')
    api.add_resource(CurrentUser, '/api/auth/me')
    api.add_resource(Plans, '/api/plans')
    api.add_resource(Games, '/api/games')
    api.add_resource(Purchase, '/api/purchase')
    api.add_resource(Licenses, '/api/licenses')
    api.add_resource(Wallet, '/api/wallet')
    api.add_resource(Referrals, '/api/referrals')
    api.add_resource(Predict, '/api/games/<string:game_type>/predict')
    api.add_resource(Predictions, '/api/predictions')
    api.add_resource(PredictionFeedback, '/api/predictions/<int:prediction_id>/feedback')
    api.add_resource(Notifications, '/api/notifications')
    api.add_resource(SupportChat, '/api/support/<string:chat_type>')
    api.add_resource(AdminPayments, '/api/admin/payments')
    api.add_resource(AdminPayment, '/api/admin/payments/<int:txn_id>')
    api.add_resource(AdminCredits, '/api/admin/pre-verified-payments')
    api.add_resource(AdminUsers, '/api/admin/users')
    api.add_resource(AdminUserLookup, '/api/admin/users/lookup')
    api.add_resource(AdminUser, '/api/admin/users/<int:user_id>')
    api.add_resource(AdminUserLicenses, '/api/admin/users/<int:user_id>/licenses')
    api.add_resource(AdminPlan, '/api/admin/plans/<string:plan_id>')
    api.add_resource(AdminGame, '/api/admin/games/<string:game_id>')
    api.add_resource(AdminPrompts, '/api/admin/prompts')
    api.add_resource(AdminPrompt, '/api/admin/prompts/<string:prompt_id>')
    api.add_resource(AdminBroadcasts, '/api/admin/broadcasts')
    api.add_resource(AdminAuditLogs, '/api/admin/audit-logs')
    api.add_resource(AdminAnalytics, '/api/admin/analytics')
    api.add_resource(AdminResolveVipSlip, '/api/admin/predictions/<int:prediction_id>/resolve')

    # Initialize database
    from .core import database  # noqa: F401  registers the models
    from .core.seed import seed_defaults
    with app.app_context():
        db.create_all()
        if app.config.get('SEED_DEFAULTS'):
            seed_defaults()

    return app
