# predictpro/services/prediction_service.py
from flask import current_app
from ..repositories.license_repository import LicenseRepository
from ..repositories.prediction_repository import PredictionRepository
from ..repositories.audit_repository import AuditRepository
from ..core.constants import (
    GAME_TYPES, GAME_GEMS_MINES, GAME_VIP_SLIP, PREDICTION_OUTCOMES, PREDICTION_LOST,
    AUDIT_PREDICTION_REQUEST, AUDIT_LICENSE_EXPIRED,
)
from ..utils.exceptions import ForbiddenError, NotFoundError, ConflictError, UpstreamError
from ..utils.logger import setup_logger
from .access import require_admin
from .ai_gateway import get_ai_gateway
from .catalog_service import CatalogService
from .local_prediction_service import LocalPredictionService, GRID_SIZE
from .notification_service import NotificationService
from .. import db

VIP_SLIP_REFUND_MESSAGE = (
    "Yesterday's VIP slip was not successful. As a token of our commitment, "
    "we have refunded your used round."
)

class PredictionService:
    def __init__(self, local_engine=None):
        self.license_repository = LicenseRepository()
        self.prediction_repository = PredictionRepository()
        self.audit_repository = AuditRepository()
        self.catalog = CatalogService()
        self.notifications = NotificationService()
        self.local_engine = local_engine or LocalPredictionService()
        self.logger = setup_logger()

    def _check_access(self, user, game_type):
        if game_type not in GAME_TYPES:
            raise NotFoundError(f"Unknown game: {game_type}")
        if user.is_suspended:
            raise ForbiddenError("This account has been suspended")
        game = self.catalog.get_game_status(game_type)
        if not game.is_enabled:
            raise ForbiddenError(f"{game.name} is currently unavailable: {game.disabled_reason}")
        if not user.one_x_bet_id:
            raise ForbiddenError("Add your 1xBet account ID to your profile before requesting predictions")

        license = self.license_repository.get_license(user.id, game_type)
        if license is None:
            raise ForbiddenError(f"No {game.name} license found. Purchase one to continue.")
        if license.payment_verified and license.rounds_remaining <= 0:
            self.audit_repository.log(
                AUDIT_LICENSE_EXPIRED,
                user_id=user.id,
                details=f"Prediction refused: {game_type} license {license.id} has no rounds left.",
            )
            db.session.commit()
            raise ForbiddenError("Your license has expired. Purchase a new one to continue.")
        if not license.payment_verified or not license.is_active:
            raise ForbiddenError("Your license is awaiting payment verification.")
        return license

    def _generate(self, user, license, game_type, teams):
        engine = current_app.config.get('PREDICTION_ENGINE', 'local')
        if engine == 'ai' and game_type != GAME_GEMS_MINES:
            gateway = get_ai_gateway()
            if game_type == GAME_VIP_SLIP:
                if not teams or not teams.get('team1') or not teams.get('team2'):
                    raise ValueError("Team names are required for a VIP slip prediction.")
                return gateway.generate_vip_slip(user, license, teams['team1'], teams['team2'])
            return gateway.generate_game_prediction(game_type, user)

        history = None
        if game_type == GAME_GEMS_MINES:
            history = self.prediction_repository.recent_resolved(user.id, game_type)
        return self.local_engine.generate(game_type, teams=teams, history=history)

    def request_prediction(self, user, game_type, teams=None, ip_address=None):
        """Service: Generate a prediction and spend one round of the user's license.

        The prediction is generated first so a provider failure costs no
        round; the round, the prediction log and the audit entry are then
        written in one database transaction.
        """
        license = self._check_access(user, game_type)
        output = self._generate(user, license, game_type, teams)
        try:
            if not self.license_repository.consume_round(license):
                raise ForbiddenError("Your license has no rounds left.")
            prediction = self.prediction_repository.create(
                user.id, license.id, game_type, output['prediction_data'], output['disclaimer'],
            )
            self.audit_repository.log(
                AUDIT_PREDICTION_REQUEST,
                user_id=user.id,
                details=f"{game_type} prediction {prediction.id}; {license.rounds_remaining} rounds left.",
                ip_address=ip_address,
            )
            db.session.commit()
            self.logger.info(f"Service: {game_type} prediction {prediction.id} served to user {user.id}")
            return prediction, license
        except Exception as e:
            db.session.rollback()
            self.logger.error(f"Service: Prediction for user {user.id} failed: {str(e)}")
            raise

    def history(self, user, limit, cursor=None, game_type=None):
        return self.prediction_repository.list_for_user(user.id, limit, cursor, game_type)

    def _owned_prediction(self, user, prediction_id):
        prediction = self.prediction_repository.get_by_id(prediction_id)
        if prediction is None or prediction.user_id != user.id:
            raise NotFoundError("Prediction not found")
        return prediction

    def submit_feedback(self, user, prediction_id, status, mine_locations=None):
        """Service: Record whether a prediction won or lost"""
        prediction = self._owned_prediction(user, prediction_id)
        if status not in PREDICTION_OUTCOMES:
            raise ValueError("Feedback must be 'won' or 'lost'")
        if prediction.game_type == GAME_VIP_SLIP:
            raise ForbiddenError("VIP slip outcomes are resolved by the support team")
        if mine_locations is not None:
            if prediction.game_type != GAME_GEMS_MINES or status != PREDICTION_LOST:
                raise ValueError("Mine locations can only be reported for a lost Gems & Mines round")
            if any(not isinstance(m, int) or not 0 <= m < GRID_SIZE for m in mine_locations):
                raise ValueError(f"Mine locations must be tile indices between 0 and {GRID_SIZE - 1}")
            mine_locations = sorted(set(mine_locations))
        try:
            if not self.prediction_repository.set_outcome(prediction, status, mine_locations):
                raise ConflictError("Feedback has already been recorded for this prediction")
            db.session.commit()
            self.logger.info(f"Service: Prediction {prediction.id} marked {status}")
        except Exception as e:
            db.session.rollback()
            self.logger.error(f"Service: Feedback on prediction {prediction_id} failed: {str(e)}")
            raise
        self._adapt(prediction, status)
        return prediction

    def _adapt(self, prediction, status):
        config = current_app.config
        if not config.get('AI_FEEDBACK_ADAPTATION') or config.get('PREDICTION_ENGINE') != 'ai':
            return
        try:
            message = get_ai_gateway().adapt_to_feedback(prediction.game_type, prediction.prediction_data, status)
            self.logger.info(f"Service: Feedback adaptation for prediction {prediction.id}: {message}")
        except UpstreamError as e:
            # Feedback is already stored; adaptation is advisory
            self.logger.warning(f"Service: Feedback adaptation failed for prediction {prediction.id}: {e.message}")

    def resolve_vip_slip(self, actor, prediction_id, outcome):
        """Service: Settle a VIP slip; a lost slip gives its round back"""
        require_admin(actor, "resolve VIP slips")
        prediction = self.prediction_repository.get_by_id(prediction_id)
        if prediction is None or prediction.game_type != GAME_VIP_SLIP:
            raise NotFoundError("VIP slip prediction not found")
        if outcome not in PREDICTION_OUTCOMES:
            raise ValueError("Outcome must be 'won' or 'lost'")

        notification = None
        try:
            if not self.prediction_repository.set_outcome(prediction, outcome):
                raise ConflictError("This VIP slip has already been resolved")
            refunded = False
            if outcome == PREDICTION_LOST and prediction.license_id:
                license = self.license_repository.get_by_id(prediction.license_id)
                if license is not None:
                    self.license_repository.add_rounds(license, 1, verified=False)
                    notification = self.notifications.notify_user(prediction.user_id, VIP_SLIP_REFUND_MESSAGE)
                    refunded = True
            db.session.commit()
            self.logger.info(f"Service: VIP slip {prediction.id} resolved as {outcome} by {actor.email}")
        except Exception as e:
            db.session.rollback()
            self.logger.error(f"Service: Resolving VIP slip {prediction_id} failed: {str(e)}")
            raise
        if notification is not None:
            self.notifications.publish(notification)
        return prediction, refunded
