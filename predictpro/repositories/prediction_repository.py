# predictpro/repositories/prediction_repository.py
from sqlalchemy import func, update
from ..core.database import Prediction, utcnow
from ..core.constants import PREDICTION_PENDING
from .. import db
from ..utils.logger import setup_logger
from .base import keyset_page

class PredictionRepository:
    def __init__(self):
        self.logger = setup_logger()

    def create(self, user_id, license_id, game_type, prediction_data, disclaimer):
        """Repository: Log a generated prediction"""
        prediction = Prediction(
            user_id=user_id,
            license_id=license_id,
            game_type=game_type,
            prediction_data=prediction_data,
            disclaimer=disclaimer,
        )
        db.session.add(prediction)
        db.session.flush()
        self.logger.info(f"Repository: Logged {game_type} prediction {prediction.id} for user {user_id}")
        return prediction

    def get_by_id(self, prediction_id):
        return db.session.get(Prediction, prediction_id)

    def list_for_user(self, user_id, limit, cursor=None, game_type=None):
        query = Prediction.query.filter_by(user_id=user_id)
        if game_type:
            query = query.filter_by(game_type=game_type)
        return keyset_page(query, Prediction.id, limit, cursor)

    def recent_resolved(self, user_id, game_type, limit=20):
        return (Prediction.query
                .filter(Prediction.user_id == user_id,
                        Prediction.game_type == game_type,
                        Prediction.status != PREDICTION_PENDING)
                .order_by(Prediction.id.desc())
                .limit(limit)
                .all())

    def set_outcome(self, prediction, status, mine_locations=None):
        """Repository: Record won/lost on a pending prediction; False if already resolved"""
        values = {"status": status, "resolved_at": utcnow()}
        if mine_locations is not None:
            values["mine_locations"] = mine_locations
        result = db.session.execute(
            update(Prediction)
            .where(Prediction.id == prediction.id, Prediction.status == PREDICTION_PENDING)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return False
        db.session.refresh(prediction)
        return True

    def count_by_game(self):
        rows = (db.session.query(Prediction.game_type, func.count(Prediction.id))
                .group_by(Prediction.game_type)
                .all())
        return {game_type: count for game_type, count in rows}

    def count_by_status(self):
        rows = (db.session.query(Prediction.status, func.count(Prediction.id))
                .group_by(Prediction.status)
                .all())
        return {status: count for status, count in rows}
