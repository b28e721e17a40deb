# predictpro/repositories/license_repository.py
from sqlalchemy import update
from ..core.database import License
from .. import db
from ..utils.logger import setup_logger

class LicenseRepository:
    def __init__(self):
        self.logger = setup_logger()

    def get_license(self, user_id, game_type):
        return License.query.filter_by(user_id=user_id, game_type=game_type).first()

    def get_by_id(self, license_id):
        return db.session.get(License, license_id)

    def list_for_user(self, user_id):
        return License.query.filter_by(user_id=user_id).order_by(License.game_type).all()

    def get_or_create(self, user_id, game_type):
        """Repository: Return the user's license for a game, creating an inactive one if missing"""
        license = self.get_license(user_id, game_type)
        if license is None:
            license = License(user_id=user_id, game_type=game_type, rounds_remaining=0,
                              payment_verified=False, is_active=False)
            db.session.add(license)
            db.session.flush()
            self.logger.info(f"Repository: Created license {license.id} ({game_type}) for user {user_id}")
        return license

    def consume_round(self, license):
        """Repository: Take one round from an active license.

        Returns False when the license had no round left. The guard on
        rounds_remaining keeps the counter from going negative under
        concurrent requests.
        """
        result = db.session.execute(
            update(License)
            .where(License.id == license.id,
                   License.is_active.is_(True),
                   License.rounds_remaining > 0)
            .values(rounds_remaining=License.rounds_remaining - 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return False
        db.session.execute(
            update(License)
            .where(License.id == license.id, License.rounds_remaining <= 0)
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        db.session.refresh(license)
        return True

    def add_rounds(self, license, rounds, verified=True):
        """Repository: Credit rounds and (re)activate the license"""
        db.session.execute(
            update(License)
            .where(License.id == license.id)
            .values(rounds_remaining=License.rounds_remaining + rounds)
            .execution_options(synchronize_session=False)
        )
        db.session.refresh(license)
        if verified:
            license.payment_verified = True
        license.is_active = license.payment_verified and license.rounds_remaining > 0
        db.session.flush()
        self.logger.info(f"Repository: License {license.id} credited with {rounds} rounds")
        return license
