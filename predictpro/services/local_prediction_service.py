# predictpro/services/local_prediction_service.py
import random
from ..core.constants import (
    GAME_AVIATOR, GAME_CRASH, GAME_GEMS_MINES, GAME_VIP_SLIP, PREDICTION_WON, PREDICTION_LOST,
)

DISCLAIMER = 'Play responsibly. Predictions are not guaranteed.'
RISK_LEVELS = ['Low', 'Medium', 'High']
GRID_SIZE = 25

class LocalPredictionService:
    """Generates predictions in-process, without calling the AI provider."""

    def __init__(self, rng=None):
        self.rng = rng or random.Random()

    def _random_float(self, low, high, decimals):
        return round(self.rng.uniform(low, high), decimals)

    def multiplier_prediction(self):
        """Aviator and Crash share the same shape."""
        return {
            "targetCashout": f"{self._random_float(1.1, 12.0, 2):.2f}x",
            "riskLevel": self.rng.choice(RISK_LEVELS),
            "confidence": self.rng.randint(30, 95),
        }

    def gems_mines_prediction(self, history=None):
        """Pick the safest tiles, learning from the user's resolved rounds.

        Tiles of won rounds gain 2 points, reported mines lose 50 and the
        other tiles of a lost round lose 1. A jitter below 0.1 breaks ties.
        """
        scores = {tile: self.rng.random() * 0.1 for tile in range(GRID_SIZE)}

        for game in history or []:
            data = game.prediction_data or {}
            tiles = [t for t in data.get('safeTileIndices', []) if t in scores]
            if game.status == PREDICTION_WON:
                for tile in tiles:
                    scores[tile] += 2
            elif game.status == PREDICTION_LOST:
                mines = {m for m in (game.mine_locations or []) if m in scores}
                for mine in mines:
                    scores[mine] -= 50
                for tile in tiles:
                    if tile not in mines:
                        scores[tile] -= 1

        ranked = sorted(scores, key=lambda tile: scores[tile], reverse=True)
        count = self.rng.randint(1, 5)
        return {
            "safeTileIndices": sorted(ranked[:count]),
            "risk": self.rng.choice(RISK_LEVELS),
        }

    def vip_slip_prediction(self, team1, team2):
        markets = [
            f"Total Over {self._random_float(0.5, 4.5, 1)}",
            f"Total Under {self._random_float(1.5, 5.5, 1)}",
            '1X2',
            'Double Chance',
            'Both Teams to Score',
        ]
        outcomes = ['Home Win', 'Away Win', 'Draw', 'Yes', 'No', '1X', 'X2', '12']
        return {
            "teams": f"{team1} vs {team2}",
            "market": self.rng.choice(markets),
            "prediction": self.rng.choice(outcomes),
            "confidence": self.rng.randint(50, 95),
            "analysisSummary": f"This analysis is based on a statistical review of the match between {team1} and {team2}.",
        }

    def generate(self, game_type, teams=None, history=None):
        if game_type in (GAME_AVIATOR, GAME_CRASH):
            data = self.multiplier_prediction()
        elif game_type == GAME_GEMS_MINES:
            data = self.gems_mines_prediction(history)
        elif game_type == GAME_VIP_SLIP:
            if not teams or not teams.get('team1') or not teams.get('team2'):
                raise ValueError("Team names are required for a VIP slip prediction.")
            data = self.vip_slip_prediction(teams['team1'], teams['team2'])
        else:
            raise ValueError(f"Unsupported game type: {game_type}")
        return {"prediction_data": data, "disclaimer": DISCLAIMER}
