# tests/test_local_prediction.py
import random
import re
from types import SimpleNamespace
import pytest
from predictpro.services.local_prediction_service import LocalPredictionService, DISCLAIMER

@pytest.fixture
def engine():
    return LocalPredictionService(rng=random.Random(7))

@pytest.mark.parametrize('game_type', ['aviator', 'crash'])
def test_multiplier_prediction(engine, game_type):
    for _ in range(50):
        result = engine.generate(game_type)
        data = result['prediction_data']
        assert re.match(r'^\d+\.\d{2}x$', data['targetCashout'])
        assert 1.10 <= float(data['targetCashout'][:-1]) <= 12.00
        assert data['riskLevel'] in ('Low', 'Medium', 'High')
        assert 30 <= data['confidence'] <= 95
        assert result['disclaimer'] == DISCLAIMER

def test_vip_slip_needs_both_teams(engine):
    with pytest.raises(ValueError):
        engine.generate('vip-slip', teams={'team1': 'Arsenal', 'team2': ''})
    data = engine.generate('vip-slip', teams={'team1': 'Arsenal', 'team2': 'Chelsea'})['prediction_data']
    assert data['teams'] == 'Arsenal vs Chelsea'
    assert 50 <= data['confidence'] <= 95
    assert 'Arsenal' in data['analysisSummary']

def test_unsupported_game(engine):
    with pytest.raises(ValueError):
        engine.generate('roulette')

def test_gems_mines_without_history(engine):
    for _ in range(50):
        tiles = engine.gems_mines_prediction()['safeTileIndices']
        assert 1 <= len(tiles) <= 5
        assert tiles == sorted(tiles)
        assert all(0 <= t < 25 for t in tiles)

def test_gems_mines_avoids_reported_mines_and_prefers_winners():
    engine = LocalPredictionService(rng=random.Random(1))
    history = [
        SimpleNamespace(status='won', prediction_data={'safeTileIndices': [4, 9]}, mine_locations=None),
        SimpleNamespace(status='lost', prediction_data={'safeTileIndices': [12]}, mine_locations=[12, 20]),
    ]
    for _ in range(30):
        tiles = engine.gems_mines_prediction(history)['safeTileIndices']
        assert 12 not in tiles
        assert 20 not in tiles
        assert 4 in tiles or 9 in tiles
