"""Unit tests for the reputation engine."""

from datetime import datetime, timedelta, timezone

from botguard.scoring.engine import ReputationEngine
from botguard.scoring.models import EnforcementAction, ReputationState

NOW = datetime(2026, 2, 20, 10, 0, 0, tzinfo=timezone.utc)


def _make_state(score: float = 0.0, minutes_ago: float = 0, **kwargs) -> ReputationState:
    return ReputationState(
        score=score,
        last_updated=NOW - timedelta(minutes=minutes_ago),
        **kwargs,
    )


class TestDecay:
    def test_no_decay_within_one_interval(self):
        engine = ReputationEngine()
        state = _make_state(score=30, minutes_ago=0.5)
        engine.apply(state, 0, NOW)
        assert state.score == 30
        assert state.last_updated == NOW

    def test_decays_by_whole_intervals(self):
        engine = ReputationEngine()
        state = _make_state(score=50, minutes_ago=3.5)
        engine.apply(state, 0, NOW)
        assert state.score == 47

    def test_decay_never_goes_negative(self):
        engine = ReputationEngine()
        state = _make_state(score=5, minutes_ago=120)
        engine.apply(state, 0, NOW)
        assert state.score == 0

    def test_decay_applied_before_delta(self):
        engine = ReputationEngine()
        state = _make_state(score=5, minutes_ago=120)
        engine.apply(state, 20, NOW)
        assert state.score == 20

    def test_custom_decay_rate(self):
        config = {"scoring": {"decay": {"per_interval": 5, "interval_seconds": 10}}}
        engine = ReputationEngine(config)
        state = _make_state(score=50, minutes_ago=0.5)  # 3 intervals
        engine.apply(state, 0, NOW)
        assert state.score == 35

    def test_repeated_deltas_without_elapsed_time_only_increase(self):
        engine = ReputationEngine()
        state = _make_state()
        scores = []
        for _ in range(5):
            engine.apply(state, 7, NOW)
            scores.append(state.score)
        assert scores == sorted(scores)
        assert scores[-1] == 35

    def test_negative_delta_clamped_at_zero(self):
        engine = ReputationEngine()
        state = _make_state(score=10)
        engine.apply(state, -50, NOW)
        assert state.score == 0


class TestClassification:
    def test_allow_below_challenge(self):
        engine = ReputationEngine()
        assert engine.apply(_make_state(), 39, NOW) == EnforcementAction.ALLOW

    def test_challenge_at_threshold(self):
        engine = ReputationEngine()
        assert engine.apply(_make_state(), 40, NOW) == EnforcementAction.CHALLENGE

    def test_first_block_is_temporary_and_sets_strike(self):
        engine = ReputationEngine()
        state = _make_state()
        action = engine.apply(state, 70, NOW)
        assert action == EnforcementAction.TEMP_BLOCK
        assert state.has_strike is True
        assert state.permanently_blocked is False

    def test_second_block_is_permanent(self):
        engine = ReputationEngine()
        state = _make_state(has_strike=True)
        action = engine.apply(state, 75, NOW)
        assert action == EnforcementAction.PERMANENT_BLOCK
        assert state.permanently_blocked is True

    def test_strike_alone_does_not_block_below_threshold(self):
        engine = ReputationEngine()
        state = _make_state(has_strike=True)
        assert engine.apply(state, 10, NOW) == EnforcementAction.ALLOW

    def test_permanent_block_survives_decay(self):
        engine = ReputationEngine()
        state = _make_state(score=80, has_strike=True, permanently_blocked=True)
        action = engine.apply(state, 0, NOW + timedelta(days=1))
        assert state.score == 0
        assert action == EnforcementAction.PERMANENT_BLOCK

    def test_threshold_overrides_per_call(self):
        engine = ReputationEngine()
        overrides = {"thresholds": {"challenge": 10, "block": 20}}
        assert engine.apply(_make_state(), 15, NOW, overrides) == EnforcementAction.CHALLENGE
        assert engine.apply(_make_state(), 25, NOW, overrides) == EnforcementAction.TEMP_BLOCK

    def test_configured_thresholds(self):
        engine = ReputationEngine({"scoring": {"thresholds": {"challenge": 5, "block": 10}}})
        assert engine.apply(_make_state(), 6, NOW) == EnforcementAction.CHALLENGE

    def test_action_for_score(self):
        assert ReputationEngine.action_for_score(0) == EnforcementAction.ALLOW
        assert ReputationEngine.action_for_score(39.9) == EnforcementAction.ALLOW
        assert ReputationEngine.action_for_score(40) == EnforcementAction.CHALLENGE
        assert ReputationEngine.action_for_score(69.9) == EnforcementAction.CHALLENGE
        assert ReputationEngine.action_for_score(70) == EnforcementAction.TEMP_BLOCK


class TestWeights:
    def test_delta_sums_weights(self):
        engine = ReputationEngine()
        assert engine.delta_for(["locale_fanout", "rate_limit"]) == 35

    def test_unknown_category_adds_nothing(self):
        engine = ReputationEngine()
        assert engine.delta_for(["unknown"]) == 0

    def test_weights_can_be_overridden(self):
        engine = ReputationEngine({"scoring": {"weights": {"rate_limit": 1}}})
        assert engine.weights["rate_limit"] == 1
        assert engine.weights["locale_fanout"] == 20
