"""Tests for guidance/combine.py - pairwise combiner."""

import pytest

from guidance.combine import combine_route_steps
from guidance.route_step import (
    DirectionModifier, Lane, Signage, TurnInstruction, TurnType, NO_TURN,
)
from guidance.strategies import (
    AdjustToCombinedTurnAngleStrategy,
    NoModificationStrategy,
    Strategy,
    StrategyCapabilityError,
    TransferLanesStrategy,
    TransferSignageStrategy,
    TransferTurnTypeStrategy,
)


@pytest.fixture
def pair(step_factory):
    first = step_factory(
        TurnType.TURN, DirectionModifier.LEFT,
        bearing_before=0, bearing_after=315, distance=8.0, duration=2.0, name="Kings Road",
    )
    second = step_factory(
        TurnType.TURN, DirectionModifier.LEFT,
        bearing_before=315, bearing_after=270, distance=12.0, duration=3.0, name="Kings Road",
        signage=Signage(exits="5B"), lanes=(Lane(("left",), True),),
    )
    return first, second


class TestCombineRouteSteps:
    """Test fusing two steps."""

    @pytest.mark.unit
    def test_returns_target(self, pair):
        """Test the fused step is the target."""
        first, second = pair
        result = combine_route_steps(
            first, second,
            NoModificationStrategy(), NoModificationStrategy(), NoModificationStrategy(),
        )
        assert result is first

    @pytest.mark.unit
    def test_elongates_target(self, pair):
        """Test target absorbs the source segment exactly."""
        first, second = pair
        combine_route_steps(
            first, second,
            NoModificationStrategy(), NoModificationStrategy(), NoModificationStrategy(),
        )
        assert first.distance == 20.0
        assert first.duration == 5.0
        assert first.bearing_after == 270

    @pytest.mark.unit
    def test_invalidates_source(self, pair):
        """Test the consumed step is flagged for compaction."""
        first, second = pair
        combine_route_steps(
            first, second,
            NoModificationStrategy(), NoModificationStrategy(), NoModificationStrategy(),
        )
        assert second.valid is False
        assert second.distance == 0.0
        assert second.duration == 0.0
        assert second.instruction == NO_TURN
        assert first.valid is True

    @pytest.mark.unit
    def test_applies_all_three_strategies(self, pair):
        """Test turn, signage and lane strategies each take effect."""
        first, second = pair
        combine_route_steps(
            first, second,
            AdjustToCombinedTurnAngleStrategy(),
            TransferSignageStrategy(),
            TransferLanesStrategy(),
        )
        assert first.instruction == TurnInstruction(TurnType.TURN, DirectionModifier.LEFT)
        assert first.signage.exits == "5B"
        assert first.lanes == (Lane(("left",), True),)

    @pytest.mark.unit
    def test_strategy_order(self, pair):
        """Test strategies run turn type, then signage, then lanes."""
        first, second = pair
        calls = []

        class Recording(Strategy):
            capabilities = NoModificationStrategy.capabilities

            def __init__(self, label):
                self.label = label

            def __call__(self, target, source):
                calls.append(self.label)

        combine_route_steps(
            first, second, Recording("turn"), Recording("signage"), Recording("lanes")
        )
        assert calls == ["turn", "signage", "lanes"]

    @pytest.mark.unit
    def test_strategies_see_unmodified_segment(self, pair):
        """Test elongation happens after the strategies ran."""
        first, second = pair
        seen = []

        class Probe(Strategy):
            capabilities = NoModificationStrategy.capabilities

            def __call__(self, target, source):
                seen.append((target.distance, target.bearing_after, source.valid))

        combine_route_steps(first, second, Probe(), Probe(), Probe())
        assert seen == [(8.0, 315, True)] * 3

    @pytest.mark.unit
    def test_rejects_lane_strategy_as_turn_type(self, pair):
        """Test a strategy in the wrong role is refused before anything changes."""
        first, second = pair
        snapshot = (first.copy(), second.copy())

        with pytest.raises(StrategyCapabilityError):
            combine_route_steps(
                first, second,
                TransferLanesStrategy(), NoModificationStrategy(), NoModificationStrategy(),
            )

        assert (first, second) == snapshot

    @pytest.mark.unit
    def test_rejects_turn_strategy_as_signage(self, pair):
        """Test signage slot checks its capability."""
        first, second = pair
        with pytest.raises(StrategyCapabilityError):
            combine_route_steps(
                first, second,
                NoModificationStrategy(), TransferTurnTypeStrategy(), NoModificationStrategy(),
            )

    @pytest.mark.unit
    def test_rejects_signage_strategy_as_lanes(self, pair):
        """Test lane slot checks its capability."""
        first, second = pair
        with pytest.raises(StrategyCapabilityError):
            combine_route_steps(
                first, second,
                NoModificationStrategy(), NoModificationStrategy(), TransferSignageStrategy(),
            )

    @pytest.mark.unit
    def test_rejects_invalidated_source(self, pair):
        """Test a consumed step cannot be combined again."""
        first, second = pair
        second.invalidate()
        with pytest.raises(ValueError, match="invalidated"):
            combine_route_steps(
                first, second,
                NoModificationStrategy(), NoModificationStrategy(), NoModificationStrategy(),
            )

    @pytest.mark.unit
    def test_rejects_invalidated_target(self, pair):
        """Test a consumed step cannot absorb another."""
        first, second = pair
        first.invalidate()
        with pytest.raises(ValueError):
            combine_route_steps(
                first, second,
                NoModificationStrategy(), NoModificationStrategy(), NoModificationStrategy(),
            )
