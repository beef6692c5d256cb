"""
Collapse rules: which adjacent maneuvers are really one turn.

A rule pairs a predicate over two adjacent steps (plus the step before them)
with the turn type, signage and lane strategies used to fuse them. Rules live
in a RuleTable ordered most specific first; the first match wins.

Strategy slots take either a Strategy subclass, built without arguments for
every decision, or a StrategyFactory when the strategy needs context from the
pair. Capabilities are checked when the rule is created.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Optional, Tuple, Type, Union

from . import config
from .geometry import bearings_are_reversed, turn_angle
from .route_step import (
    DirectionModifier,
    NAME_CHANGE_TYPES,
    ROUNDABOUT_TYPES,
    RouteStep,
    TurnInstruction,
    TurnType,
    WAYPOINT_TYPES,
)
from .strategies import (
    AdjustToCombinedTurnAngleStrategy,
    Capability,
    NoModificationStrategy,
    SetFixedInstructionStrategy,
    StaggeredTurnStrategy,
    Strategy,
    TransferLanesStrategy,
    TransferSignageStrategy,
    TransferTurnTypeStrategy,
    require_capability,
)

# Maneuvers that turn at an ordinary intersection
TURN_TYPES = frozenset({TurnType.TURN, TurnType.CONTINUE, TurnType.END_OF_ROAD})

UTURN_INSTRUCTION = TurnInstruction(TurnType.CONTINUE, DirectionModifier.UTURN)


@dataclass(frozen=True)
class StepPair:
    """Two adjacent valid steps and the valid step before them, if any."""

    prior: Optional[RouteStep]
    current: RouteStep
    following: RouteStep

    @property
    def gap(self) -> float:
        """Distance between the two maneuvers in metres."""
        return self.following.distance


@dataclass(frozen=True)
class StrategyFactory:
    """Builds a strategy of a declared class for one collapse decision."""

    strategy: Type[Strategy]
    build: Optional[Callable[[StepPair], Strategy]] = None

    def __call__(self, pair: StepPair) -> Strategy:
        if self.build is None:
            return self.strategy()
        return self.build(pair)


StrategySpec = Union[Type[Strategy], StrategyFactory]


def _as_factory(spec: StrategySpec, capability: Capability) -> StrategyFactory:
    if not isinstance(spec, StrategyFactory):
        if not (isinstance(spec, type) and issubclass(spec, Strategy)):
            raise TypeError(f"Expected a Strategy class or StrategyFactory, got {spec!r}")
        spec = StrategyFactory(spec)
    require_capability(spec.strategy, capability)
    return spec


@dataclass(frozen=True)
class CollapseRule:
    """
    A pattern of two adjacent steps and how to fuse them.

    Attributes:
        name: Unique rule name, used for logging and registration.
        matches: Predicate over a StepPair.
        turn: Turn type strategy (class or StrategyFactory).
        signage: Signage strategy (class or StrategyFactory).
        lanes: Lane strategy (class or StrategyFactory).

    Raises:
        StrategyCapabilityError: If a strategy does not support its slot.
    """

    name: str
    matches: Callable[[StepPair], bool]
    turn: StrategySpec = NoModificationStrategy
    signage: StrategySpec = NoModificationStrategy
    lanes: StrategySpec = NoModificationStrategy

    def __post_init__(self):
        object.__setattr__(self, "turn", _as_factory(self.turn, Capability.TURN_TYPE))
        object.__setattr__(self, "signage", _as_factory(self.signage, Capability.SIGNAGE))
        object.__setattr__(self, "lanes", _as_factory(self.lanes, Capability.LANES))

    def strategies(self, pair: StepPair) -> Tuple[Strategy, Strategy, Strategy]:
        """Build the (turn, signage, lanes) strategies for this pair."""
        return self.turn(pair), self.signage(pair), self.lanes(pair)


class RuleTable:
    """Immutable, priority-ordered collection of collapse rules."""

    def __init__(self, rules: Iterable[CollapseRule] = ()):
        self._rules = tuple(rules)
        names = [rule.name for rule in self._rules]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate rule names: {', '.join(duplicates)}")

    def __iter__(self) -> Iterator[CollapseRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(rule.name for rule in self._rules)

    def first_match(self, pair: StepPair) -> Optional[CollapseRule]:
        for rule in self._rules:
            if rule.matches(pair):
                return rule
        return None

    def register(self, rule: CollapseRule, before: Optional[str] = None) -> "RuleTable":
        """
        Return a new table with rule added.

        Args:
            rule: Rule to add.
            before: Name of the rule the new one takes priority over. Appended
                with the lowest priority when None.

        Raises:
            KeyError: If no rule is called before.
            ValueError: If a rule with the same name is already registered.
        """
        rules = list(self._rules)
        if before is None:
            rules.append(rule)
        else:
            if before not in self.names:
                raise KeyError(before)
            rules.insert(self.names.index(before), rule)
        return RuleTable(rules)


# ------------------------------------------------------------------------------
# Predicates
# ------------------------------------------------------------------------------

def _can_collapse(pair: StepPair) -> bool:
    """Preconditions shared by every default rule."""
    current, following = pair.current, pair.following
    if not (current.valid and following.valid):
        return False
    if current.instruction.type in WAYPOINT_TYPES or following.instruction.type in WAYPOINT_TYPES:
        return False
    return current.mode == following.mode


def _same_side(first: RouteStep, second: RouteStep) -> bool:
    a, b = first.instruction.modifier, second.instruction.modifier
    return (a.is_left and b.is_left) or (a.is_right and b.is_right)


def _in_range(angle: float, bounds: Tuple[float, float]) -> bool:
    return bounds[0] < angle < bounds[1]


def is_roundabout_traversal(pair: StepPair) -> bool:
    """Entering a roundabout directly followed by leaving it."""
    return (
        _can_collapse(pair)
        and pair.current.instruction.type == TurnType.ROUNDABOUT
        and pair.following.instruction.type == TurnType.EXIT_ROUNDABOUT
    )


def is_roundabout_exit_name_change(pair: StepPair) -> bool:
    """The road renames right after the roundabout exit."""
    return (
        _can_collapse(pair)
        and pair.current.instruction.type in (
            TurnType.EXIT_ROUNDABOUT, TurnType.ENTER_AND_EXIT_ROUNDABOUT
        )
        and pair.following.instruction.type in NAME_CHANGE_TYPES
        and pair.gap <= config.MAX_COLLAPSE_DISTANCE_M
    )


def is_staggered_intersection(pair: StepPair) -> bool:
    """
    Two ~90 degree turns in opposite directions a few metres apart.

    Turn angles are used instead of modifiers so that sharp or slight turns
    never qualify.
    """
    if pair.prior is None or not _can_collapse(pair):
        return False
    current, following = pair.current, pair.following
    if current.instruction.type not in TURN_TYPES or following.instruction.type not in TURN_TYPES:
        return False

    right = config.STAGGERED_RIGHT_TURN_RANGE_DEG
    left = config.STAGGERED_LEFT_TURN_RANGE_DEG
    left_right = _in_range(current.turn_angle, left) and _in_range(following.turn_angle, right)
    right_left = _in_range(current.turn_angle, right) and _in_range(following.turn_angle, left)

    return (left_right or right_left) and pair.gap < config.MAX_STAGGERED_DISTANCE_M


def is_u_turn(pair: StepPair) -> bool:
    """Two turns to the same side that bring us back onto the road we came from."""
    if pair.prior is None or not _can_collapse(pair):
        return False
    current, following = pair.current, pair.following
    if current.instruction.type not in TURN_TYPES or following.instruction.type not in TURN_TYPES:
        return False
    return (
        _same_side(current, following)
        and bearings_are_reversed(
            current.bearing_before, following.bearing_after,
            config.UTURN_BEARING_TOLERANCE_DEG,
        )
        and pair.prior.name == following.name
        and pair.gap <= config.MAX_COLLAPSE_DISTANCE_M
    )


def is_segregated_intersection(pair: StepPair) -> bool:
    """Two turns to the same side across the carriageways of one intersection."""
    if not _can_collapse(pair):
        return False
    current, following = pair.current, pair.following
    return (
        current.instruction.type in TURN_TYPES
        and following.instruction.type in TURN_TYPES
        and _same_side(current, following)
        and pair.gap <= config.MAX_COLLAPSE_DISTANCE_M
    )


def is_maneuver_followed_by_name_change(pair: StepPair) -> bool:
    if not _can_collapse(pair):
        return False
    return (
        pair.current.instruction.type not in ROUNDABOUT_TYPES
        and pair.following.instruction.is_non_turn
        and pair.gap <= config.MAX_COLLAPSE_DISTANCE_M
    )


def is_name_change_followed_by_turn(pair: StepPair) -> bool:
    if not _can_collapse(pair):
        return False
    following_type = pair.following.instruction.type
    return (
        pair.current.instruction.type in NAME_CHANGE_TYPES
        and following_type not in ROUNDABOUT_TYPES
        and not pair.following.instruction.is_non_turn
        and pair.gap <= config.MAX_COLLAPSE_DISTANCE_M
    )


# ------------------------------------------------------------------------------
# Default table
# ------------------------------------------------------------------------------

def _roundabout_instruction(pair: StepPair) -> Strategy:
    angle = turn_angle(pair.current.bearing_before, pair.following.bearing_after)
    return SetFixedInstructionStrategy(TurnInstruction(
        TurnType.ENTER_AND_EXIT_ROUNDABOUT, DirectionModifier.from_angle(angle)
    ))


DEFAULT_RULES = RuleTable([
    CollapseRule(
        "roundabout_traversal",
        is_roundabout_traversal,
        turn=StrategyFactory(SetFixedInstructionStrategy, _roundabout_instruction),
        signage=TransferSignageStrategy,
    ),
    CollapseRule(
        "roundabout_exit_name_change",
        is_roundabout_exit_name_change,
        signage=TransferSignageStrategy,
    ),
    CollapseRule(
        "staggered_intersection",
        is_staggered_intersection,
        turn=StrategyFactory(
            StaggeredTurnStrategy, lambda pair: StaggeredTurnStrategy(pair.prior)
        ),
        signage=TransferSignageStrategy,
    ),
    CollapseRule(
        "u_turn",
        is_u_turn,
        turn=StrategyFactory(
            SetFixedInstructionStrategy, lambda pair: SetFixedInstructionStrategy(UTURN_INSTRUCTION)
        ),
        signage=TransferSignageStrategy,
    ),
    CollapseRule(
        "segregated_intersection",
        is_segregated_intersection,
        turn=AdjustToCombinedTurnAngleStrategy,
        signage=TransferSignageStrategy,
    ),
    CollapseRule(
        "maneuver_followed_by_name_change",
        is_maneuver_followed_by_name_change,
        turn=AdjustToCombinedTurnAngleStrategy,
        signage=TransferSignageStrategy,
    ),
    CollapseRule(
        "name_change_followed_by_turn",
        is_name_change_followed_by_turn,
        turn=TransferTurnTypeStrategy,
        signage=TransferSignageStrategy,
        lanes=TransferLanesStrategy,
    ),
])
