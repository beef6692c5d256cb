"""
Route steps produced by the route search.

A route step is one maneuver plus the segment leading into it. The distance
and duration of a step describe the approach to its maneuver, the name and
signage describe the road the maneuver leads onto.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .geometry import turn_angle


class TurnType(Enum):
    DEPART = "depart"
    ARRIVE = "arrive"
    TURN = "turn"
    NEW_NAME = "new name"
    CONTINUE = "continue"
    MERGE = "merge"
    ON_RAMP = "on ramp"
    OFF_RAMP = "off ramp"
    FORK = "fork"
    END_OF_ROAD = "end of road"
    SUPPRESSED = "suppressed"
    ROUNDABOUT = "roundabout"
    EXIT_ROUNDABOUT = "exit roundabout"
    ENTER_AND_EXIT_ROUNDABOUT = "enter and exit roundabout"
    NO_TURN = "no turn"  # Invalidated step, removed on compaction


WAYPOINT_TYPES = frozenset({TurnType.DEPART, TurnType.ARRIVE})
ROUNDABOUT_TYPES = frozenset({
    TurnType.ROUNDABOUT,
    TurnType.EXIT_ROUNDABOUT,
    TurnType.ENTER_AND_EXIT_ROUNDABOUT,
})
NAME_CHANGE_TYPES = frozenset({TurnType.NEW_NAME, TurnType.SUPPRESSED})


class DirectionModifier(Enum):
    UTURN = "uturn"
    SHARP_RIGHT = "sharp right"
    RIGHT = "right"
    SLIGHT_RIGHT = "slight right"
    STRAIGHT = "straight"
    SLIGHT_LEFT = "slight left"
    LEFT = "left"
    SHARP_LEFT = "sharp left"

    @classmethod
    def from_angle(cls, angle: float) -> "DirectionModifier":
        """
        Classify a turn angle.

        0 is a u-turn, 180 goes perfectly straight, 0-180 are right turns
        and 180-360 are left turns.
        """
        angle = angle % 360
        if 0 < angle < 60:
            return cls.SHARP_RIGHT
        if 60 <= angle < 140:
            return cls.RIGHT
        if 140 <= angle < 160:
            return cls.SLIGHT_RIGHT
        if 160 <= angle <= 200:
            return cls.STRAIGHT
        if 200 < angle <= 220:
            return cls.SLIGHT_LEFT
        if 220 < angle <= 300:
            return cls.LEFT
        if 300 < angle < 360:
            return cls.SHARP_LEFT
        return cls.UTURN

    @property
    def is_left(self) -> bool:
        return self in (
            DirectionModifier.SLIGHT_LEFT,
            DirectionModifier.LEFT,
            DirectionModifier.SHARP_LEFT,
        )

    @property
    def is_right(self) -> bool:
        return self in (
            DirectionModifier.SLIGHT_RIGHT,
            DirectionModifier.RIGHT,
            DirectionModifier.SHARP_RIGHT,
        )


@dataclass(frozen=True)
class TurnInstruction:
    """Classification of a maneuver: turn type plus direction."""

    type: TurnType
    modifier: DirectionModifier = DirectionModifier.STRAIGHT

    @property
    def is_non_turn(self) -> bool:
        """Name changes and straight turns keep the direction of travel."""
        if self.type in NAME_CHANGE_TYPES:
            return True
        return (
            self.type in (TurnType.TURN, TurnType.CONTINUE)
            and self.modifier == DirectionModifier.STRAIGHT
        )

    def __str__(self) -> str:
        return f"{self.type.value} {self.modifier.value}"


NO_TURN = TurnInstruction(TurnType.NO_TURN)


@dataclass(frozen=True)
class Signage:
    """
    Road signage at a maneuver.

    Attributes:
        ref: Road reference, e.g. "A40".
        destinations: Destination text, e.g. "Oxford, Cheltenham".
        exits: Exit numbers, e.g. "5B".
    """

    ref: str = ""
    destinations: str = ""
    exits: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.ref or self.destinations or self.exits)

    def __str__(self) -> str:
        if self.is_empty:
            return "no signage"
        exits = f"Exit {self.exits}" if self.exits else ""
        return ", ".join(part for part in (self.ref, self.destinations, exits) if part)


@dataclass(frozen=True)
class Lane:
    """One lane of turn-lane guidance."""

    indications: Tuple[str, ...]
    valid: bool = False


@dataclass
class RouteStep:
    """
    A single maneuver along a route.

    Attributes:
        instruction: Turn classification assigned by the route search.
        bearing_before: Heading in degrees when arriving at the maneuver.
        bearing_after: Heading in degrees when leaving the maneuver.
        distance: Metres travelled on the segment leading into the maneuver.
        duration: Seconds travelled on the segment leading into the maneuver.
        name: Name of the road the maneuver leads onto.
        signage: Reference, destinations and exit numbers. May be empty.
        lanes: Turn-lane guidance at the maneuver. May be empty.
        location: Maneuver location as (lat, lon).
        mode: Travel mode, e.g. "driving".
        valid: False once the step has been consumed by a collapse.
    """

    instruction: TurnInstruction
    bearing_before: float
    bearing_after: float
    distance: float = 0.0
    duration: float = 0.0
    name: str = ""
    signage: Signage = field(default_factory=Signage)
    lanes: Tuple[Lane, ...] = ()
    location: Tuple[float, float] = (0.0, 0.0)
    mode: str = "driving"
    valid: bool = True

    @property
    def turn_angle(self) -> float:
        """Angle turned at the maneuver (0 u-turn, 180 straight)."""
        return turn_angle(self.bearing_before, self.bearing_after)

    @property
    def is_waypoint(self) -> bool:
        return self.instruction.type in WAYPOINT_TYPES

    def elongate_by(self, other: "RouteStep") -> "RouteStep":
        """
        Absorb the segment of a following step.

        Distance and duration are summed exactly. The step now leaves along
        the exit of the absorbed maneuver.
        """
        self.distance += other.distance
        self.duration += other.duration
        self.bearing_after = other.bearing_after
        return self

    def invalidate(self) -> "RouteStep":
        """Mark the step as consumed, pending removal by compaction."""
        self.distance = 0.0
        self.duration = 0.0
        self.instruction = NO_TURN
        self.valid = False
        return self

    def copy(self) -> "RouteStep":
        # Signage, lanes and instructions are immutable, a shallow copy is enough
        return replace(self)


_OSRM_TYPE_ALIASES = {
    "rotary": TurnType.ROUNDABOUT,
    "exit rotary": TurnType.EXIT_ROUNDABOUT,
    "roundabout turn": TurnType.ENTER_AND_EXIT_ROUNDABOUT,
    "use lane": TurnType.SUPPRESSED,
    "notification": TurnType.SUPPRESSED,
}


def _parse_turn_type(value: str) -> TurnType:
    if value in _OSRM_TYPE_ALIASES:
        return _OSRM_TYPE_ALIASES[value]
    try:
        return TurnType(value)
    except ValueError:
        raise ValueError(f"Unknown maneuver type: {value!r}") from None


def _parse_modifier(value: Optional[str]) -> DirectionModifier:
    if value is None:
        return DirectionModifier.STRAIGHT
    try:
        return DirectionModifier(value)
    except ValueError:
        raise ValueError(f"Unknown maneuver modifier: {value!r}") from None


def _parse_lanes(raw_step: Dict[str, Any]) -> Tuple[Lane, ...]:
    intersections = raw_step.get("intersections") or [{}]
    return tuple(
        Lane(tuple(lane.get("indications", ())), bool(lane.get("valid", False)))
        for lane in intersections[0].get("lanes", ())
    )


def steps_from_osrm(osrm_steps: List[Dict[str, Any]]) -> List[RouteStep]:
    """
    Build route steps from the steps of an OSRM route leg.

    OSRM reports distance and duration for the segment after each maneuver,
    so they are shifted onto the following step. The departure step gets
    zero and the arrival step carries the final segment.

    Raises:
        ValueError: If a maneuver type or modifier is not recognised.
    """
    steps = []
    previous = None

    for raw in osrm_steps:
        maneuver = raw["maneuver"]
        lon, lat = maneuver.get("location", (0.0, 0.0))

        steps.append(RouteStep(
            instruction=TurnInstruction(
                _parse_turn_type(maneuver["type"]),
                _parse_modifier(maneuver.get("modifier")),
            ),
            bearing_before=float(maneuver.get("bearing_before", 0.0)),
            bearing_after=float(maneuver.get("bearing_after", 0.0)),
            distance=float(previous.get("distance", 0.0)) if previous else 0.0,
            duration=float(previous.get("duration", 0.0)) if previous else 0.0,
            name=raw.get("name", ""),
            signage=Signage(
                ref=raw.get("ref", ""),
                destinations=raw.get("destinations", ""),
                exits=raw.get("exits", ""),
            ),
            lanes=_parse_lanes(raw),
            location=(lat, lon),
            mode=raw.get("mode", "driving"),
        ))
        previous = raw

    return steps
