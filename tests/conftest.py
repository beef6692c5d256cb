"""
Shared pytest fixtures for route guidance tests.
"""

import os
import sys
import pytest

# Add project root to path for imports
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from guidance.route_step import (  # noqa: E402
    DirectionModifier, RouteStep, Signage, TurnInstruction, TurnType
)


def make_step(
    turn_type=TurnType.TURN,
    modifier=DirectionModifier.STRAIGHT,
    bearing_before=0.0,
    bearing_after=0.0,
    distance=100.0,
    duration=10.0,
    name="",
    **kwargs,
):
    """Build a RouteStep with sensible defaults."""
    return RouteStep(
        instruction=TurnInstruction(turn_type, modifier),
        bearing_before=bearing_before,
        bearing_after=bearing_after,
        distance=distance,
        duration=duration,
        name=name,
        **kwargs,
    )


@pytest.fixture
def step_factory():
    """Factory for RouteSteps with sensible defaults."""
    return make_step


@pytest.fixture
def segregated_left_steps():
    """Two ~45 degree left turns across a dual carriageway, 8m and 12m apart."""
    return [
        make_step(TurnType.DEPART, bearing_before=0, bearing_after=0,
                  distance=0.0, duration=0.0, name="High Street"),
        make_step(TurnType.TURN, DirectionModifier.LEFT, bearing_before=0,
                  bearing_after=315, distance=8.0, duration=2.0, name="Kings Road"),
        make_step(TurnType.TURN, DirectionModifier.LEFT, bearing_before=315,
                  bearing_after=270, distance=12.0, duration=3.0, name="Kings Road"),
        make_step(TurnType.ARRIVE, bearing_before=270, bearing_after=0,
                  distance=250.0, duration=25.0, name="Kings Road"),
    ]


@pytest.fixture
def staggered_steps():
    """A left then a right two metres apart, continuing on the same road."""
    return [
        make_step(TurnType.DEPART, bearing_before=0, bearing_after=0,
                  distance=0.0, duration=0.0, name="Mill Lane"),
        make_step(TurnType.TURN, DirectionModifier.LEFT, bearing_before=0,
                  bearing_after=270, distance=300.0, duration=30.0, name="Church Road"),
        make_step(TurnType.TURN, DirectionModifier.RIGHT, bearing_before=270,
                  bearing_after=0, distance=2.0, duration=1.0, name="Mill Lane"),
        make_step(TurnType.ARRIVE, bearing_before=0, bearing_after=0,
                  distance=400.0, duration=40.0, name="Mill Lane"),
    ]


@pytest.fixture
def sample_route():
    """A route mixing collapsible and independent maneuvers."""
    return [
        make_step(TurnType.DEPART, bearing_before=0, bearing_after=90,
                  distance=0.0, duration=0.0, name="Station Road"),
        # Turn right, immediately renamed
        make_step(TurnType.TURN, DirectionModifier.RIGHT, bearing_before=90,
                  bearing_after=180, distance=420.0, duration=38.0, name="Bridge Street"),
        make_step(TurnType.NEW_NAME, DirectionModifier.STRAIGHT, bearing_before=180,
                  bearing_after=182, distance=15.0, duration=1.5, name="London Road",
                  signage=Signage(ref="A40", destinations="Oxford")),
        # Far apart, nothing to merge
        make_step(TurnType.TURN, DirectionModifier.LEFT, bearing_before=182,
                  bearing_after=90, distance=900.0, duration=60.0, name="Park Lane"),
        # Roundabout entered and left, renamed after the exit
        make_step(TurnType.ROUNDABOUT, DirectionModifier.RIGHT, bearing_before=90,
                  bearing_after=135, distance=500.0, duration=35.0, name=""),
        make_step(TurnType.EXIT_ROUNDABOUT, DirectionModifier.RIGHT, bearing_before=20,
                  bearing_after=0, distance=40.0, duration=6.0, name="Ring Road"),
        make_step(TurnType.NEW_NAME, DirectionModifier.STRAIGHT, bearing_before=0,
                  bearing_after=0, distance=10.0, duration=1.0, name="North Avenue"),
        make_step(TurnType.ARRIVE, bearing_before=0, bearing_after=0,
                  distance=600.0, duration=50.0, name="North Avenue"),
    ]


@pytest.fixture
def osrm_leg_steps():
    """Steps of an OSRM route leg, as returned by the route service."""
    return [
        {
            "distance": 120.5, "duration": 14.2, "name": "Station Road", "mode": "driving",
            "maneuver": {"type": "depart", "location": [-0.1278, 51.5074],
                         "bearing_before": 0, "bearing_after": 90},
            "intersections": [{"bearings": [90], "entry": [True], "out": 0}],
        },
        {
            "distance": 310.0, "duration": 30.1, "name": "London Road", "ref": "A40",
            "destinations": "Oxford", "exits": "5B", "mode": "driving",
            "maneuver": {"type": "off ramp", "modifier": "slight left",
                         "location": [-0.1261, 51.5075],
                         "bearing_before": 90, "bearing_after": 75},
            "intersections": [{
                "lanes": [
                    {"indications": ["slight left"], "valid": True},
                    {"indications": ["straight"], "valid": False},
                ],
            }],
        },
        {
            "distance": 0.0, "duration": 0.0, "name": "London Road", "mode": "driving",
            "maneuver": {"type": "arrive", "location": [-0.1220, 51.5090],
                         "bearing_before": 75, "bearing_after": 0},
        },
    ]
