"""Route guidance configuration."""

# Collapsing distances
MAX_COLLAPSE_DISTANCE_M = 30.0   # Maneuvers closer than this may be one turn (metres)
MAX_STAGGERED_DISTANCE_M = 3.0   # Keep short, the zig-zag has to be obvious

# Turn angles (0 = u-turn, 180 = straight, < 180 right, > 180 left)
STRAIGHT_ANGLE_TOLERANCE_DEG = 20.0  # Combined turns within this of 180 count as straight
SAME_SIDE_SLACK_DEG = 5.0            # Partial turns this close to straight still count as bending
UTURN_BEARING_TOLERANCE_DEG = 35.0   # Exit within this of the reversed entry is turning around

# Staggered intersections only trigger on ~90 degree turns, not sharp or slight ones
STAGGERED_RIGHT_TURN_RANGE_DEG = (45.0, 135.0)
STAGGERED_LEFT_TURN_RANGE_DEG = (225.0, 315.0)
