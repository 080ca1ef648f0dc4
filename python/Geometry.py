import math
from typing import MutableMapping, Optional, Sequence, Tuple, Union

# BlazePose landmark indices consulted by the combat rules.
LEFT_SHOULDER = 11
RIGHT_SHOULDER = 12
LEFT_WRIST = 15
RIGHT_WRIST = 16
LEFT_HIP = 23
RIGHT_HIP = 24

REQUIRED_LANDMARKS = (
    LEFT_SHOULDER,
    RIGHT_SHOULDER,
    LEFT_WRIST,
    RIGHT_WRIST,
    LEFT_HIP,
    RIGHT_HIP,
)

# (start, end) pairs for the upper-body skeleton drawn by the renderer.
SKELETON_CONNECTIONS = (
    (11, 13), (13, 15),
    (12, 14), (14, 16),
    (11, 12), (23, 24),
    (11, 23), (12, 24),
)

Point = Tuple[float, float]
Box = Tuple[float, float, float, float]
LandmarkLike = Union[Sequence[float], MutableMapping[str, float]]


# ==========================================
# 1. MATH & GEOMETRY (Pure Functions)
# ==========================================
def to_point(entry: Union[LandmarkLike, object]) -> Point:
    """Accept a mediapipe landmark, a dict or an (x, y[, z]) sequence."""
    if hasattr(entry, "x") and hasattr(entry, "y"):
        return (float(entry.x), float(entry.y))
    if isinstance(entry, dict):
        return (float(entry["x"]), float(entry["y"]))
    if isinstance(entry, (list, tuple)) and len(entry) >= 2:
        return (float(entry[0]), float(entry[1]))
    raise ValueError("Unsupported landmark format; expected object with x,y or sequence of 2+ values.")


def clamp01(v):
    return max(0.0, min(1.0, v))


def dist(a, b):
    """Euclidean distance in normalized 2D coordinates between two landmarks."""
    ax, ay = to_point(a)
    bx, by = to_point(b)
    return math.sqrt((ax - bx) ** 2 + (ay - by) ** 2)


def midpoint(a, b) -> Point:
    ax, ay = to_point(a)
    bx, by = to_point(b)
    return ((ax + bx) / 2.0, (ay + by) / 2.0)


def relative_to(point, origin) -> Point:
    px, py = to_point(point)
    ox, oy = to_point(origin)
    return (px - ox, py - oy)


def body_scale(landmarks, floor=0.1):
    """
    Larger of shoulder width and left shoulder-to-hip distance.
    Floored so a side-on body cannot blow up the extension ratio.
    """
    shoulder_width = dist(landmarks[LEFT_SHOULDER], landmarks[RIGHT_SHOULDER])
    torso_height = dist(landmarks[LEFT_SHOULDER], landmarks[LEFT_HIP])
    return max(shoulder_width, torso_height, floor)


def mirror_to_canvas(nx, ny, width, height) -> Point:
    """Map normalized camera coordinates to a horizontally mirrored canvas."""
    return (width - nx * width, ny * height)


def mirrored_bounding_box(landmarks, width, height) -> Optional[Box]:
    """Axis-aligned (min_x, min_y, max_x, max_y) in mirrored canvas pixels."""
    if not landmarks:
        return None
    min_x, min_y, max_x, max_y = 1.0, 1.0, 0.0, 0.0
    for lm in landmarks:
        x, y = to_point(lm)
        min_x = min(min_x, x)
        max_x = max(max_x, x)
        min_y = min(min_y, y)
        max_y = max(max_y, y)
    return (
        (1.0 - max_x) * width,
        min_y * height,
        (1.0 - min_x) * width,
        max_y * height,
    )


def expand_box(box: Box, padding) -> Box:
    return (box[0] - padding, box[1] - padding, box[2] + padding, box[3] + padding)


def point_in_box(x, y, box: Box):
    """Strict containment; a point on the edge is outside."""
    return box[0] < x < box[2] and box[1] < y < box[3]


def shoulder_center_x(landmarks):
    return (to_point(landmarks[LEFT_SHOULDER])[0] + to_point(landmarks[RIGHT_SHOULDER])[0]) / 2.0


def is_complete_body(landmarks):
    """True when every landmark the combat rules read is present and readable."""
    if landmarks is None:
        return False
    try:
        if len(landmarks) <= max(REQUIRED_LANDMARKS):
            return False
        for idx in REQUIRED_LANDMARKS:
            if landmarks[idx] is None:
                return False
            to_point(landmarks[idx])
    except (TypeError, ValueError, KeyError):
        return False
    return True
