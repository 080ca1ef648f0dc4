from collections import namedtuple

from Geometry import (
    LEFT_HIP,
    LEFT_SHOULDER,
    LEFT_WRIST,
    RIGHT_HIP,
    RIGHT_SHOULDER,
    RIGHT_WRIST,
)

# Same attribute shape as a mediapipe NormalizedLandmark.
Landmark = namedtuple("Landmark", ["x", "y", "z", "visibility"])

NUM_LANDMARKS = 33

# Camera space is not mirrored: the subject's left shoulder has the larger x.
LEFT_BODY_X = 0.65
RIGHT_BODY_X = 0.35


def lm(x, y):
    return Landmark(x, y, 0.0, 1.0)


def make_body(cx=LEFT_BODY_X, **joints):
    """
    Neutral standing body centered at cx: arms hanging by the hips, outside
    every gesture zone. Override joints with left_wrist=(x, y) etc.
    """
    points = [lm(cx, 0.45) for _ in range(NUM_LANDMARKS)]
    points[LEFT_SHOULDER] = lm(cx + 0.05, 0.30)
    points[RIGHT_SHOULDER] = lm(cx - 0.05, 0.30)
    points[LEFT_HIP] = lm(cx + 0.03, 0.60)
    points[RIGHT_HIP] = lm(cx - 0.03, 0.60)
    points[LEFT_WRIST] = lm(cx + 0.09, 0.62)
    points[RIGHT_WRIST] = lm(cx - 0.09, 0.62)

    names = {
        "left_shoulder": LEFT_SHOULDER,
        "right_shoulder": RIGHT_SHOULDER,
        "left_hip": LEFT_HIP,
        "right_hip": RIGHT_HIP,
        "left_wrist": LEFT_WRIST,
        "right_wrist": RIGHT_WRIST,
    }
    for name, xy in joints.items():
        points[names[name]] = lm(*xy)
    return points


def shield_body(cx=LEFT_BODY_X):
    # each wrist 0.1 below its own shoulder
    return make_body(cx, left_wrist=(cx + 0.05, 0.40), right_wrist=(cx - 0.05, 0.40))


def special_body(cx=LEFT_BODY_X):
    # left hand raised above its shoulder, right hand down
    return make_body(cx, left_wrist=(cx + 0.15, 0.02))


def sword_body(cx=LEFT_BODY_X, hand_y=0.60):
    return make_body(cx, left_wrist=(cx + 0.01, hand_y), right_wrist=(cx - 0.01, hand_y))


def punch_body(cx=LEFT_BODY_X, both=False):
    """Left arm thrown out at chest height (extension ratio ~0.85)."""
    joints = {"left_wrist": (cx + 0.30, 0.35)}
    if both:
        joints["right_wrist"] = (cx - 0.30, 0.35)
    return make_body(cx, **joints)
