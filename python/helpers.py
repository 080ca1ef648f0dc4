import json
import math
import os
import time

import cv2
import numpy as np

from Geometry import (
    LEFT_HIP,
    LEFT_SHOULDER,
    LEFT_WRIST,
    RIGHT_HIP,
    RIGHT_SHOULDER,
    RIGHT_WRIST,
    SKELETON_CONNECTIONS,
    midpoint,
    to_point,
)

SHIELD_COLOR = (0, 215, 255)
FULL_CHARGE_COLOR = (0, 255, 255)
SWORD_COLORS = {"left": (255, 255, 0), "right": (0, 69, 255)}
CHARGE_COLORS = {"left": (255, 255, 0), "right": (0, 165, 255)}


# ---------- config ----------
def load_config(path="config.json"):
    if not os.path.exists(path):
        print(f"[PY] config '{path}' not found, using defaults.")
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        print("[PY] Failed to load config:", e)
        return {}


class ConfigWatcher:
    """
    Watches a JSON config file and reloads it when the file changes.
    Usage:
        watcher = ConfigWatcher("config.json")
        cfg = watcher.get_config()        # initial load
        # later, once per frame:
        cfg = watcher.check_reload()      # returns new cfg or same dict
    """

    def __init__(self, path="config.json", min_check_interval=0.5):
        self.path = path
        self._cfg = {}
        self._mtime = 0.0
        self._last_checked = 0.0
        self._min_check_interval = min_check_interval  # seconds between checks
        self._load()

    def _load(self):
        try:
            if not os.path.exists(self.path):
                self._cfg = {}
                self._mtime = 0.0
                return
            m = os.path.getmtime(self.path)
            with open(self.path, "r", encoding="utf-8") as f:
                self._cfg = json.load(f)
            self._mtime = m
        except (OSError, ValueError) as e:
            print("[ConfigWatcher] failed to load config:", e)
            self._cfg = {}

    def get_config(self):
        return self._cfg

    def check_reload(self):
        """
        Call frequently (cheap). Will only stat the file every _min_check_interval seconds.
        Returns current config (reloaded if changed).
        """
        now = time.monotonic()
        if now - self._last_checked < self._min_check_interval:
            return self._cfg
        self._last_checked = now

        try:
            if not os.path.exists(self.path):
                # file missing -> keep existing config
                return self._cfg
            m = os.path.getmtime(self.path)
            if m != self._mtime:
                print(f"[ConfigWatcher] Detected {self.path} change, reloading...")
                self._load()
        except OSError as e:
            print("[ConfigWatcher] check_reload error:", e)

        return self._cfg


# ---------- debug drawing ----------
def _px(landmark, w, h):
    """Normalized landmark -> mirrored canvas pixel."""
    x, y = to_point(landmark)
    return (int((1.0 - x) * w), int(y * h))


def blank_canvas(width, height):
    return np.full((height, width, 3), (30, 20, 20), dtype=np.uint8)


def draw_background(canvas, camera_frame, alpha=0.2):
    """Faint mirrored camera feed under the game layer."""
    if camera_frame is None:
        return canvas
    h, w = canvas.shape[:2]
    feed = cv2.resize(cv2.flip(camera_frame, 1), (w, h))
    return cv2.addWeighted(feed, alpha, canvas, 1.0 - alpha, 0)


def draw_skeleton(canvas, landmarks, player, tick=0):
    h, w = canvas.shape[:2]
    color = tuple(player["color"])
    side = player["id"]

    if player["shielding"]:
        shoulders = midpoint(landmarks[LEFT_SHOULDER], landmarks[RIGHT_SHOULDER])
        hips = midpoint(landmarks[LEFT_HIP], landmarks[RIGHT_HIP])
        center = _px(midpoint(shoulders, hips), w, h)
        overlay = canvas.copy()
        cv2.circle(overlay, center, 150, SHIELD_COLOR, -1)
        cv2.addWeighted(overlay, 0.3, canvas, 0.7, 0, dst=canvas)
        cv2.circle(canvas, center, 150, (200, 255, 255), 4, cv2.LINE_AA)
        cv2.circle(canvas, center, 125, SHIELD_COLOR, 2, cv2.LINE_AA)

    hands = _px(midpoint(landmarks[LEFT_WRIST], landmarks[RIGHT_WRIST]), w, h)
    if player["sword_stance"]:
        blade = SWORD_COLORS[side]
        cv2.line(canvas, hands, (hands[0], hands[1] - 150), blade, 8, cv2.LINE_AA)
        cv2.line(canvas, hands, (hands[0], hands[1] - 140), (255, 255, 255), 3, cv2.LINE_AA)
        cv2.line(canvas, (hands[0], hands[1] + 10), (hands[0], hands[1] + 30), (150, 150, 150), 10)

    if player["charging"]:
        level = player["charge_level"]
        size = int(15 + level * 45 + math.sin(tick * 0.4) * 5)
        glow = FULL_CHARGE_COLOR if level >= 1.0 else CHARGE_COLORS[side]
        cv2.circle(canvas, hands, max(size, 1), glow, -1, cv2.LINE_AA)
        cv2.circle(canvas, hands, max(size // 2, 1), (255, 255, 255), -1, cv2.LINE_AA)
        cv2.ellipse(canvas, hands, (size + 10, size + 10), -90, 0, 360 * level, (255, 255, 255), 5)

    for i, j in SKELETON_CONNECTIONS:
        cv2.line(canvas, _px(landmarks[i], w, h), _px(landmarks[j], w, h), color, 3, cv2.LINE_AA)
    for idx in (LEFT_WRIST, RIGHT_WRIST):
        pt = _px(landmarks[idx], w, h)
        cv2.circle(canvas, pt, 12, color, -1, cv2.LINE_AA)
        cv2.circle(canvas, pt, 17, color, 1, cv2.LINE_AA)


def draw_ai_target(canvas, player, tick=0):
    box = player["hurtbox"]
    if not box:
        return
    cx = int((box[0] + box[2]) / 2)
    cy = int((box[1] + box[3]) / 2)
    for half, rot in ((50, tick * 0.02), (35, -tick * 0.02)):
        pts = cv2.boxPoints(((cx, cy), (2 * half, 2 * half), math.degrees(rot)))
        cv2.polylines(canvas, [pts.astype(np.int32)], True, (50, 50, 255), 3, cv2.LINE_AA)
    cv2.circle(canvas, (cx, cy), 15, (0, 0, 255), -1, cv2.LINE_AA)


def draw_projectiles(canvas, projectiles):
    for proj in projectiles:
        x, y = int(proj["x"]), int(proj["y"])
        left = proj["owner"] == "left"
        if proj["kind"] == "special":
            cv2.circle(canvas, (x, y), 110, (255, 0, 200) if left else (0, 69, 255), -1, cv2.LINE_AA)
            cv2.circle(canvas, (x, y), 50, (255, 255, 255), -1, cv2.LINE_AA)
        elif proj["kind"] == "sword":
            beam = SWORD_COLORS[proj["owner"]]
            start = -90 if proj["vx"] > 0 else 90
            cv2.ellipse(canvas, (x, y), (20, 50), 0, start, start + 180, beam, 4, cv2.LINE_AA)
        else:
            tail = -60 if proj["vx"] > 0 else 60
            cv2.line(canvas, (x, y), (x + tail, y), (200, 200, 200), 4, cv2.LINE_AA)
            cv2.circle(canvas, (x, y), 20, (255, 255, 0) if left else (0, 51, 255), -1, cv2.LINE_AA)
            cv2.circle(canvas, (x, y), 10, (255, 255, 255), -1, cv2.LINE_AA)


def draw_floating_texts(canvas, texts):
    for ft in texts:
        fade = ft["life"] / max(ft["max_life"], 1)
        color = tuple(int(c * fade) for c in ft["color"])
        org = (int(ft["x"]) - 40, int(ft["y"]))
        cv2.putText(canvas, ft["text"], org, cv2.FONT_HERSHEY_SIMPLEX, 1.4, (0, 0, 0), 6, cv2.LINE_AA)
        cv2.putText(canvas, ft["text"], org, cv2.FONT_HERSHEY_SIMPLEX, 1.4, color, 3, cv2.LINE_AA)


def draw_status(canvas, snapshot, fps=None):
    """Minimal HUD for the debug window; the real overlay lives outside."""
    h, w = canvas.shape[:2]
    for side, x0 in (("left", 20), ("right", w // 2 + 20)):
        p = snapshot.player(side)
        frac = max(0.0, min(1.0, p["hp"] / max(p["max_hp"], 1)))
        bar_w = w // 2 - 40
        cv2.rectangle(canvas, (x0, 20), (x0 + bar_w, 44), (60, 40, 40), -1)
        cv2.rectangle(canvas, (x0, 20), (x0 + int(bar_w * frac), 44), tuple(p["color"]), -1)

    mode = "PRACTICE MODE - SINGLE PLAYER" if snapshot.player_count == 1 else "DUEL MODE - TWO PLAYERS"
    cv2.putText(canvas, mode, (20, h - 20), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 200), 1, cv2.LINE_AA)
    if fps is not None:
        cv2.putText(canvas, f"FPS: {fps:.1f}", (w - 140, h - 20), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 0), 1, cv2.LINE_AA)

    if snapshot.game_over:
        msg = f"{snapshot.winner.upper()} WINS  (r to restart)"
        cv2.putText(canvas, msg, (w // 2 - 330, h // 2), cv2.FONT_HERSHEY_SIMPLEX, 1.8, (255, 255, 255), 4, cv2.LINE_AA)


def draw_snapshot(canvas, snapshot, debug_cfg=None, fps=None):
    debug_cfg = debug_cfg or {}
    if debug_cfg.get("draw_skeleton", True):
        for side, landmarks in snapshot.bodies:
            draw_skeleton(canvas, landmarks, snapshot.player(side), snapshot.tick)
    if snapshot.right["is_ai"]:
        draw_ai_target(canvas, snapshot.right, snapshot.tick)
    draw_projectiles(canvas, snapshot.projectiles)
    draw_floating_texts(canvas, snapshot.floating_texts)
    draw_status(canvas, snapshot, fps if debug_cfg.get("show_fps", True) else None)
    return canvas
