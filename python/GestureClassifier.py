# GestureClassifier.py
from CombatConfig import CombatConfig
from Geometry import (
    LEFT_HIP,
    LEFT_SHOULDER,
    LEFT_WRIST,
    RIGHT_HIP,
    RIGHT_SHOULDER,
    RIGHT_WRIST,
    body_scale,
    clamp01,
    dist,
    is_complete_body,
    midpoint,
    mirror_to_canvas,
    mirrored_bounding_box,
    relative_to,
    to_point,
)
from Projectile import SpawnRequest

# hand -> (wrist, shoulder, hip) landmark indices
HAND_LANDMARKS = {
    "left": (LEFT_WRIST, LEFT_SHOULDER, LEFT_HIP),
    "right": (RIGHT_WRIST, RIGHT_SHOULDER, RIGHT_HIP),
}


class GestureClassifier:
    """
    Turns one body's landmarks into action state + spawn requests.

    Priority per tick: shield -> special charge -> sword stance -> punch.
    Once an earlier rule claims the player, later ones are skipped (or,
    for the sword, actively cleared).
    """

    def __init__(self, config=None):
        if isinstance(config, CombatConfig):
            self.config = config
        else:
            self.config = CombatConfig(config)

    def update_config(self, cfg):
        self.config.update_config(cfg)

    def classify_player(self, player, landmarks, now):
        """
        player: PlayerState, mutated in place
        landmarks: this tick's body for the player's side, or None
        now: monotonic time in milliseconds
        returns: list of SpawnRequest
        """
        if landmarks is None or not is_complete_body(landmarks):
            player.mark_undetected()
            return []

        cfg = self.config
        player.detected = True
        player.hurtbox = mirrored_bounding_box(landmarks, cfg.canvas_width, cfg.canvas_height)

        spawns = []
        # velocity history is a one-tick backward difference, so it is
        # refreshed on every detected tick whichever rule wins
        speeds = self._update_wrist_history(player, landmarks)

        self._detect_shield(player, landmarks)
        if player.shielding:
            return spawns

        self._detect_special(player, landmarks, now, spawns)
        self._detect_sword(player, landmarks, now, spawns)

        if not player.charging and not player.sword_stance:
            self._detect_punch(player, landmarks, now, speeds, spawns)

        return spawns

    # ------------------------------------------------------------------
    # history
    # ------------------------------------------------------------------
    def _update_wrist_history(self, player, lm):
        speeds = {}
        for hand, (wrist_idx, shoulder_idx, _) in HAND_LANDMARKS.items():
            rel = relative_to(lm[wrist_idx], lm[shoulder_idx])
            prev = player.prev_wrists.get(hand)
            if prev is None:
                speeds[hand] = None
            else:
                speeds[hand] = dist(rel, prev)
            player.prev_wrists[hand] = rel
        return speeds

    @staticmethod
    def _cooldown_elapsed(last_time, now, cooldown):
        return last_time is None or now - last_time >= cooldown

    # ------------------------------------------------------------------
    # 1. shield
    # ------------------------------------------------------------------
    def _detect_shield(self, player, lm):
        radius = self.config.shield_radius
        shoulders = (lm[LEFT_SHOULDER], lm[RIGHT_SHOULDER])

        def near_shoulder(wrist):
            return any(dist(wrist, s) < radius for s in shoulders)

        if near_shoulder(lm[LEFT_WRIST]) and near_shoulder(lm[RIGHT_WRIST]):
            player.shielding = True
            player.sword_stance = False
            player.prev_sword_y = None
            # shield wins over an in-progress charge; nothing is fired
            player.clear_charge()
        else:
            player.shielding = False

    # ------------------------------------------------------------------
    # 2. special charge
    # ------------------------------------------------------------------
    def _detect_special(self, player, lm, now, spawns):
        cfg = self.config
        _, lw_y = to_point(lm[LEFT_WRIST])
        _, rw_y = to_point(lm[RIGHT_WRIST])
        _, ls_y = to_point(lm[LEFT_SHOULDER])
        _, rs_y = to_point(lm[RIGHT_SHOULDER])

        # image y grows downward: "up" means smaller y
        left_up, left_down = lw_y < ls_y, lw_y > ls_y
        right_up, right_down = rw_y < rs_y, rw_y > rs_y
        asymmetric = (left_up and right_down) or (right_up and left_down)
        holding = asymmetric and not player.shielding and not player.sword_stance

        if holding:
            if not player.charging:
                player.charging = True
                player.charge_start_time = now
            player.last_pose_time = now
            elapsed = now - player.charge_start_time
            player.charge_level = clamp01(elapsed / cfg.charge_window_ms)
            return

        if not player.charging:
            return

        if player.charge_level >= 1.0:
            cx, cy = midpoint(lm[LEFT_WRIST], lm[RIGHT_WRIST])
            spawns.append(self._spawn("special", player, cx, cy))
            player.clear_charge()
        elif now - player.last_pose_time > cfg.charge_grace_ms:
            player.clear_charge()

    # ------------------------------------------------------------------
    # 3. sword stance
    # ------------------------------------------------------------------
    def _detect_sword(self, player, lm, now, spawns):
        cfg = self.config
        if player.shielding or player.charging:
            player.sword_stance = False
            player.prev_sword_y = None
            return

        cx, hand_y = midpoint(lm[LEFT_WRIST], lm[RIGHT_WRIST])
        hand_dist = dist(lm[LEFT_WRIST], lm[RIGHT_WRIST])
        in_stance = hand_dist < cfg.sword_activation_dist and hand_y >= cfg.sword_height_thresh

        if not in_stance:
            player.sword_stance = False
            player.prev_sword_y = None
            return

        player.sword_stance = True
        if player.prev_sword_y is not None:
            dy = hand_y - player.prev_sword_y
            if abs(dy) > cfg.sword_swing_thresh and self._cooldown_elapsed(
                player.last_sword_fire_time, now, cfg.sword_cooldown_ms
            ):
                player.last_sword_fire_time = now
                spawns.append(self._spawn("sword", player, cx, hand_y))
        player.prev_sword_y = hand_y

    # ------------------------------------------------------------------
    # 4. punch
    # ------------------------------------------------------------------
    def _detect_punch(self, player, lm, now, speeds, spawns):
        cfg = self.config
        # checked once per tick so both hands can land together
        if not self._cooldown_elapsed(player.last_punch_time, now, cfg.punch_cooldown_ms):
            return

        scale = body_scale(lm, cfg.scale_floor)
        fired = False
        for hand, (wrist_idx, shoulder_idx, hip_idx) in HAND_LANDMARKS.items():
            wrist = lm[wrist_idx]
            shoulder = lm[shoulder_idx]
            wx, wy = to_point(wrist)
            _, sy = to_point(shoulder)
            _, hy = to_point(lm[hip_idx])

            # chest-to-hip band
            if wy < sy - cfg.chest_offset or wy > hy - cfg.chest_offset:
                continue

            speed = speeds.get(hand)
            if speed is None or speed <= cfg.punch_speed_thresh:
                continue

            extension_ratio = dist(wrist, shoulder) / scale
            if extension_ratio <= cfg.extension_thresh:
                continue

            spawns.append(self._spawn("standard", player, wx, wy))
            fired = True

        if fired:
            player.last_punch_time = now

    # ------------------------------------------------------------------
    def _spawn(self, kind, player, nx, ny):
        cfg = self.config
        x, y = mirror_to_canvas(nx, ny, cfg.canvas_width, cfg.canvas_height)
        speed = cfg.attack(kind)["speed"]
        return SpawnRequest(kind, x, y, player.direction * speed, 0.0, player.id)
