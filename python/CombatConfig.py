import copy

ATTACK_KINDS = ("standard", "special", "sword")

DEFAULT_CONFIG = {
    "classifier": {
        # normalized units
        "shield_radius": 0.25,
        "punch_speed_thresh": 0.04,
        "extension_thresh": 0.8,
        "chest_offset": 0.1,
        "scale_floor": 0.1,
        "sword_activation_dist": 0.15,
        "sword_height_thresh": 0.5,
        "sword_swing_thresh": 0.04,
    },
    "timing": {
        # milliseconds, monotonic clock
        "punch_cooldown_ms": 400,
        "sword_cooldown_ms": 800,
        "charge_window_ms": 1500,
        "charge_grace_ms": 500,
    },
    "attacks": {
        # damage / blocked damage / hit padding (px) / speed (px per tick)
        "standard": {"damage": 2, "block_damage": 0, "hit_padding": 20, "speed": 15},
        "special": {"damage": 10, "block_damage": 3, "hit_padding": 100, "speed": 10},
        "sword": {"damage": 3, "block_damage": 1, "hit_padding": 20, "speed": 18},
    },
    "simulator": {
        "canvas_width": 1280,
        "canvas_height": 720,
        "out_of_bounds_margin": 100,
        "text_life": 40,
        "text_drift": -3,
        "hit_color": [34, 34, 255],
        "block_color": [0, 215, 255],
    },
    "fallback": {
        "start_y": 0.5,
        "speed": 0.005,
        "min_y": 0.3,
        "max_y": 0.7,
        "x": 0.85,
        "size": 120,
    },
    "match": {
        "max_hp": 100,
        "center_x": 0.5,
        "left_color": [246, 130, 59],
        "right_color": [68, 68, 239],
    },
    "tracker": {
        "model_path": "pose_landmarker_lite.task",
        "num_poses": 2,
        "min_pose_detection_confidence": 0.5,
        "min_pose_presence_confidence": 0.5,
        "min_tracking_confidence": 0.5,
    },
    "camera": {
        "index": 0,
        "frame_width": 1280,
        "frame_height": 720,
    },
    "overlay": {
        "transport": "tcp",
        "host": "127.0.0.1",
        "port": 5555,
        "stats_interval": 15,
        "winner_interval": 10,
    },
    "debug": {
        "draw_skeleton": True,
        "show_fps": True,
        "fps_window": 20,
        "target_fps": 60,
    },
}


class CombatConfig:
    """
    Single home for every threshold, cooldown and damage value.
    Built from DEFAULT_CONFIG, deep-merged with a (possibly partial) config.json
    dict, and re-cached as plain attributes after every merge.
    """

    def __init__(self, cfg=None):
        self.cfg = copy.deepcopy(DEFAULT_CONFIG)
        self._cache()
        if cfg:
            self.update_config(cfg)

    def update_config(self, cfg):
        """Merge cfg over the current values. Raises ValueError and keeps the old values if invalid."""
        if not cfg:
            return
        self._apply(_deep_merge(copy.deepcopy(self.cfg), cfg))

    def replace_config(self, cfg):
        """Rebuild from DEFAULT_CONFIG, so keys removed from config.json fall back to their defaults."""
        self._apply(_deep_merge(copy.deepcopy(DEFAULT_CONFIG), cfg or {}))

    def _apply(self, merged):
        _validate(merged)
        previous = self.cfg
        self.cfg = merged
        try:
            self._cache()
        except TypeError as e:
            # e.g. a string where a number belongs
            self.cfg = previous
            self._cache()
            raise ValueError(f"Invalid config value: {e}") from e

    def _cache(self):
        c = self.cfg.get("classifier", {})
        t = self.cfg.get("timing", {})
        s = self.cfg.get("simulator", {})
        f = self.cfg.get("fallback", {})
        m = self.cfg.get("match", {})

        self.shield_radius = c.get("shield_radius", 0.25)
        self.punch_speed_thresh = c.get("punch_speed_thresh", 0.04)
        self.extension_thresh = c.get("extension_thresh", 0.8)
        self.chest_offset = c.get("chest_offset", 0.1)
        self.scale_floor = max(c.get("scale_floor", 0.1), 1e-6)
        self.sword_activation_dist = c.get("sword_activation_dist", 0.15)
        self.sword_height_thresh = c.get("sword_height_thresh", 0.5)
        self.sword_swing_thresh = c.get("sword_swing_thresh", 0.04)

        self.punch_cooldown_ms = t.get("punch_cooldown_ms", 400)
        self.sword_cooldown_ms = t.get("sword_cooldown_ms", 800)
        self.charge_window_ms = max(t.get("charge_window_ms", 1500), 1e-6)
        self.charge_grace_ms = t.get("charge_grace_ms", 500)

        attacks = self.cfg.get("attacks", {})
        self.attacks = {kind: dict(attacks[kind]) for kind in ATTACK_KINDS}

        self.canvas_width = s.get("canvas_width", 1280)
        self.canvas_height = s.get("canvas_height", 720)
        self.out_of_bounds_margin = s.get("out_of_bounds_margin", 100)
        self.text_life = s.get("text_life", 40)
        self.text_drift = s.get("text_drift", -3)
        self.hit_color = tuple(s.get("hit_color", (34, 34, 255)))
        self.block_color = tuple(s.get("block_color", (0, 215, 255)))

        self.fallback_start_y = f.get("start_y", 0.5)
        self.fallback_speed = f.get("speed", 0.005)
        self.fallback_min_y = f.get("min_y", 0.3)
        self.fallback_max_y = f.get("max_y", 0.7)
        self.fallback_x = f.get("x", 0.85)
        self.fallback_size = f.get("size", 120)

        self.max_hp = m.get("max_hp", 100)
        self.center_x = m.get("center_x", 0.5)
        self.left_color = tuple(m.get("left_color", (246, 130, 59)))
        self.right_color = tuple(m.get("right_color", (68, 68, 239)))

    def attack(self, kind):
        """Data-table row for an attack kind."""
        try:
            return self.attacks[kind]
        except KeyError:
            raise ValueError(f"Unknown attack kind: {kind!r}") from None

    def section(self, name):
        return self.cfg.get(name, {})


def _validate(cfg):
    attacks = cfg.get("attacks", {})
    if not isinstance(attacks, dict):
        raise ValueError(f"'attacks' must be a table, got {attacks!r}")
    unknown = set(attacks) - set(ATTACK_KINDS)
    if unknown:
        raise ValueError(f"Unknown attack kinds in config: {sorted(unknown)}")
    for kind in ATTACK_KINDS:
        if not isinstance(attacks.get(kind), dict):
            raise ValueError(f"Attack {kind!r} must be a table, got {attacks.get(kind)!r}")


def _deep_merge(dst, src):
    for k, v in src.items():
        if isinstance(v, dict) and isinstance(dst.get(k), dict):
            _deep_merge(dst[k], v)
        else:
            dst[k] = copy.deepcopy(v)
    return dst
