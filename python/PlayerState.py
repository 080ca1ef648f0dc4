class PlayerState:
    """
    Per-side fighter record that persists between ticks.

    Ownership:
      - hurtbox / detected: orchestrator + classifier for this side
      - action fields: classifier (and the reset paths)
      - hp: simulator damage path only
    """

    def __init__(self, side, max_hp=100, is_ai=False, color=(255, 255, 255)):
        # "left" / "right"
        self.id = side
        self.max_hp = max_hp
        self.hp = max_hp
        self.is_ai = is_ai
        self.color = color

        self.detected = False
        # (min_x, min_y, max_x, max_y) in canvas pixels
        self.hurtbox = None

        # defense
        self.shielding = False

        # special attack
        self.charging = False
        self.charge_start_time = 0.0
        self.charge_level = 0.0
        self.last_pose_time = 0.0

        # sword
        self.sword_stance = False
        self.prev_sword_y = None
        self.last_sword_fire_time = None

        # punch
        self.last_punch_time = None
        # wrist position relative to its shoulder, per hand
        self.prev_wrists = {"left": None, "right": None}

    @property
    def opponent_side(self):
        return "right" if self.id == "left" else "left"

    @property
    def direction(self):
        """Horizontal travel direction of this player's projectiles."""
        return 1 if self.id == "left" else -1

    def clear_charge(self):
        self.charging = False
        self.charge_level = 0.0

    def reset_action(self):
        """Drop transient action state; cooldown timers persist."""
        self.shielding = False
        self.clear_charge()
        self.sword_stance = False
        self.prev_sword_y = None
        self.prev_wrists = {"left": None, "right": None}

    def mark_undetected(self, keep_hurtbox=False):
        self.detected = False
        if not keep_hurtbox:
            self.hurtbox = None
        self.reset_action()

    def reset_match(self):
        self.hp = self.max_hp
        self.clear_charge()

    def to_dict(self):
        """Serialize to JSON-friendly dict."""
        return {
            "id": self.id,
            "hp": self.hp,
            "max_hp": self.max_hp,
            "is_ai": self.is_ai,
            "color": list(self.color),
            "detected": self.detected,
            "hurtbox": list(self.hurtbox) if self.hurtbox is not None else None,
            "shielding": self.shielding,
            "charging": self.charging,
            "charge_level": self.charge_level,
            "sword_stance": self.sword_stance,
        }
