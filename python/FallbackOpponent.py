from CombatConfig import CombatConfig


class FallbackOpponent:
    """
    Scripted stand-in for a missing right-hand player: a square hurtbox that
    sweeps up and down between two normalized bounds, one step per tick.
    It never attacks.
    """

    def __init__(self, config=None):
        if isinstance(config, CombatConfig):
            self.config = config
        else:
            self.config = CombatConfig(config)
        self.y = self.config.fallback_start_y
        # +1 moving down the canvas, -1 moving up; speed is read from config each step
        self.direction = 1

    def step(self):
        cfg = self.config
        self.y += self.direction * cfg.fallback_speed
        if self.y > cfg.fallback_max_y or self.y < cfg.fallback_min_y:
            self.direction = -self.direction
        return self.hurtbox()

    def hurtbox(self):
        cfg = self.config
        cx = cfg.canvas_width * cfg.fallback_x
        cy = self.y * cfg.canvas_height
        half = cfg.fallback_size / 2.0
        return (cx - half, cy - half, cx + half, cy + half)

    def drive(self, player):
        """Advance one tick and hand the new hurtbox to the AI-controlled player."""
        player.hurtbox = self.step()
        return player.hurtbox
