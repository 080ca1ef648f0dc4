import itertools

from CombatConfig import CombatConfig
from Geometry import expand_box, point_in_box
from Projectile import FloatingText, Projectile


class CombatSimulator:
    """
    Owns active projectiles and floating texts; applies damage to players.
    Ids come from a counter local to this simulator.
    """

    def __init__(self, config=None):
        if isinstance(config, CombatConfig):
            self.config = config
        else:
            self.config = CombatConfig(config)
        self.projectiles = []
        self.floating_texts = []
        self._ids = itertools.count(1)

    def update_config(self, cfg):
        self.config.update_config(cfg)

    def spawn(self, request):
        """Create a projectile from a classifier SpawnRequest."""
        row = self.config.attack(request.kind)
        proj = Projectile(
            next(self._ids),
            request.kind,
            row["damage"],
            row["block_damage"],
            request.x,
            request.y,
            request.vx,
            request.vy,
            request.owner,
        )
        self.projectiles.append(proj)
        return proj

    def clear(self):
        self.projectiles = []
        self.floating_texts = []

    def step(self, players):
        """
        Advance one tick.
        players: {"left": PlayerState, "right": PlayerState}
        returns: list of FloatingText emitted by hits this tick
        """
        hits = self._update_projectiles(players)
        self._update_floating_texts()
        return hits

    # ------------------------------------------------------------------
    def _update_projectiles(self, players):
        cfg = self.config
        low = -cfg.out_of_bounds_margin
        high = cfg.canvas_width + cfg.out_of_bounds_margin

        survivors = []
        emitted = []
        for proj in self.projectiles:
            proj.advance()

            if proj.x < low or proj.x > high:
                continue

            owner = players.get(proj.owner)
            target = players.get(owner.opponent_side) if owner is not None else None
            if target is not None and self._collides(proj, target):
                emitted.append(self.resolve_hit(proj, target))
                continue

            survivors.append(proj)

        self.projectiles = survivors
        self.floating_texts.extend(emitted)
        return emitted

    def _collides(self, proj, target):
        if target.hurtbox is None:
            return False
        padding = self.config.attack(proj.kind)["hit_padding"]
        return point_in_box(proj.x, proj.y, expand_box(target.hurtbox, padding))

    def resolve_hit(self, proj, target):
        """Apply damage for a projectile that reached target; returns the feedback text."""
        cfg = self.config
        damage = proj.damage
        color = cfg.hit_color
        text = f"-{round(damage)}"

        if target.shielding:
            damage = proj.block_damage
            color = cfg.block_color
            text = "Blocked!" if damage == 0 else f"Block! -{round(damage)}"

        if damage > 0:
            target.hp -= damage

        return FloatingText(
            next(self._ids),
            proj.x,
            proj.y,
            text,
            color,
            cfg.text_life,
            cfg.text_drift,
        )

    def _update_floating_texts(self):
        alive = []
        for ft in self.floating_texts:
            ft.advance()
            if not ft.expired:
                alive.append(ft)
        self.floating_texts = alive
