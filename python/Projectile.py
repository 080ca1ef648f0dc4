from CombatConfig import ATTACK_KINDS


class SpawnRequest:
    """Classifier output: an attack that the simulator should launch."""

    def __init__(self, kind, x, y, vx, vy, owner):
        if kind not in ATTACK_KINDS:
            raise ValueError(f"Unknown attack kind: {kind!r}")
        self.kind = kind
        self.x = x
        self.y = y
        self.vx = vx
        self.vy = vy
        self.owner = owner

    def __repr__(self):
        return (
            f"SpawnRequest(kind={self.kind!r}, x={self.x:.1f}, y={self.y:.1f}, "
            f"vx={self.vx:.1f}, owner={self.owner!r})"
        )


class Projectile:
    def __init__(self, pid, kind, damage, block_damage, x, y, vx, vy, owner):
        if kind not in ATTACK_KINDS:
            raise ValueError(f"Unknown attack kind: {kind!r}")
        self.id = pid
        self.kind = kind
        self.damage = damage
        self.block_damage = block_damage
        self.x = x
        self.y = y
        self.vx = vx
        self.vy = vy
        self.owner = owner
        # removed from the collection instead of ever being set False
        self.active = True

    def advance(self):
        self.x += self.vx
        self.y += self.vy

    def to_dict(self):
        return {
            "id": self.id,
            "kind": self.kind,
            "damage": self.damage,
            "block_damage": self.block_damage,
            "x": self.x,
            "y": self.y,
            "vx": self.vx,
            "vy": self.vy,
            "owner": self.owner,
            "active": self.active,
        }


class FloatingText:
    def __init__(self, tid, x, y, text, color, life, vy):
        self.id = tid
        self.x = x
        self.y = y
        self.text = text
        self.color = color
        self.life = life
        self.max_life = life
        self.vy = vy

    def advance(self):
        self.y += self.vy
        self.life -= 1

    @property
    def expired(self):
        return self.life <= 0

    def to_dict(self):
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "text": self.text,
            "color": list(self.color),
            "life": self.life,
            "max_life": self.max_life,
            "vy": self.vy,
        }
