import time
from dataclasses import dataclass, field
from typing import Optional, Tuple

from CombatConfig import CombatConfig
from CombatSimulator import CombatSimulator
from FallbackOpponent import FallbackOpponent
from Geometry import is_complete_body, shoulder_center_x
from GestureClassifier import GestureClassifier
from PlayerState import PlayerState


def monotonic_ms():
    return time.monotonic() * 1000.0


@dataclass(frozen=True)
class GameSnapshot:
    """Immutable per-tick view handed to the renderer and overlay."""
    tick: int
    left: dict
    right: dict
    projectiles: Tuple[dict, ...]
    floating_texts: Tuple[dict, ...]
    game_over: bool
    winner: Optional[str]
    player_count: int
    # (side, landmarks) pairs for skeleton drawing this tick
    bodies: Tuple[tuple, ...] = field(default_factory=tuple)

    def player(self, side):
        return self.left if side == "left" else self.right


class FrameOrchestrator:
    """
    Runs one game tick per rendered frame:
    assign bodies -> classify both sides -> fallback AI -> simulate -> snapshot.
    """

    def __init__(self, config=None, clock=monotonic_ms):
        if isinstance(config, CombatConfig):
            self.config = config
        else:
            self.config = CombatConfig(config)
        self.clock = clock

        cfg = self.config
        self.classifier = GestureClassifier(cfg)
        self.simulator = CombatSimulator(cfg)
        self.fallback = FallbackOpponent(cfg)
        self.players = {
            "left": PlayerState("left", cfg.max_hp, is_ai=False, color=cfg.left_color),
            # right starts as the practice target until someone steps in
            "right": PlayerState("right", cfg.max_hp, is_ai=True, color=cfg.right_color),
        }

        self.game_over = False
        self.winner = None
        self.tick_count = 0

    def update_config(self, cfg):
        # classifier, simulator and fallback share this object
        self.config.update_config(cfg)

    def reload_config(self, cfg):
        """Apply a freshly read config.json; raises ValueError and keeps the old values if invalid."""
        self.config.replace_config(cfg)

    # ------------------------------------------------------------------
    def assign_bodies(self, bodies):
        """
        Mirrored view: a body right of center in camera space is the left player.
        First body to claim a slot keeps it; malformed bodies are dropped.
        """
        assigned = {"left": None, "right": None}
        for landmarks in bodies or ():
            if not is_complete_body(landmarks):
                continue
            side = "left" if shoulder_center_x(landmarks) > self.config.center_x else "right"
            if assigned[side] is None:
                assigned[side] = landmarks
        return assigned

    def tick(self, bodies, now=None):
        """
        bodies: latest pose frame (list of landmark lists), possibly stale or None
        now: monotonic milliseconds, read from the clock when omitted
        """
        self.tick_count += 1
        if self.game_over:
            return self.snapshot()

        if now is None:
            now = self.clock()

        assigned = self.assign_bodies(bodies)
        left = self.players["left"]
        right = self.players["right"]

        spawns = self.classifier.classify_player(left, assigned["left"], now)

        if assigned["right"] is not None:
            self._set_right_ai(False)
            spawns.extend(self.classifier.classify_player(right, assigned["right"], now))
        else:
            right.mark_undetected(keep_hurtbox=right.is_ai)
            if assigned["left"] is not None:
                self._set_right_ai(True)

        if right.is_ai:
            self.fallback.drive(right)

        for request in spawns:
            self.simulator.spawn(request)
        self.simulator.step(self.players)

        if left.hp <= 0 or right.hp <= 0:
            self.game_over = True
            self.winner = "right" if left.hp <= 0 else "left"
            print(f"[GAME] Match over, {self.winner} wins (hp {left.hp} / {right.hp})")

        return self.snapshot(assigned)

    def _set_right_ai(self, is_ai):
        right = self.players["right"]
        if right.is_ai != is_ai:
            right.is_ai = is_ai
            print("[GAME] Right slot ->", "AI target (practice)" if is_ai else "human (duel)")

    # ------------------------------------------------------------------
    @property
    def player_count(self):
        return 1 if self.players["right"].is_ai else 2

    def snapshot(self, assigned=None):
        bodies = tuple((side, lm) for side, lm in (assigned or {}).items() if lm is not None)
        return GameSnapshot(
            tick=self.tick_count,
            left=self.players["left"].to_dict(),
            right=self.players["right"].to_dict(),
            projectiles=tuple(p.to_dict() for p in self.simulator.projectiles),
            floating_texts=tuple(t.to_dict() for t in self.simulator.floating_texts),
            game_over=self.game_over,
            winner=self.winner,
            player_count=self.player_count,
            bodies=bodies,
        )

    def overlay_stats(self):
        """Scalar exports for the UI overlay."""

        def pct(p):
            return max(0.0, min(100.0, 100.0 * p.hp / max(p.max_hp, 1e-6)))

        return {
            "left_hp": round(pct(self.players["left"])),
            "right_hp": round(pct(self.players["right"])),
            "player_count": self.player_count,
            "mode": "practice" if self.player_count == 1 else "duel",
        }

    def reset(self):
        """Restart the match: full health, no projectiles/texts/charges, not over."""
        for player in self.players.values():
            player.reset_match()
        self.simulator.clear()
        self.game_over = False
        self.winner = None
        print("[GAME] Match reset.")
