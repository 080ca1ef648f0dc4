import dataclasses
import unittest

from fixtures import LEFT_BODY_X, RIGHT_BODY_X, make_body, special_body
from FrameOrchestrator import FrameOrchestrator
from Projectile import SpawnRequest


class OrchestratorTestCase(unittest.TestCase):
    def setUp(self):
        self.now = 0
        self.game = FrameOrchestrator(clock=lambda: self.now)
        self.left = self.game.players["left"]
        self.right = self.game.players["right"]

    def advance(self, bodies, ms=16):
        self.now += ms
        return self.game.tick(bodies)


class TestAssignment(OrchestratorTestCase):
    def test_mirrored_slots(self):
        a = make_body(RIGHT_BODY_X)
        b = make_body(LEFT_BODY_X)
        assigned = self.game.assign_bodies([a, b])
        self.assertIs(assigned["left"], b)
        self.assertIs(assigned["right"], a)

    def test_first_body_keeps_contested_slot(self):
        first = make_body(0.70)
        second = make_body(0.60)
        assigned = self.game.assign_bodies([first, second])
        self.assertIs(assigned["left"], first)
        self.assertIsNone(assigned["right"])

    def test_malformed_body_is_dropped(self):
        assigned = self.game.assign_bodies([make_body(RIGHT_BODY_X)[:12]])
        self.assertEqual(assigned, {"left": None, "right": None})

    def test_no_frame(self):
        self.assertEqual(self.game.assign_bodies(None), {"left": None, "right": None})


class TestModes(OrchestratorTestCase):
    def test_starts_in_practice_mode(self):
        self.assertTrue(self.right.is_ai)
        self.assertEqual(self.game.player_count, 1)

    def test_no_bodies_keeps_ai_running(self):
        snap = self.advance(None)
        self.assertFalse(snap.left["detected"])
        self.assertIsNone(snap.left["hurtbox"])
        self.assertTrue(snap.right["is_ai"])
        self.assertIsNotNone(snap.right["hurtbox"])

    def test_right_body_promotes_to_human(self):
        snap = self.advance([make_body(LEFT_BODY_X), make_body(RIGHT_BODY_X)])
        self.assertFalse(self.right.is_ai)
        self.assertTrue(self.right.detected)
        self.assertEqual(snap.player_count, 2)
        self.assertEqual(self.game.overlay_stats()["mode"], "duel")

    def test_left_only_forces_ai(self):
        self.advance([make_body(LEFT_BODY_X), make_body(RIGHT_BODY_X)])
        self.advance([make_body(LEFT_BODY_X)])
        self.assertTrue(self.right.is_ai)
        self.assertIsNotNone(self.right.hurtbox)
        self.assertEqual(self.game.player_count, 1)

    def test_human_right_stays_human_when_everyone_leaves(self):
        self.advance([make_body(LEFT_BODY_X), make_body(RIGHT_BODY_X)])
        self.advance([])
        self.assertFalse(self.right.is_ai)
        self.assertFalse(self.right.detected)
        self.assertIsNone(self.right.hurtbox)

    def test_lost_side_resets_action_state(self):
        self.advance([special_body(LEFT_BODY_X)])
        self.assertTrue(self.left.charging)
        self.advance(None)
        self.assertFalse(self.left.charging)
        self.assertEqual(self.left.charge_level, 0.0)

    def test_ai_target_oscillates(self):
        centers = []
        for _ in range(200):
            snap = self.advance([make_body(LEFT_BODY_X)])
            box = snap.right["hurtbox"]
            centers.append((box[1] + box[3]) / 2)
        step = 0.005 * 720
        self.assertGreaterEqual(min(centers), 0.3 * 720 - step - 1e-6)
        self.assertLessEqual(max(centers), 0.7 * 720 + step + 1e-6)
        self.assertGreater(max(centers), 0.69 * 720)
        self.assertLess(min(centers), 0.31 * 720)


class TestMatch(OrchestratorTestCase):
    def knock_out_both(self):
        # neutral bodies: left hurtbox x in [332.8, 563.2], right in [716.8, 947.2]
        self.left.hp = 2
        self.right.hp = 2
        self.game.simulator.spawn(SpawnRequest("standard", 700, 300, 15, 0, "left"))
        self.game.simulator.spawn(SpawnRequest("standard", 590, 300, -15, 0, "right"))
        return self.advance([make_body(LEFT_BODY_X), make_body(RIGHT_BODY_X)])

    def test_double_knockout_ends_match(self):
        snap = self.knock_out_both()
        self.assertTrue(snap.game_over)
        self.assertEqual(snap.winner, "right")
        self.assertEqual(self.left.hp, 0)
        self.assertEqual(self.right.hp, 0)

    def test_ai_knockout_left_wins(self):
        self.right.hp = 2
        self.game.simulator.spawn(SpawnRequest("standard", 1020, 360, 15, 0, "left"))
        snap = self.advance([make_body(LEFT_BODY_X)])
        self.assertTrue(snap.game_over)
        self.assertEqual(snap.winner, "left")

    def test_game_over_freezes_simulation(self):
        self.knock_out_both()
        self.game.simulator.spawn(SpawnRequest("standard", 100, 100, 15, 0, "left"))
        before = self.game.snapshot()
        after = self.advance([special_body(LEFT_BODY_X)])
        self.assertEqual(after.projectiles, before.projectiles)
        self.assertEqual(after.left, before.left)
        self.assertTrue(after.game_over)
        self.assertEqual(after.tick, before.tick + 1)

    def test_reset_restores_match(self):
        self.knock_out_both()
        self.left.charging = True
        self.left.charge_level = 0.5
        self.game.reset()

        self.assertFalse(self.game.game_over)
        self.assertIsNone(self.game.winner)
        self.assertEqual(self.left.hp, 100)
        self.assertEqual(self.right.hp, 100)
        self.assertFalse(self.left.charging)
        self.assertEqual(self.left.charge_level, 0.0)
        self.assertEqual(self.game.simulator.projectiles, [])
        self.assertEqual(self.game.simulator.floating_texts, [])

        snap = self.advance([make_body(LEFT_BODY_X)])
        self.assertFalse(snap.game_over)


class TestSnapshot(OrchestratorTestCase):
    def test_snapshot_is_frozen(self):
        snap = self.advance([make_body(LEFT_BODY_X)])
        with self.assertRaises(dataclasses.FrozenInstanceError):
            snap.tick = 99

    def test_snapshot_is_detached_from_live_state(self):
        snap = self.advance([make_body(LEFT_BODY_X)])
        self.left.hp = 1
        self.assertEqual(snap.left["hp"], 100)
        self.assertEqual(snap.player("left"), snap.left)

    def test_bodies_are_carried_for_drawing(self):
        body = make_body(LEFT_BODY_X)
        snap = self.advance([body])
        self.assertEqual(snap.bodies, (("left", body),))

    def test_explicit_time_overrides_clock(self):
        self.game.tick([special_body(LEFT_BODY_X)], now=0)
        self.game.tick([special_body(LEFT_BODY_X)], now=750)
        self.assertAlmostEqual(self.left.charge_level, 0.5)

    def test_overlay_stats_are_clamped_percentages(self):
        self.left.hp = -8
        self.right.hp = 47.6
        stats = self.game.overlay_stats()
        self.assertEqual(stats["left_hp"], 0)
        self.assertEqual(stats["right_hp"], 48)
        self.assertEqual(stats["player_count"], 1)
        self.assertEqual(stats["mode"], "practice")


if __name__ == "__main__":
    unittest.main()
