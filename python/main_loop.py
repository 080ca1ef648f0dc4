import threading
import time
from collections import deque

import cv2

from CombatConfig import CombatConfig
from FrameOrchestrator import FrameOrchestrator
from OverlayBridge import OverlayBridge
from PoseTracker import LatestResultSlot, PoseTracker
from helpers import (
    ConfigWatcher,
    blank_canvas,
    draw_background,
    draw_snapshot,
    load_config,
)


# --------------------------------------------------------
# CAPTURE THREAD
# --------------------------------------------------------
def capture_thread(slot, stop_event, cfg):
    """
    Reads the camera, runs pose estimation, and overwrites the shared slot
    with (bodies, camera_frame). On any acquisition failure it reports once
    and exits; the game keeps running with no bodies.
    """
    camera_cfg = cfg.get("camera", {})
    cap = cv2.VideoCapture(camera_cfg.get("index", 0))
    if not cap.isOpened():
        print("[PY] ERROR: Cannot open camera, continuing without players")
        return
    cap.set(cv2.CAP_PROP_FRAME_WIDTH, camera_cfg.get("frame_width", 1280))
    cap.set(cv2.CAP_PROP_FRAME_HEIGHT, camera_cfg.get("frame_height", 720))

    try:
        tracker = PoseTracker(cfg)
    except (RuntimeError, ValueError, OSError) as e:
        print("[PY] ERROR: Cannot load pose model, continuing without players:", e)
        cap.release()
        return

    print("[PY] Capture thread started.")

    try:
        while not stop_event.is_set():
            ok, frame = cap.read()
            if not ok:
                time.sleep(0.01)
                continue

            rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
            bodies = tracker.process_frame(rgb, time.monotonic() * 1000.0)
            if bodies is None:
                # same video timestamp as last time
                continue
            if stop_event.is_set():
                # torn down mid-detection: discard
                break
            slot.put((bodies, frame))
    finally:
        cap.release()
        tracker.close()
        print("[PY] Capture thread exiting.")


# --------------------------------------------------------
# GAME THREAD
# --------------------------------------------------------
def reload_config(orchestrator, cfg_watcher, current_cfg):
    """
    Push a changed config.json into the running game.
    An invalid file is reported and the previous values stay in effect.
    Returns the config dict now considered current.
    """
    new_cfg = cfg_watcher.check_reload()
    if not new_cfg or new_cfg == current_cfg:
        return current_cfg
    try:
        orchestrator.reload_config(new_cfg)
    except ValueError as e:
        print("[ConfigWatcher] Rejected config change, keeping previous values:", e)
    # remember it either way so a bad file is reported once, not every frame
    return new_cfg


def game_thread(slot, stop_event, cfg, config_path="config.json", overlay_transport=None):
    cfg_watcher = ConfigWatcher(config_path)
    # file contents as last seen, for change detection only
    current_cfg = cfg_watcher.get_config()

    # cfg was validated by main()
    combat_cfg = CombatConfig(cfg)
    orchestrator = FrameOrchestrator(combat_cfg)

    overlay_cfg = combat_cfg.section("overlay")
    transport = overlay_transport or overlay_cfg.get("transport", "tcp")
    overlay = None
    if transport != "none":
        overlay = OverlayBridge(
            transport,
            overlay_cfg.get("host", "127.0.0.1"),
            overlay_cfg.get("port", 5555),
        )

    window = "Pose Combat"
    width, height = combat_cfg.canvas_width, combat_cfg.canvas_height
    cv2.namedWindow(window, cv2.WINDOW_NORMAL)
    cv2.resizeWindow(window, width, height)

    debug_cfg = combat_cfg.section("debug")
    fps_times = deque(maxlen=debug_cfg.get("fps_window", 20))
    frame_interval = 1.0 / max(debug_cfg.get("target_fps", 60), 1)
    current_fps = None
    was_over = False

    print("[PY] Game thread started.")

    try:
        while not stop_event.is_set():
            started = time.monotonic()

            current_cfg = reload_config(orchestrator, cfg_watcher, current_cfg)

            latest = slot.latest()
            bodies, camera_frame = latest if latest is not None else (None, None)

            snapshot = orchestrator.tick(bodies)

            if overlay is not None:
                overlay.update()
                if snapshot.tick % overlay_cfg.get("stats_interval", 15) == 0:
                    overlay.send_stats(orchestrator.overlay_stats())
                if snapshot.game_over and snapshot.tick % overlay_cfg.get("winner_interval", 10) == 0:
                    overlay.send_winner(snapshot.winner)

            if snapshot.game_over and not was_over:
                print(f"[PY] {snapshot.winner} player wins, press 'r' to restart")
            was_over = snapshot.game_over

            fps_times.append(started)
            if len(fps_times) > 1:
                current_fps = (len(fps_times) - 1) / max(fps_times[-1] - fps_times[0], 1e-6)

            canvas = draw_background(blank_canvas(width, height), camera_frame)
            draw_snapshot(canvas, snapshot, debug_cfg, current_fps)
            cv2.imshow(window, canvas)

            key = cv2.waitKey(1) & 0xFF
            if key == 27:
                stop_event.set()
                break
            if key == ord("r"):
                orchestrator.reset()

            spare = frame_interval - (time.monotonic() - started)
            if spare > 0:
                time.sleep(spare)
    finally:
        # any exit, clean or not, shuts the whole app down
        stop_event.set()
        if overlay is not None:
            overlay.close()
        cv2.destroyAllWindows()
        print("[PY] Game thread exiting.")


# --------------------------------------------------------
# MAIN ENTRY
# --------------------------------------------------------
def main(config_path="config.json", overrides=None, overlay_transport=None):
    cfg = load_config(config_path)
    if not cfg:
        print("[PY] WARNING: no config.json or failed to load, using defaults.")
    try:
        combat_cfg = CombatConfig(cfg)
    except ValueError as e:
        print("[PY] WARNING: invalid config, using defaults:", e)
        combat_cfg = CombatConfig()
    if overrides:
        combat_cfg.update_config(overrides)
    cfg = combat_cfg.cfg

    slot = LatestResultSlot()
    stop_event = threading.Event()

    # --------------- start threads ----------------
    cap_thread = threading.Thread(
        target=capture_thread, args=(slot, stop_event, cfg), daemon=True
    )
    play_thread = threading.Thread(
        target=game_thread,
        args=(slot, stop_event, cfg, config_path, overlay_transport),
        daemon=True,
    )

    cap_thread.start()
    play_thread.start()

    # Keep main thread alive
    try:
        while not stop_event.is_set():
            time.sleep(0.1)
    except KeyboardInterrupt:
        stop_event.set()

    cap_thread.join(timeout=1.0)
    play_thread.join(timeout=1.0)

    print("[PY] Shutdown complete.")


if __name__ == "__main__":
    main()
