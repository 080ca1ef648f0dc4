from queue import Empty, Full, Queue


class PoseTracker:
    def __init__(
        self,
        cfg,
    ):
        # local import: the slot below must work without loading the model stack
        import mediapipe as mp

        self._mp = mp
        self.cfg = cfg
        tcfg = cfg.get("tracker", {})
        self.last_timestamp_ms = -1

        vision = mp.tasks.vision
        options = vision.PoseLandmarkerOptions(
            base_options=mp.tasks.BaseOptions(
                model_asset_path=tcfg.get("model_path", "pose_landmarker_lite.task")
            ),
            running_mode=vision.RunningMode.VIDEO,
            num_poses=tcfg.get("num_poses", 2),
            min_pose_detection_confidence=tcfg.get("min_pose_detection_confidence", 0.5),
            min_pose_presence_confidence=tcfg.get("min_pose_presence_confidence", 0.5),
            min_tracking_confidence=tcfg.get("min_tracking_confidence", 0.5),
        )
        self.landmarker = vision.PoseLandmarker.create_from_options(options)

    def process_frame(self, frame_rgb, timestamp_ms):
        """
        Process an RGB frame (caller does the BGR->RGB conversion).
        Returns a list of bodies, each a list of normalized landmarks,
        or None when timestamp_ms did not advance (same camera frame).
        """
        timestamp_ms = int(timestamp_ms)
        if timestamp_ms <= self.last_timestamp_ms:
            return None
        self.last_timestamp_ms = timestamp_ms

        mp = self._mp
        image = mp.Image(image_format=mp.ImageFormat.SRGB, data=frame_rgb)
        result = self.landmarker.detect_for_video(image, timestamp_ms)
        if not result.pose_landmarks:
            return []
        return [list(body) for body in result.pose_landmarks]

    def close(self):
        if self.landmarker is not None:
            self.landmarker.close()
            self.landmarker = None


class LatestResultSlot:
    """
    Single-writer / single-reader slot with overwrite semantics.
    The writer replaces whatever is there; the reader never blocks and keeps
    returning the last value it saw when nothing new arrived.
    """

    def __init__(self):
        self._queue = Queue(maxsize=1)
        self._latest = None

    def put(self, item):
        while True:
            try:
                self._queue.put_nowait(item)
                return
            except Full:
                try:
                    self._queue.get_nowait()  # remove older result
                except Empty:
                    pass

    def latest(self):
        try:
            self._latest = self._queue.get_nowait()
        except Empty:
            pass
        return self._latest
