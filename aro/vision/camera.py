"""
Webcam / video file capture

Both sources read on a background thread and publish only the latest frame,
so the detection tick never blocks on capture.
"""

import threading
import time
from typing import Optional, Tuple

import cv2
import numpy as np

from .frame import Frame


class _ThreadedSource:
    """Shared latest-frame buffer for background capture threads"""

    def __init__(self):
        self.cap: Optional[cv2.VideoCapture] = None
        self.is_opened = False
        self.width = 0
        self.height = 0
        self.fps = 30

        # Async reading
        self.frame = None
        self.frame_lock = threading.Lock()
        self.running = False
        self.read_thread = None

    def _start_reader(self):
        self.is_opened = True
        self.running = True
        self.read_thread = threading.Thread(target=self._read_loop, daemon=True)
        self.read_thread.start()

    def _read_loop(self):
        raise NotImplementedError

    def _publish(self, frame: np.ndarray):
        with self.frame_lock:
            self.frame = frame

    def read(self) -> Tuple[bool, Optional[np.ndarray]]:
        """Read latest BGR frame (non-blocking)"""
        if not self.is_opened:
            return False, None

        with self.frame_lock:
            if self.frame is not None:
                return True, self.frame.copy()
            return False, None

    def read_frame(self) -> Optional[Frame]:
        """Latest frame as RGBA, or None until the first frame arrives"""
        ret, image = self.read()
        if not ret or image is None:
            return None
        return Frame.from_bgr(image)

    def close(self):
        """Stop background thread and release the capture"""
        self.running = False
        if self.read_thread is not None:
            self.read_thread.join(timeout=1.0)
            self.read_thread = None

        if self.cap is not None:
            self.cap.release()
            self.cap = None
        self.is_opened = False

    def get_resolution(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def __del__(self):
        self.close()


class AsyncCamera(_ThreadedSource):
    """Asynchronous webcam capture handler with background thread"""

    def __init__(self, device_id: int = 0, width: int = 1280, height: int = 720, fps: int = 30):
        super().__init__()
        self.device_id = device_id
        self.width = width
        self.height = height
        self.fps = fps

    def open(self) -> bool:
        """Open camera device and start background reading thread"""
        self.cap = cv2.VideoCapture(self.device_id)
        if not self.cap.isOpened():
            self.cap.release()
            self.cap = None
            return False

        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        self.cap.set(cv2.CAP_PROP_FPS, self.fps)

        # Driver may not honour the requested size
        self.width = int(self.cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        self.height = int(self.cap.get(cv2.CAP_PROP_FRAME_HEIGHT))

        self._start_reader()
        return True

    def _read_loop(self):
        """Background thread continuously reads frames"""
        while self.running:
            if self.cap is not None and self.cap.isOpened():
                ret, frame = self.cap.read()
                if ret:
                    self._publish(frame)
            else:
                time.sleep(0.05)


class VideoFileSource(_ThreadedSource):
    """Video file playback handler compatible with AsyncCamera interface"""

    def __init__(self, video_path: str, loop: bool = True):
        super().__init__()
        self.video_path = video_path
        self.loop = loop
        self.device_id = -1  # -1 indicates video file source

    def open(self) -> bool:
        """Open video file and start background reading thread"""
        self.cap = cv2.VideoCapture(self.video_path)
        if not self.cap.isOpened():
            print(f"Failed to open video file: {self.video_path}")
            return False

        self.width = int(self.cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        self.height = int(self.cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        self.fps = int(self.cap.get(cv2.CAP_PROP_FPS)) or 30

        print(f"Video opened: {self.width}x{self.height} @ {self.fps}fps")

        self._start_reader()
        return True

    def _read_loop(self):
        """Background thread paces playback at the file's frame rate"""
        frame_time = 1.0 / self.fps
        while self.running:
            if self.cap is None or not self.cap.isOpened():
                time.sleep(0.05)
                continue

            ret, frame = self.cap.read()
            if ret:
                self._publish(frame)
                time.sleep(frame_time)
            elif self.loop:
                self.cap.set(cv2.CAP_PROP_POS_FRAMES, 0)
                time.sleep(0.01)
            else:
                self.running = False
