"""
ARO System Controller - binds capture, detection, overlay and animation

The host loop calls detection_tick() and render_tick() from the same thread;
they never interleave, so the overlay set needs no locking.
"""

import time
from typing import Callable, List, Optional

import cv2
import numpy as np

from ..detection.candidates import Marker
from ..detection.detector import DetectionConfig, MarkerDetector
from ..overlay.animation import AnimationConfig, AnimationController, wall_clock_ms
from ..overlay.model_loader import ModelLoadError, ModelTemplate, load_model
from ..overlay.scene import SHAPE_NAMES, Scene
from ..overlay.synchronizer import OverlayConfig, OverlayMode, OverlaySynchronizer
from ..vision.camera import AsyncCamera, VideoFileSource
from ..visual.overlay_renderer import OverlayRenderer


StatusCallback = Callable[[str, str], None]


def print_status(message: str, severity: str = "info"):
    print(f"[STATUS:{severity}] {message}")


class ARController:
    """Main system controller: Camera -> Detection -> Overlay -> Animation"""

    def __init__(self, config: dict = None,
                 scene: Scene = None,
                 frame_source=None,
                 status_callback: Optional[StatusCallback] = None,
                 rng: Optional[np.random.Generator] = None,
                 clock: Callable[[], float] = wall_clock_ms):
        self.config = config or {}

        detection_config = DetectionConfig.from_dict(self.config.get("detection", {}))
        overlay_config = OverlayConfig.from_dict(self.config.get("overlay", {}))
        self.rng = rng if rng is not None else np.random.default_rng(detection_config.seed)

        # Pipeline
        self.detector = MarkerDetector(detection_config, rng=self.rng)
        self.scene = scene if scene is not None else Scene()
        self.synchronizer = OverlaySynchronizer(self.scene, overlay_config, rng=self.rng)
        self.animation = AnimationController(
            AnimationConfig.from_dict(self.config.get("animation", {})), clock=clock
        )

        display = self.config.get("display", {})
        self.renderer = OverlayRenderer(fov=display.get("fov", 75.0), near=display.get("near", 0.1))
        self.show_markers = display.get("show_markers", True)

        # Capture
        self.camera = frame_source

        # System state
        self.detection_enabled = False
        self.paused = False  # window hidden / minimized
        self.markers: List[Marker] = []

        # Object mode
        self.shape_index = 0
        self.model_template: Optional[ModelTemplate] = None
        self.use_custom_model = False

        # Status
        self.status_callback: StatusCallback = status_callback or print_status
        self._last_scan_status = None

        self._perf_counter = 0

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def update_status(self, message: str, severity: str = "info"):
        # Any other message replaces the scan status, so the next cycle re-sends it
        self._last_scan_status = None
        self.status_callback(message, severity)

    def _report_markers(self, count: int):
        # Per-cycle status only goes out when it changes
        if count > 0:
            message, severity = f"Detected {count} marker(s)", "success"
        else:
            message, severity = "Scanning for markers...", "info"
        if message != self._last_scan_status:
            self.update_status(message, severity)
            self._last_scan_status = message

    # ------------------------------------------------------------------
    # Capture lifecycle
    # ------------------------------------------------------------------

    def start_camera(self) -> bool:
        """Open the configured source and enable detection"""
        if self.camera is None:
            camera_config = self.config.get("camera", {})
            video_path = camera_config.get("video_path")
            if video_path:
                self.camera = VideoFileSource(video_path)
            else:
                self.camera = AsyncCamera(
                    device_id=camera_config.get("device_id", 0),
                    width=camera_config.get("width", 1280),
                    height=camera_config.get("height", 720),
                    fps=camera_config.get("fps", 30),
                )

        if not getattr(self.camera, "is_opened", True):
            if not self.camera.open():
                print("ERROR: Failed to open camera")
                self.update_status("Camera access denied or not available", "error")
                return False

        print(f"✓ Capture source opened: {self.camera.width}x{self.camera.height}")
        self.update_status("Camera started successfully!", "success")
        self.detection_enabled = True
        return True

    def stop(self):
        """Stop detection, release overlay objects and close capture"""
        self.detection_enabled = False
        self.synchronizer.clear()
        self.markers = []
        if self.camera is not None and hasattr(self.camera, "close"):
            self.camera.close()
        print("ARO system stopped")

    # ------------------------------------------------------------------
    # Ticks
    # ------------------------------------------------------------------

    @property
    def overlay_mode(self) -> OverlayMode:
        template = self.model_template if self.use_custom_model else None
        return OverlayMode(shape=SHAPE_NAMES[self.shape_index], template=template)

    def detection_tick(self) -> bool:
        """
        One detection cycle; returns False when no work was done

        Skips silently while disabled, paused, or before the first frame.
        A malformed frame is reported and leaves the overlay set unchanged.
        """
        if not self.detection_enabled or self.paused or self.camera is None:
            return False

        t0 = time.time()
        try:
            frame = self.camera.read_frame()
            if frame is None or frame.is_empty:
                return False
            markers = self.detector.detect(frame)
        except (ValueError, cv2.error) as e:
            self.update_status(f"Detection error: {e}", "error")
            return False

        self.synchronizer.sync(markers, self.overlay_mode)
        self.markers = markers
        self._report_markers(len(markers))

        self._perf_counter += 1
        if self._perf_counter % 100 == 0:
            elapsed_ms = (time.time() - t0) * 1000
            print(f"[PERF] Detection: total={elapsed_ms:.2f}ms "
                  f"(edges={self.detector.t_edges:.2f}ms, scoring={self.detector.t_scoring:.2f}ms), "
                  f"markers={len(markers)}")

        return True

    def render_tick(self, now_ms: Optional[float] = None) -> float:
        """Advance animation of the live overlay objects"""
        return self.animation.tick(self.synchronizer.objects, now_ms)

    def compose_frame(self) -> Optional[np.ndarray]:
        """Latest camera frame (BGR) with overlays drawn, None before capture is ready"""
        if self.camera is None:
            return None
        ret, image = self.camera.read()
        if not ret or image is None:
            return None
        markers = self.markers if self.show_markers else None
        return self.renderer.render(image, self.synchronizer.objects, markers)

    # ------------------------------------------------------------------
    # User requests
    # ------------------------------------------------------------------

    def toggle_detection(self) -> bool:
        self.detection_enabled = not self.detection_enabled
        if self.detection_enabled:
            self.update_status("Detection enabled", "success")
        else:
            self.update_status("Detection paused", "info")
        return self.detection_enabled

    def change_object(self) -> str:
        """Cycle the default shape (no-op in custom model mode)"""
        if self.use_custom_model:
            self.update_status("Using custom model", "success")
            return "model"

        self.shape_index = (self.shape_index + 1) % len(SHAPE_NAMES)
        shape = SHAPE_NAMES[self.shape_index]
        self.update_status(f"Changed to {shape}", "success")
        return shape

    def reset_to_default(self):
        """Leave custom model mode and go back to the first default shape"""
        self.use_custom_model = False
        self.shape_index = 0
        self.update_status("Switched to default shapes", "success")

    def load_custom_model(self, path: str) -> bool:
        self.update_status("Loading model...", "info")
        try:
            template = load_model(path)
        except ModelLoadError as e:
            print(f"⚠ Model load failed: {e}")
            self.update_status(f"Error loading model: {e}", "error")
            return False
        return self.set_model_template(template)

    def set_model_template(self, template: ModelTemplate) -> bool:
        """Enter custom model mode if the template can be normalized"""
        try:
            template.clone_normalized(self.synchronizer.config.model_target_size).dispose()
        except ModelLoadError as e:
            self.update_status(f"Error loading model: {e}", "error")
            return False

        self.model_template = template
        self.use_custom_model = True
        self.update_status(f"Custom model loaded: {template.name}", "success")
        return True

    # ------------------------------------------------------------------
    # Visibility
    # ------------------------------------------------------------------

    def pause(self):
        """Window hidden: stop detection work, keep all state"""
        self.paused = True

    def resume(self):
        self.paused = False
