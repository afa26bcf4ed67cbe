"""
Main window for the ARO system

Two QTimers on the GUI thread drive the render tick and the detection tick.
"""

from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QPushButton, QLabel, QFileDialog,
)
from PyQt6.QtCore import Qt, QTimer, QEvent

from .preview_widget import OverlayPreviewWidget
from ..core.controller import ARController


STATUS_COLORS = {
    "info": "#a0a0a0",
    "success": "#4caf50",
    "error": "#f44336",
}


class ARMainWindow(QMainWindow):
    """Preview, controls and status bar around an ARController"""

    def __init__(self, controller: ARController, render_interval_ms: int = 16,
                 detection_interval_ms: int = 16):
        super().__init__()
        self.controller = controller
        self.setWindowTitle("ARO - AR Marker Overlay")
        self.setGeometry(100, 100, 1000, 640)

        self.controller.status_callback = self._on_status

        self._build_ui()

        # Status bar
        self.status_label = QLabel("Press Start Camera to begin")
        self.statusBar().addWidget(self.status_label)
        self.marker_label = QLabel("")
        self.statusBar().addPermanentWidget(self.marker_label)

        # Render tick (animation + presentation) runs always
        self.render_timer = QTimer()
        self.render_timer.timeout.connect(self._on_render_tick)
        self.render_timer.start(render_interval_ms)

        # Detection tick reschedules unconditionally, the controller decides whether to work
        self.detection_timer = QTimer()
        self.detection_timer.timeout.connect(self._on_detection_tick)
        self.detection_timer.start(detection_interval_ms)

    def _build_ui(self):
        central = QWidget()
        layout = QVBoxLayout(central)

        self.preview = OverlayPreviewWidget()
        layout.addWidget(self.preview, stretch=1)

        buttons = QHBoxLayout()
        for text, slot in (
            ("Start Camera", self._on_start),
            ("Toggle Detection", self._on_toggle_detection),
            ("Change Object", self._on_change_object),
            ("Load Model...", self._on_load_model),
            ("Reset to Default", self._on_reset),
        ):
            button = QPushButton(text)
            button.clicked.connect(slot)
            buttons.addWidget(button)
        layout.addLayout(buttons)

        self.setCentralWidget(central)

    # ------------------------------------------------------------------
    # Ticks
    # ------------------------------------------------------------------

    def _on_render_tick(self):
        self.controller.render_tick()
        composed = self.controller.compose_frame()
        if composed is not None:
            self.preview.update_frame(composed)

    def _on_detection_tick(self):
        if self.controller.detection_tick():
            self.marker_label.setText(f"{len(self.controller.markers)} marker(s)")

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    def _on_start(self):
        self.controller.start_camera()

    def _on_toggle_detection(self):
        self.controller.toggle_detection()

    def _on_change_object(self):
        self.controller.change_object()

    def _on_reset(self):
        self.controller.reset_to_default()

    def _on_load_model(self):
        path, _ = QFileDialog.getOpenFileName(
            self, "Load 3D Model", "", "3D Models (*.obj *.glb *.gltf);;All Files (*)"
        )
        if path:
            self.controller.load_custom_model(path)

    def _on_status(self, message: str, severity: str = "info"):
        color = STATUS_COLORS.get(severity, STATUS_COLORS["info"])
        self.status_label.setStyleSheet(f"color: {color};")
        self.status_label.setText(message)

    # ------------------------------------------------------------------
    # Window events
    # ------------------------------------------------------------------

    def changeEvent(self, event):
        """Minimized windows pause detection without tearing down state"""
        if event.type() == QEvent.Type.WindowStateChange:
            if self.windowState() & Qt.WindowState.WindowMinimized:
                self.controller.pause()
            else:
                self.controller.resume()
        super().changeEvent(event)

    def closeEvent(self, event):
        self.render_timer.stop()
        self.detection_timer.stop()
        self.controller.stop()
        super().closeEvent(event)
