"""
Preview widget - displays the composited camera + overlay frame
"""

import numpy as np
from PyQt6.QtWidgets import QWidget
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QPainter, QImage, QPixmap


class OverlayPreviewWidget(QWidget):
    """Shows BGR frames scaled to fit, letterboxed on black"""

    def __init__(self):
        super().__init__()
        self.setMinimumSize(640, 360)
        self.setStyleSheet("background-color: #000000; border: 1px solid #404040;")

        # Current frame (BGR numpy array or None)
        self.frame = None

    def update_frame(self, frame: np.ndarray):
        """
        Update preview with new frame

        Args:
            frame: BGR image as numpy array (H, W, 3) uint8
        """
        self.frame = np.ascontiguousarray(frame)
        self.update()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), Qt.GlobalColor.black)

        if self.frame is None:
            return

        height, width, channels = self.frame.shape
        qimage = QImage(
            self.frame.data,
            width,
            height,
            channels * width,
            QImage.Format.Format_RGB888
        ).rgbSwapped()  # BGR -> RGB

        scaled_pixmap = QPixmap.fromImage(qimage).scaled(
            self.width(),
            self.height(),
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.SmoothTransformation
        )

        x = (self.width() - scaled_pixmap.width()) // 2
        y = (self.height() - scaled_pixmap.height()) // 2
        painter.drawPixmap(x, y, scaled_pixmap)

    def clear(self):
        self.frame = None
        self.update()
