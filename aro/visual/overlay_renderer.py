"""
Wireframe compositor - draws overlay objects onto the camera frame

Camera sits at the origin looking down -Z with +Y up (world space used by the
synchronizer); points are flipped into OpenCV's camera convention before
cv2.projectPoints.
"""

import math
from typing import Iterable, Optional, Sequence

import cv2
import numpy as np

from ..detection.candidates import Marker
from ..overlay.scene import OverlayObject


def euler_xyz_matrix(rotation: np.ndarray) -> np.ndarray:
    """Rotation matrix for intrinsic XYZ Euler angles (radians)"""
    rx, ry, rz = rotation
    cx, sx = math.cos(rx), math.sin(rx)
    cy, sy = math.cos(ry), math.sin(ry)
    cz, sz = math.cos(rz), math.sin(rz)

    Rx = np.array([[1, 0, 0], [0, cx, -sx], [0, sx, cx]])
    Ry = np.array([[cy, 0, sy], [0, 1, 0], [-sy, 0, cy]])
    Rz = np.array([[cz, -sz, 0], [sz, cz, 0], [0, 0, 1]])
    return Rx @ Ry @ Rz


class OverlayRenderer:
    """Perspective wireframe renderer on top of BGR frames"""

    MARKER_COLOR = (0, 255, 0)

    def __init__(self, width: int = 1280, height: int = 720, fov: float = 75.0, near: float = 0.1):
        self.fov = fov
        self.near = near
        self.width = width
        self.height = height
        self.camera_matrix = self._build_camera_matrix()
        self.line_thickness = 2

    def set_size(self, width: int, height: int):
        if (width, height) != (self.width, self.height):
            self.width = width
            self.height = height
            self.camera_matrix = self._build_camera_matrix()

    def _build_camera_matrix(self) -> np.ndarray:
        # Vertical field of view
        focal = (self.height / 2.0) / math.tan(math.radians(self.fov) / 2.0)
        return np.array([
            [focal, 0.0, self.width / 2.0],
            [0.0, focal, self.height / 2.0],
            [0.0, 0.0, 1.0],
        ], dtype=np.float64)

    @staticmethod
    def world_vertices(obj: OverlayObject) -> np.ndarray:
        """Object vertices after scale, rotation and translation"""
        verts = obj.mesh.vertices.astype(np.float64) * obj.scale
        verts = verts @ euler_xyz_matrix(obj.rotation).T
        return verts + obj.position

    def project(self, points: np.ndarray) -> Optional[np.ndarray]:
        """World points -> pixel coordinates, None if any point is behind the near plane"""
        cv_points = points * np.array([1.0, -1.0, -1.0])
        if len(cv_points) == 0 or np.any(cv_points[:, 2] < self.near):
            return None

        image_points, _ = cv2.projectPoints(
            cv_points.reshape(-1, 1, 3),
            np.zeros(3),
            np.zeros(3),
            self.camera_matrix,
            np.zeros(5),
        )
        return image_points.reshape(-1, 2)

    def draw_object(self, canvas: np.ndarray, obj: OverlayObject):
        if obj.disposed or len(obj.mesh.edges) == 0:
            return

        pts = self.project(self.world_vertices(obj))
        if pts is None or not np.all(np.isfinite(pts)):
            return

        pts = np.round(pts).astype(np.int32)
        lines = [np.array([pts[i], pts[j]]) for i, j in obj.mesh.edges]
        cv2.polylines(canvas, lines, False, obj.mesh.color, self.line_thickness, cv2.LINE_AA)

    def draw_markers(self, canvas: np.ndarray, markers: Sequence[Marker]):
        h, w = canvas.shape[:2]
        for marker in markers:
            top_left = (int(marker.x * w), int(marker.y * h))
            bottom_right = (int((marker.x + marker.width) * w), int((marker.y + marker.height) * h))
            cv2.rectangle(canvas, top_left, bottom_right, self.MARKER_COLOR, 1)
            cv2.putText(canvas, f"{marker.score:.2f}", (top_left[0] + 4, top_left[1] + 16),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.5, self.MARKER_COLOR, 1, cv2.LINE_AA)

    def render(self, frame: np.ndarray, objects: Iterable[OverlayObject],
               markers: Optional[Sequence[Marker]] = None) -> np.ndarray:
        """Composite onto a copy of the BGR frame"""
        h, w = frame.shape[:2]
        self.set_size(w, h)

        canvas = frame.copy()
        if markers:
            self.draw_markers(canvas, markers)
        for obj in objects:
            self.draw_object(canvas, obj)
        return canvas
