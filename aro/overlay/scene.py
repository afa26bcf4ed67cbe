"""
Minimal scene graph for overlay objects

Geometry is kept as vertex/edge arrays so the presentation layer can draw
wireframes with OpenCV.
"""

import math
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

import numpy as np


Color = Tuple[int, int, int]  # BGR


class Mesh:
    """Geometry + material handle; must be disposed exactly once"""

    def __init__(self, kind: str, vertices: np.ndarray, edges: np.ndarray, color: Color = (255, 255, 255)):
        self.kind = kind
        self.vertices: Optional[np.ndarray] = np.asarray(vertices, dtype=np.float32)
        self.edges: Optional[np.ndarray] = np.asarray(edges, dtype=np.int32).reshape(-1, 2)
        self.color = color
        self.disposed = False

    def bounding_size(self) -> np.ndarray:
        """Axis-aligned bounding box extent (x, y, z)"""
        if self.vertices is None or len(self.vertices) == 0:
            return np.zeros(3, dtype=np.float32)
        return self.vertices.max(axis=0) - self.vertices.min(axis=0)

    def dispose(self):
        """Release geometry and material"""
        if self.disposed:
            raise RuntimeError(f"{self.kind} mesh disposed twice")
        self.vertices = None
        self.edges = None
        self.disposed = True


@dataclass
class OverlayObject:
    """Renderable entity bound to one marker for the current frame"""

    mesh: Mesh
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    scale: np.ndarray = field(default_factory=lambda: np.ones(3))
    rotation: np.ndarray = field(default_factory=lambda: np.zeros(3))  # Euler XYZ, radians
    rotation_speed: float = 0.0
    base_scale: np.ndarray = field(default_factory=lambda: np.ones(3))

    @property
    def disposed(self) -> bool:
        return self.mesh.disposed

    def dispose(self):
        self.mesh.dispose()


class Scene:
    """Ordered set of live overlay objects"""

    def __init__(self):
        self.objects: List[OverlayObject] = []

    def add(self, obj: OverlayObject):
        if obj.disposed:
            raise RuntimeError("Cannot add a disposed object to the scene")
        self.objects.append(obj)

    def remove(self, obj: OverlayObject):
        """Raises ValueError if obj is not in the scene"""
        for i, existing in enumerate(self.objects):
            if existing is obj:
                del self.objects[i]
                return
        raise ValueError("Object is not in the scene")

    def __contains__(self, obj) -> bool:
        return any(existing is obj for existing in self.objects)

    def __iter__(self) -> Iterator[OverlayObject]:
        return iter(list(self.objects))

    def __len__(self) -> int:
        return len(self.objects)


# ---------------------------------------------------------------------------
# Primitive geometry (unit-sized, centred on the origin)
# ---------------------------------------------------------------------------

def box_geometry(width: float = 1.0, height: float = 1.0, depth: float = 1.0) -> Tuple[np.ndarray, np.ndarray]:
    w, h, d = width / 2, height / 2, depth / 2
    vertices = np.array([
        [-w, -h, -d], [w, -h, -d], [w, h, -d], [-w, h, -d],  # Back face
        [-w, -h, d], [w, -h, d], [w, h, d], [-w, h, d],      # Front face
    ], dtype=np.float32)
    edges = np.array([
        [0, 1], [1, 2], [2, 3], [3, 0],
        [4, 5], [5, 6], [6, 7], [7, 4],
        [0, 4], [1, 5], [2, 6], [3, 7],
    ], dtype=np.int32)
    return vertices, edges


def sphere_geometry(radius: float = 0.5, width_segments: int = 16,
                    height_segments: int = 16) -> Tuple[np.ndarray, np.ndarray]:
    """Latitude/longitude wireframe; poles are shared vertices"""
    vertices = [[0.0, radius, 0.0]]
    for ring in range(1, height_segments):
        phi = math.pi * ring / height_segments
        y = radius * math.cos(phi)
        r = radius * math.sin(phi)
        for seg in range(width_segments):
            theta = 2.0 * math.pi * seg / width_segments
            vertices.append([r * math.sin(theta), y, r * math.cos(theta)])
    vertices.append([0.0, -radius, 0.0])
    bottom = len(vertices) - 1

    def ring_index(ring: int, seg: int) -> int:
        return 1 + (ring - 1) * width_segments + seg % width_segments

    edges = []
    for ring in range(1, height_segments):
        for seg in range(width_segments):
            # Parallel
            edges.append([ring_index(ring, seg), ring_index(ring, seg + 1)])
            # Meridian
            if ring == 1:
                edges.append([0, ring_index(ring, seg)])
            if ring == height_segments - 1:
                edges.append([ring_index(ring, seg), bottom])
            else:
                edges.append([ring_index(ring, seg), ring_index(ring + 1, seg)])

    return np.array(vertices, dtype=np.float32), np.array(edges, dtype=np.int32)


def cone_geometry(radius: float = 0.5, height: float = 1.0,
                  radial_segments: int = 4) -> Tuple[np.ndarray, np.ndarray]:
    vertices = [[0.0, height / 2, 0.0]]
    for seg in range(radial_segments):
        theta = 2.0 * math.pi * seg / radial_segments
        vertices.append([radius * math.sin(theta), -height / 2, radius * math.cos(theta)])

    edges = []
    for seg in range(radial_segments):
        a = 1 + seg
        b = 1 + (seg + 1) % radial_segments
        edges.append([0, a])
        edges.append([a, b])

    return np.array(vertices, dtype=np.float32), np.array(edges, dtype=np.int32)


PRIMITIVES = {
    "cube": box_geometry,
    "sphere": sphere_geometry,
    "pyramid": cone_geometry,
}

SHAPE_NAMES = list(PRIMITIVES.keys())


def create_primitive(shape: str, color: Color) -> Mesh:
    """Unknown shape names fall back to a cube"""
    builder = PRIMITIVES.get(shape, box_geometry)
    vertices, edges = builder()
    return Mesh(shape if shape in PRIMITIVES else "cube", vertices, edges, color)
