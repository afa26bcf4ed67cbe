"""
Custom model templates

Wavefront OBJ is parsed here, glTF/GLB goes through trimesh. Other
interchange formats (FBX included) are reported as unsupported.
"""

from pathlib import Path
from typing import List

import numpy as np
import trimesh

from .scene import Color, Mesh


GLTF_EXTENSIONS = (".gltf", ".glb")
SUPPORTED_EXTENSIONS = (".obj",) + GLTF_EXTENSIONS


class ModelLoadError(Exception):
    """Raised when an imported asset cannot be turned into a template"""


class ModelTemplate:
    """
    Read-only prototype for overlay objects in custom model mode

    Every overlay object gets an independent clone of the geometry.
    """

    def __init__(self, vertices: np.ndarray, edges: np.ndarray, name: str = "model",
                 color: Color = (255, 255, 255)):
        self.vertices = np.asarray(vertices, dtype=np.float32).reshape(-1, 3)
        self.edges = np.asarray(edges, dtype=np.int32).reshape(-1, 2)
        self.name = name
        self.color = color
        self.vertices.setflags(write=False)
        self.edges.setflags(write=False)

    @classmethod
    def from_faces(cls, vertices, faces: List[List[int]], name: str = "model") -> "ModelTemplate":
        """Wireframe edges from polygon faces (each undirected edge once)"""
        edge_set = set()
        for face in faces:
            for i in range(len(face)):
                a, b = face[i], face[(i + 1) % len(face)]
                if a != b:
                    edge_set.add((min(a, b), max(a, b)))
        return cls(vertices, sorted(edge_set), name=name)

    def bounding_size(self) -> np.ndarray:
        if len(self.vertices) == 0:
            return np.zeros(3, dtype=np.float32)
        return self.vertices.max(axis=0) - self.vertices.min(axis=0)

    def clone(self) -> Mesh:
        return Mesh("model", self.vertices.copy(), self.edges.copy(), self.color)

    def clone_normalized(self, target_size: float = 2.0) -> Mesh:
        """
        Clone scaled uniformly so the largest bounding-box dimension equals
        target_size (aspect ratio preserved)
        """
        max_dimension = float(self.bounding_size().max(initial=0.0))
        if max_dimension <= 0.0 or not np.isfinite(max_dimension):
            raise ModelLoadError(f"Model '{self.name}' has a degenerate bounding box")

        mesh = self.clone()
        mesh.vertices *= target_size / max_dimension
        return mesh


def parse_obj(text: str, name: str = "model") -> ModelTemplate:
    """Parse OBJ vertex positions and faces"""
    vertices = []
    faces = []

    for line_no, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith('#'):
            continue

        parts = line.split()
        try:
            if parts[0] == 'v':
                vertices.append([float(parts[1]), float(parts[2]), float(parts[3])])

            elif parts[0] == 'f':
                # Face entries can be "v", "v/vt", "v/vt/vn", "v//vn"
                face = []
                for token in parts[1:]:
                    index = int(token.split('/')[0])
                    # OBJ is 1-indexed, negative indices count back from the end
                    face.append(index - 1 if index > 0 else len(vertices) + index)
                faces.append(face)
        except (IndexError, ValueError) as e:
            raise ModelLoadError(f"Malformed OBJ line {line_no}: {line!r}") from e

    if not vertices:
        raise ModelLoadError("OBJ file contains no vertices")

    for face in faces:
        if any(i < 0 or i >= len(vertices) for i in face):
            raise ModelLoadError("OBJ face references a missing vertex")

    return ModelTemplate.from_faces(vertices, faces, name=name)


def load_model(path: str) -> ModelTemplate:
    """Load a template from disk, dispatching on file extension"""
    file_path = Path(path)
    extension = file_path.suffix.lower()

    if extension not in SUPPORTED_EXTENSIONS:
        raise ModelLoadError("Unsupported file format")

    if extension in GLTF_EXTENSIONS:
        return load_gltf(file_path)

    try:
        text = file_path.read_bytes().decode("utf-8", errors="replace")
    except OSError as e:
        raise ModelLoadError(f"Cannot read {file_path.name}: {e}") from e

    return parse_obj(text, name=file_path.name)


def load_gltf(file_path: Path) -> ModelTemplate:
    """glTF / GLB scene flattened into a single mesh"""
    if not file_path.is_file():
        raise ModelLoadError(f"Cannot read {file_path.name}: no such file")

    try:
        mesh = trimesh.load(str(file_path), force="mesh")
    except Exception as e:
        raise ModelLoadError(f"Cannot parse {file_path.name}: {e}") from e

    if mesh is None or len(getattr(mesh, "vertices", ())) == 0:
        raise ModelLoadError(f"{file_path.name} contains no mesh geometry")

    return ModelTemplate.from_faces(
        np.asarray(mesh.vertices), np.asarray(mesh.faces).tolist(), name=file_path.name
    )
