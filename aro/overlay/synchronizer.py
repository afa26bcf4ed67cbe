"""
Binds this frame's markers to overlay objects

Markers carry no identity across frames, so every cycle fully replaces the
previous object set: old objects are removed and disposed first, then one new
object is built per marker in marker order.
"""

import colorsys
from dataclasses import dataclass, fields
from typing import List, Optional, Sequence

import numpy as np

from ..detection.candidates import Marker
from .model_loader import ModelLoadError, ModelTemplate
from .scene import Mesh, OverlayObject, Scene, create_primitive


@dataclass(frozen=True)
class OverlayConfig:
    world_scale: float = 10.0
    depth: float = -5.0
    scale_gain: float = 5.0
    model_target_size: float = 2.0
    rotation_speed_base: float = 0.02
    rotation_speed_step: float = 0.01

    @classmethod
    def from_dict(cls, values: dict) -> "OverlayConfig":
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in (values or {}).items() if k in names})


@dataclass(frozen=True)
class OverlayMode:
    """Per-cycle object construction mode"""

    shape: str = "cube"
    template: Optional[ModelTemplate] = None


class OverlaySynchronizer:

    def __init__(self, scene: Scene, config: OverlayConfig = None,
                 rng: Optional[np.random.Generator] = None):
        self.scene = scene
        self.config = config or OverlayConfig()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.objects: List[OverlayObject] = []

    def clear(self):
        """Remove and dispose every live object"""
        for obj in self.objects:
            self.scene.remove(obj)
            obj.dispose()
        self.objects = []

    def sync(self, markers: Sequence[Marker], mode: OverlayMode = None) -> List[OverlayObject]:
        mode = mode or OverlayMode()
        self.clear()

        for index, marker in enumerate(markers):
            obj = self._create_object(marker, index, mode)
            self.scene.add(obj)
            self.objects.append(obj)

        return self.objects

    def _create_object(self, marker: Marker, index: int, mode: OverlayMode) -> OverlayObject:
        cfg = self.config

        position = np.array([
            (marker.x - 0.5) * cfg.world_scale,
            -(marker.y - 0.5) * cfg.world_scale,
            cfg.depth,
        ])
        scale = np.array([marker.width * cfg.scale_gain, marker.height * cfg.scale_gain, 1.0])

        return OverlayObject(
            mesh=self._create_mesh(mode),
            position=position,
            scale=scale,
            rotation=np.zeros(3),
            rotation_speed=cfg.rotation_speed_base + index * cfg.rotation_speed_step,
            base_scale=scale.copy(),
        )

    def _create_mesh(self, mode: OverlayMode) -> Mesh:
        if mode.template is not None:
            try:
                return mode.template.clone_normalized(self.config.model_target_size)
            except ModelLoadError as e:
                print(f"⚠ {e}, using {mode.shape}")

        return create_primitive(mode.shape, self._random_color())

    def _random_color(self):
        """Random hue, saturation 0.7, lightness 0.6 (as BGR 0-255)"""
        r, g, b = colorsys.hls_to_rgb(self.rng.random(), 0.6, 0.7)
        return (int(b * 255), int(g * 255), int(r * 255))
