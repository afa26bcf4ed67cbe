"""Overlay objects: scene, templates, synchronization and animation"""

from .animation import AnimationConfig, AnimationController
from .model_loader import ModelLoadError, ModelTemplate, load_model, parse_obj
from .scene import SHAPE_NAMES, Mesh, OverlayObject, Scene, create_primitive
from .synchronizer import OverlayConfig, OverlayMode, OverlaySynchronizer

__all__ = [
    "AnimationConfig",
    "AnimationController",
    "Mesh",
    "ModelLoadError",
    "ModelTemplate",
    "OverlayConfig",
    "OverlayMode",
    "OverlayObject",
    "OverlaySynchronizer",
    "SHAPE_NAMES",
    "Scene",
    "create_primitive",
    "load_model",
    "parse_obj",
]
