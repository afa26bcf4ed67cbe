"""
Render-tick animation: spin and a shared pulse
"""

import math
import time
from dataclasses import dataclass, fields
from typing import Callable, Iterable, Optional

from .scene import OverlayObject


def wall_clock_ms() -> float:
    return time.time() * 1000.0


@dataclass(frozen=True)
class AnimationConfig:
    pulse_amplitude: float = 0.1
    pulse_rate: float = 0.005
    secondary_axis_ratio: float = 0.7

    @classmethod
    def from_dict(cls, values: dict) -> "AnimationConfig":
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in (values or {}).items() if k in names})


class AnimationController:
    """Stateless apart from the clock; never creates or destroys objects"""

    def __init__(self, config: AnimationConfig = None, clock: Callable[[], float] = wall_clock_ms):
        self.config = config or AnimationConfig()
        self.clock = clock

    def pulse_factor(self, now_ms: float) -> float:
        return 1.0 + self.config.pulse_amplitude * math.sin(now_ms * self.config.pulse_rate)

    def tick(self, objects: Iterable[OverlayObject], now_ms: Optional[float] = None) -> float:
        """Advance every live object by one render tick; returns the pulse used"""
        if now_ms is None:
            now_ms = self.clock()
        pulse = self.pulse_factor(now_ms)

        for obj in objects:
            if obj.disposed or not obj.rotation_speed:
                continue
            obj.rotation[0] += obj.rotation_speed
            obj.rotation[1] += obj.rotation_speed * self.config.secondary_axis_ratio
            obj.scale = obj.base_scale * pulse

        return pulse
