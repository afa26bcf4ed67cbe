"""
Configuration management
"""

import copy
import json
from pathlib import Path
from typing import Any, Dict


class Config:
    """Application configuration manager"""

    DEFAULT_CONFIG = {
        "camera": {
            "device_id": 0,
            "width": 1280,
            "height": 720,
            "fps": 30,
            "video_path": None,
        },
        "detection": {
            "edge_threshold": 50.0,
            "iterations": 20,
            "min_size_ratio": 0.1,
            "max_size_ratio": 0.8,
            "sample_step": 5,
            "score_threshold": 0.3,
            "max_markers": 3,
            "seed": None,
        },
        "overlay": {
            "world_scale": 10.0,
            "depth": -5.0,
            "scale_gain": 5.0,
            "model_target_size": 2.0,
            "rotation_speed_base": 0.02,
            "rotation_speed_step": 0.01,
        },
        "animation": {
            "pulse_amplitude": 0.1,
            "pulse_rate": 0.005,
            "secondary_axis_ratio": 0.7,
        },
        "display": {
            "fov": 75.0,
            "near": 0.1,
            "render_interval_ms": 16,
            "detection_interval_ms": 16,
            "show_markers": True,
        },
    }

    def __init__(self, config_path: str = None):
        self.config_path = Path(config_path) if config_path else Path.home() / ".aro" / "config.json"
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)
        self.load()

    def load(self):
        """Load configuration from file, merging each section over the defaults"""
        if self.config_path.exists():
            with open(self.config_path, "r") as f:
                loaded = json.load(f)
            for section, values in loaded.items():
                if isinstance(values, dict) and isinstance(self.config.get(section), dict):
                    self.config[section].update(values)
                else:
                    self.config[section] = values

    def save(self):
        """Save configuration to file"""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "w") as f:
            json.dump(self.config, f, indent=2)

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """Get configuration value"""
        return self.config.get(section, {}).get(key, default)

    def set(self, section: str, key: str, value: Any):
        """Set configuration value"""
        if section not in self.config:
            self.config[section] = {}
        self.config[section][key] = value

    def get_section(self, section: str) -> Dict:
        """Get a copy of one configuration section"""
        return dict(self.config.get(section, {}))

    def get_all(self) -> Dict:
        """Get all configuration"""
        return copy.deepcopy(self.config)
