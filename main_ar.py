#!/usr/bin/env python3
"""
ARO - AR Marker Overlay System
GUI entry point
"""

import argparse
import sys

from PyQt6.QtWidgets import QApplication
from aro.core.controller import ARController
from aro.gui.main_window import ARMainWindow
from aro.utils.config import Config


def main():
    """Main application entry point"""
    parser = argparse.ArgumentParser(description="Overlay 3D objects on marker-like rectangles")
    parser.add_argument("--config", help="Path to config.json (default ~/.aro/config.json)")
    parser.add_argument("--video", help="Play a video file instead of the webcam")
    parser.add_argument("--model", help="OBJ model to use instead of the default shapes")
    parser.add_argument("--seed", type=int, help="Fix the candidate sampling seed")
    args = parser.parse_args()

    # Load configuration
    config = Config(args.config)
    if args.video:
        config.set("camera", "video_path", args.video)
    if args.seed is not None:
        config.set("detection", "seed", args.seed)

    # Create Qt application
    app = QApplication(sys.argv)
    app.setApplicationName("ARO")

    controller = ARController(config=config.get_all())

    display = config.get_section("display")
    window = ARMainWindow(
        controller,
        render_interval_ms=display.get("render_interval_ms", 16),
        detection_interval_ms=display.get("detection_interval_ms", 16),
    )
    window.show()

    if args.model:
        controller.load_custom_model(args.model)

    # Run
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
