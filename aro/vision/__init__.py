"""Video capture"""

from .frame import Frame
from .camera import AsyncCamera, VideoFileSource

__all__ = ["Frame", "AsyncCamera", "VideoFileSource"]
