"""
ARO - AR Marker Overlay System
"""

__version__ = "0.1.0"
