"""
LightSync

Album-art accent colors for cloud-controlled smart lights.
"""

__version__ = "1.0.0"
