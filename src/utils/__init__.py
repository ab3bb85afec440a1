"""
Utility modules for the PVCGL Engine.
"""

from utils.xray import XRayLogger

__all__ = [
    'XRayLogger',
]
