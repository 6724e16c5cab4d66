"""
Analysis modules for transit route resolution
"""

from .geometry import GeometryAssembler

__all__ = [
    "GeometryAssembler",
]
