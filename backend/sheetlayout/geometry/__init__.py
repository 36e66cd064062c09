"""
几何模块 - 几何内核与图框外框解析

子模块：
- kernel: 外框构建/相交/中心包含/旋转
- frame_outline: 图框外框（含旋转）
"""

from .frame_outline import FrameOutlineResolver, frame_corners, resolve_frame_outline
from .kernel import (
    center_inside,
    combine_outlines,
    intersects,
    outline_from_corners,
    rotate_around_point,
)

__all__ = [
    "outline_from_corners",
    "intersects",
    "center_inside",
    "rotate_around_point",
    "combine_outlines",
    "resolve_frame_outline",
    "frame_corners",
    "FrameOutlineResolver",
]
