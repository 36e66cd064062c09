"""
图框外框解析 - 由插入点/宽高/旋转角计算图框的轴对齐外框

局部坐标系中插入点为右下角，四角依次为：
    (0, 0) 右下, (-W, 0) 左下, (-W, H) 左上, (0, H) 右上

旋转时返回的是旋转后矩形的AABB（保守外框），
下游相交/包含判定都基于该AABB。
"""

from __future__ import annotations

from ..models import Frame, Outline, Point
from .kernel import outline_from_corners, rotate_around_point

DEFAULT_ROTATION_EPSILON = 1e-6


def frame_corners(frame: Frame) -> list[Point]:
    """图框四角的世界坐标（右下、左下、左上、右上）"""
    if frame.anchor is None:
        return []

    anchor = frame.anchor.flatten()
    local_corners = [
        Point(x=0.0, y=0.0),
        Point(x=-frame.width, y=0.0),
        Point(x=-frame.width, y=frame.height),
        Point(x=0.0, y=frame.height),
    ]
    return [
        rotate_around_point(corner + anchor, anchor, frame.rotation)
        for corner in local_corners
    ]


def resolve_frame_outline(
    frame: Frame, rotation_epsilon: float = DEFAULT_ROTATION_EPSILON
) -> Outline | None:
    """
    计算图框外框

    Args:
        frame: 图框
        rotation_epsilon: 视为未旋转的角度阈值（弧度）

    Returns:
        轴对齐外框；插入点无法解析时返回None
    """
    if frame.anchor is None:
        return None

    if abs(frame.rotation) < rotation_epsilon:
        # 无旋转：直接计算，避免三角函数误差
        origin = frame.anchor
        return Outline(
            minimum=Point(x=origin.x - frame.width, y=origin.y),
            maximum=Point(x=origin.x, y=origin.y + frame.height),
        )

    return outline_from_corners(frame_corners(frame))


class FrameOutlineResolver:
    """图框外框解析器（单次调用内按frame_id缓存）"""

    def __init__(self, rotation_epsilon: float = DEFAULT_ROTATION_EPSILON) -> None:
        self.rotation_epsilon = rotation_epsilon
        self._cache: dict[str, Outline | None] = {}

    def resolve(self, frame: Frame) -> Outline | None:
        if frame.frame_id not in self._cache:
            self._cache[frame.frame_id] = resolve_frame_outline(frame, self.rotation_epsilon)
        return self._cache[frame.frame_id]

    def clear(self) -> None:
        self._cache.clear()
