"""
几何内核 - 外框构建、相交/包含判定、旋转变换

全部为纯函数，浮点比较严格使用 ≤/≥，
需要模糊匹配的调用方显式传入 tolerance。
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from ..interfaces import GeometryError
from ..models import Outline, Point


def outline_from_corners(points: Iterable[Point]) -> Outline:
    """
    覆盖全部点的最小外框（投影到z=0）

    Raises:
        GeometryError: 点集为空
    """
    pts = list(points)
    if not pts:
        raise GeometryError("无法由空点集构建外框")

    xs = [p.x for p in pts]
    ys = [p.y for p in pts]
    return Outline(
        minimum=Point(x=min(xs), y=min(ys)),
        maximum=Point(x=max(xs), y=max(ys)),
    )


def intersects(a: Outline, b: Outline, tolerance: float = 0.0) -> bool:
    """两外框在X、Y方向投影均重叠（含接触）即相交"""
    if tolerance < 0:
        raise GeometryError(f"容差不能为负: {tolerance}")
    return (
        a.minimum.x <= b.maximum.x + tolerance
        and b.minimum.x <= a.maximum.x + tolerance
        and a.minimum.y <= b.maximum.y + tolerance
        and b.minimum.y <= a.maximum.y + tolerance
    )


def center_inside(inner: Outline, outer: Outline) -> bool:
    """inner的中心是否落在outer闭区间内"""
    center = inner.center
    return (
        outer.minimum.x <= center.x <= outer.maximum.x
        and outer.minimum.y <= center.y <= outer.maximum.y
    )


def rotate_around_point(p: Point, pivot: Point, angle: float) -> Point:
    """绕pivot旋转angle弧度（z不变）"""
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    dx = p.x - pivot.x
    dy = p.y - pivot.y
    return Point(
        x=pivot.x + dx * cos_a - dy * sin_a,
        y=pivot.y + dx * sin_a + dy * cos_a,
        z=p.z,
    )


def combine_outlines(outlines: Iterable[Outline | None]) -> Outline | None:
    """外框并集，忽略None；全部为空返回None"""
    valid = [o for o in outlines if o is not None]
    if not valid:
        return None
    return Outline(
        minimum=Point(x=min(o.minimum.x for o in valid), y=min(o.minimum.y for o in valid)),
        maximum=Point(x=max(o.maximum.x for o in valid), y=max(o.maximum.y for o in valid)),
    )
