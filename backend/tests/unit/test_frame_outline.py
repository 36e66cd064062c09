"""
图框外框解析单元测试

每个模块完成后必须运行：pytest tests/unit/test_frame_outline.py -v
"""

import math

import pytest

from sheetlayout.geometry import (
    FrameOutlineResolver,
    frame_corners,
    resolve_frame_outline,
    rotate_around_point,
)
from sheetlayout.models import Frame, Outline, Point


class TestResolveFrameOutline:
    """图框外框"""

    def test_unrotated_exact(self, sample_frame: Frame):
        """测试无旋转时精确计算"""
        outline = resolve_frame_outline(sample_frame)
        assert outline == Outline.from_bounds(0, 0, 10, 7)

    def test_tiny_rotation_uses_fast_path(self):
        """测试低于阈值的旋转按无旋转处理"""
        frame = Frame(frame_id="F", anchor=Point(x=0.3, y=0.1), width=0.7, height=0.2, rotation=1e-9)
        outline = resolve_frame_outline(frame)
        assert outline.minimum.x == 0.3 - 0.7
        assert outline.maximum.y == 0.1 + 0.2

    def test_quarter_turn(self):
        """测试旋转90度"""
        frame = Frame(frame_id="F", anchor=Point(x=0, y=0), width=10, height=5, rotation=math.pi / 2)
        outline = resolve_frame_outline(frame)
        assert outline.minimum.x == pytest.approx(-5)
        assert outline.minimum.y == pytest.approx(-10)
        assert outline.maximum.x == pytest.approx(0, abs=1e-9)
        assert outline.maximum.y == pytest.approx(0, abs=1e-9)

    def test_no_anchor(self):
        """测试无插入点"""
        frame = Frame(frame_id="F", anchor=None, width=10, height=5)
        assert resolve_frame_outline(frame) is None
        assert frame_corners(frame) == []

    def test_anchor_z_ignored(self):
        """测试插入点z不影响外框"""
        frame = Frame(frame_id="F", anchor=Point(x=10, y=0, z=3), width=10, height=7)
        outline = resolve_frame_outline(frame)
        assert outline.minimum.z == 0
        assert outline == Outline.from_bounds(0, 0, 10, 7)


class TestFrameCorners:
    """图框四角"""

    def test_corner_order(self, sample_frame: Frame):
        """测试四角顺序：右下、左下、左上、右上"""
        corners = frame_corners(sample_frame)
        assert [(c.x, c.y) for c in corners] == [(10, 0), (0, 0), (0, 7), (10, 7)]

    @pytest.mark.parametrize("rotation", [math.pi / 6, math.pi / 2, -2.0, math.pi])
    def test_rotate_back_restores_corners(self, rotation: float):
        """测试绕插入点反向旋转后还原四角"""
        anchor = Point(x=12.5, y=-3)
        frame = Frame(frame_id="F", anchor=anchor, width=8, height=5, rotation=rotation)
        expected = [(12.5, -3), (4.5, -3), (4.5, 2), (12.5, 2)]

        restored = [rotate_around_point(c, anchor, -rotation) for c in frame_corners(frame)]
        for corner, (x, y) in zip(restored, expected):
            assert corner.x == pytest.approx(x, abs=1e-9)
            assert corner.y == pytest.approx(y, abs=1e-9)


class TestResolver:
    """解析器缓存"""

    def test_cache_by_frame_id(self, sample_frame: Frame):
        resolver = FrameOutlineResolver()
        first = resolver.resolve(sample_frame)
        moved = sample_frame.model_copy(update={"anchor": Point(x=50, y=50)})
        assert resolver.resolve(moved) is first

        resolver.clear()
        assert resolver.resolve(moved).maximum == Point(x=50, y=57)
