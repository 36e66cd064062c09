"""
数据模型单元测试

每个模块完成后必须运行：pytest tests/unit/test_models.py -v
"""

import pytest
from pydantic import ValidationError

from sheetlayout.models import (
    BatchResult,
    Frame,
    Item,
    Outline,
    PlacedItem,
    PlacementStatus,
    Point,
)


class TestPoint:
    """坐标点测试"""

    def test_arithmetic(self):
        """测试加减乘除"""
        a = Point(x=1, y=2, z=3)
        b = Point(x=0.5, y=0.5)
        assert a + b == Point(x=1.5, y=2.5, z=3)
        assert a - b == Point(x=0.5, y=1.5, z=3)
        assert 2 * b == Point(x=1, y=1)
        assert a / 2 == Point(x=0.5, y=1, z=1.5)

    def test_from_tuple(self):
        """测试元组构建"""
        assert Point.from_tuple((1, 2)) == Point(x=1, y=2, z=0)
        assert Point.from_tuple([1, 2, 3]).z == 3
        with pytest.raises(ValueError):
            Point.from_tuple((1,))

    def test_flatten(self):
        """测试投影到z=0"""
        assert Point(x=1, y=2, z=5).flatten() == Point(x=1, y=2)


class TestOutline:
    """外框测试"""

    def test_width_height_center(self, sample_outline: Outline):
        """测试宽高与中心"""
        assert sample_outline.width == 10
        assert sample_outline.height == 7
        assert sample_outline.center == Point(x=5, y=3.5)

    def test_projected_to_plane(self):
        """测试角点投影到z=0"""
        outline = Outline(minimum=Point(x=0, y=0, z=4), maximum=Point(x=1, y=1, z=9))
        assert outline.minimum.z == 0
        assert outline.maximum.z == 0

    def test_reject_inverted_corners(self):
        """测试角点顺序校验"""
        with pytest.raises(ValidationError):
            Outline.from_bounds(5, 0, 0, 5)

    def test_translated(self, sample_outline: Outline):
        """测试平移"""
        moved = sample_outline.translated(1, -2)
        assert moved.minimum == Point(x=1, y=-2)
        assert moved.maximum == Point(x=11, y=5)


class TestFrame:
    """图框测试"""

    def test_equality_by_id(self, sample_frame: Frame):
        """测试按实例ID判等（可作字典键）"""
        same = sample_frame.model_copy(update={"width": 99})
        assert same == sample_frame
        assert {sample_frame: 1}[same] == 1

    def test_reject_negative_size(self):
        """测试尺寸不能为负"""
        with pytest.raises(ValidationError):
            Frame(frame_id="F", anchor=None, width=-1, height=1)


class TestItem:
    """视图测试"""

    def test_label_offset(self, sample_item: Item):
        """测试标签偏移"""
        offset = sample_item.label_offset
        assert offset.x == pytest.approx(-0.5)
        assert offset.y == pytest.approx(-0.7)

    def test_unplaced(self):
        """测试未放置视图"""
        item = Item(item_id="V", name="V")
        assert not item.is_placed
        assert item.label_offset is None


class TestBatchResult:
    """批处理结果测试"""

    def test_partition(self, sample_item: Item):
        """测试按状态划分"""
        placed = PlacedItem(
            item=sample_item,
            placement_id="vp-1",
            sheet_id="S1",
            center=Point(x=5, y=3),
            outline=sample_item.outline,
        )
        result = BatchResult()
        result.record(sample_item, PlacementStatus.PLACED, placed)
        result.record(sample_item, PlacementStatus.SKIPPED, message="宿主拒绝承载")
        result.record(sample_item, PlacementStatus.FAILED, message="创建失败")

        assert len(result) == 3
        assert result.placed == [placed]
        assert len(result.skipped) == 1
        assert len(result.failed) == 1
        assert not result.succeeded
        assert placed.height == 1

    def test_flags_deduplicated(self):
        """测试告警标记去重"""
        result = BatchResult()
        result.add_flag("x")
        result.add_flag("x")
        assert result.flags == ["x"]
        assert result.succeeded
