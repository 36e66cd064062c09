"""
列布局引擎单元测试

每个模块完成后必须运行：pytest tests/unit/test_column.py -v
"""

import pytest

from sheetlayout.interfaces import GeometryError, HostError, PlacementStateError
from sheetlayout.layout import ColumnLayoutEngine, TwoPhasePlacement, column_start_point, place_column
from sheetlayout.models import Outline, PlacementState, PlacementStatus, Point


@pytest.fixture
def column_setup(memory_host):
    """空图纸 + 三个高度分别为 1.0/2.0/1.5 的视图"""
    sheet = memory_host.add_sheet("Column", "C-1")
    items = [
        memory_host.add_view("A", 3.0, 1.0),
        memory_host.add_view("B", 1.0, 2.0),
        memory_host.add_view("C", 2.0, 1.5),
    ]
    return memory_host, sheet, items


class TestPlaceColumn:
    """列布局"""

    def test_expected_centers(self, column_setup):
        """测试三视图的中心位置"""
        host, sheet, items = column_setup
        result = ColumnLayoutEngine(host).place_column(items, Point(x=5, y=10), 0.2, sheet)

        placed = result.placed
        assert len(placed) == 3
        assert [p.center.y for p in placed] == pytest.approx([9.5, 7.8, 5.85])
        assert [p.center.x for p in placed] == pytest.approx([6.5, 5.5, 6.0])

    def test_left_edge_alignment(self, column_setup):
        """测试左边缘对齐"""
        host, sheet, items = column_setup
        placed = place_column(host, items, Point(x=5, y=10), 0.2, sheet)
        for p in placed:
            assert p.outline.minimum.x == pytest.approx(5)
            assert host.measure(p).center.y == pytest.approx(p.center.y)

    def test_no_overlap(self, column_setup):
        """测试相邻视图不重叠且间距一致"""
        host, sheet, items = column_setup
        spacing = 0.2
        placed = place_column(host, items, Point(x=5, y=10), spacing, sheet)
        assert placed[0].outline.maximum.y == pytest.approx(10)
        for upper, lower in zip(placed, placed[1:]):
            bottom = upper.center.y - upper.height / 2
            top = lower.center.y + lower.height / 2
            assert bottom - top == pytest.approx(spacing)

    def test_skip_refused(self, column_setup):
        """测试宿主拒绝承载的视图跳过且不占位"""
        host, sheet, items = column_setup
        host.incompatible.add((items[1].item_id, sheet.sheet_id))
        result = ColumnLayoutEngine(host).place_column(items, Point(x=5, y=10), 0.2, sheet)

        assert [o.status for o in result.outcomes] == [
            PlacementStatus.PLACED,
            PlacementStatus.SKIPPED,
            PlacementStatus.PLACED,
        ]
        # C 紧接 A 之下
        assert result.placed[1].outline.maximum.y == pytest.approx(8.8)

    def test_create_failure_does_not_advance(self, column_setup):
        """测试创建失败不移动当前行"""
        host, sheet, items = column_setup
        host.refuse_create.add(items[0].item_id)
        result = ColumnLayoutEngine(host).place_column(items, Point(x=5, y=10), 0.2, sheet)

        assert result.outcomes[0].status == PlacementStatus.FAILED
        assert result.outcomes[0].placed is None
        assert result.placed[0].outline.maximum.y == pytest.approx(10)

    def test_recenter_failure_flagged(self, column_setup):
        """测试定位失败保留放置并标记"""
        host, sheet, items = column_setup
        host.refuse_recenter.add(items[1].item_id)
        result = ColumnLayoutEngine(host).place_column(items, Point(x=5, y=10), 0.2, sheet)

        failed = result.failed
        assert len(failed) == 1
        assert failed[0].placed is not None
        assert result.flags
        assert len(result.placed) == 2

    def test_empty_items(self, column_setup):
        """测试空输入"""
        host, sheet, _ = column_setup
        assert len(ColumnLayoutEngine(host).place_column([], Point(x=0, y=0), 0.2, sheet)) == 0
        assert place_column(host, None, Point(x=0, y=0), 0.2, sheet) == []

    def test_negative_spacing(self, column_setup):
        """测试负间距"""
        host, sheet, items = column_setup
        with pytest.raises(GeometryError):
            place_column(host, items, Point(x=0, y=0), -0.1, sheet)


class TestTwoPhasePlacement:
    """两阶段放置状态机"""

    def test_full_cycle(self, column_setup):
        """测试完整状态流转"""
        host, sheet, items = column_setup
        placement = TwoPhasePlacement(host, items[0], sheet)
        placement.create(Point(x=0, y=0))
        assert placement.state == PlacementState.TENTATIVE
        placement.measure()
        assert placement.state == PlacementState.MEASURED
        placed = placement.finalize(1.0, 2.0)
        assert placement.state == PlacementState.FINAL
        assert placed.outline.minimum.x == pytest.approx(1.0)
        assert placed.outline.maximum.y == pytest.approx(2.0)

    def test_measure_before_create(self, column_setup):
        """测试未创建即测量"""
        host, sheet, items = column_setup
        with pytest.raises(PlacementStateError):
            TwoPhasePlacement(host, items[0], sheet).measure()

    def test_finalize_before_measure(self, column_setup):
        """测试未测量即定位"""
        host, sheet, items = column_setup
        placement = TwoPhasePlacement(host, items[0], sheet)
        placement.create(Point(x=0, y=0))
        with pytest.raises(PlacementStateError):
            placement.finalize(0, 0)

    def test_refused(self, column_setup):
        """测试宿主拒绝创建"""
        host, sheet, items = column_setup
        host.refuse_create.add(items[0].item_id)
        placement = TwoPhasePlacement(host, items[0], sheet)
        with pytest.raises(HostError):
            placement.create(Point(x=0, y=0))
        assert placement.state == PlacementState.REFUSED


class TestColumnStartPoint:
    """新列起点"""

    def test_right_of_existing(self):
        start = column_start_point(
            [Outline.from_bounds(0, 0, 10, 7), Outline.from_bounds(11, 1, 12, 8)], 0.5
        )
        assert start == Point(x=12.5, y=8)

    def test_empty(self):
        assert column_start_point([], 0.5) is None
        assert column_start_point([None], 0.5) is None
