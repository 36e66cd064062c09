"""
列布局引擎 - 将视图自上而下排成一列

视图的真实外框（字体、标签由宿主决定）只有创建后才能得到，
因此每个视图走两阶段放置：
    TENTATIVE: 在临时位置 (0, current_y) 创建
    MEASURED:  读取真实外框
    FINAL:     平移使左边缘对齐 alignment_x、上边缘对齐 current_y
随后 current_y 下移 (视图高度 + 间距)，相邻视图间距恒为 spacing。

测试要点：
- test_column_no_overlap: 相邻视图不重叠且间距一致
- test_skip_refused: 宿主拒绝的视图跳过且不影响 current_y
- test_left_edge_alignment: 左边缘对齐
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from ..geometry import combine_outlines
from ..interfaces import GeometryError, HostError, IHostDocument, PlacementStateError
from ..models import (
    BatchResult,
    Item,
    Outline,
    PlacedItem,
    PlacementState,
    PlacementStatus,
    Point,
    Sheet,
)

logger = logging.getLogger(__name__)


class TwoPhasePlacement:
    """两阶段放置状态机：TENTATIVE → MEASURED → FINAL"""

    def __init__(self, host: IHostDocument, item: Item, sheet: Sheet) -> None:
        self.host = host
        self.item = item
        self.sheet = sheet
        self.state: PlacementState | None = None
        self.tentative: Point | None = None
        self.placed: PlacedItem | None = None
        self.outline: Outline | None = None

    def create(self, tentative: Point) -> PlacedItem:
        """在临时位置创建（宿主拒绝时状态置为REFUSED并抛出）"""
        self._expect(None)
        try:
            self.placed = self.host.create_placement(self.item, self.sheet, tentative)
        except HostError:
            self.state = PlacementState.REFUSED
            raise
        self.tentative = tentative
        self.state = PlacementState.TENTATIVE
        return self.placed

    def measure(self) -> Outline:
        """读取真实外框"""
        self._expect(PlacementState.TENTATIVE)
        self.outline = self.host.measure(self.placed)
        self.state = PlacementState.MEASURED
        return self.outline

    def finalize(self, left_x: float, top_y: float) -> PlacedItem:
        """平移使外框左边缘位于left_x、上边缘位于top_y"""
        self._expect(PlacementState.MEASURED)
        offset_x = left_x - self.outline.minimum.x
        offset_y = top_y - self.outline.maximum.y
        center = Point(x=self.tentative.x + offset_x, y=self.tentative.y + offset_y)
        self.placed = self.host.recenter(self.placed, center)
        self.outline = self.outline.translated(offset_x, offset_y)
        self.state = PlacementState.FINAL
        return self.placed

    def _expect(self, state: PlacementState | None) -> None:
        if self.state != state:
            raise PlacementStateError(
                f"放置状态错误: 期望 {state}, 实际 {self.state} ({self.item.item_id})"
            )


class ColumnLayoutEngine:
    """列布局引擎"""

    def __init__(self, host: IHostDocument) -> None:
        self.host = host

    def place_column(
        self,
        items: Sequence[Item] | None,
        start_point: Point,
        spacing: float,
        sheet: Sheet,
    ) -> BatchResult:
        """
        在sheet上自start_point起向下排列视图

        Args:
            items: 待放置视图（按顺序）
            start_point: x为左对齐列，y为首行上边缘
            spacing: 相邻视图的竖向间距（图纸单位）
            sheet: 目标图纸

        Returns:
            逐项结果；result.placed 为成功放置的视图（保持输入顺序）
        """
        if spacing < 0:
            raise GeometryError(f"间距不能为负: {spacing}")

        result = BatchResult()
        alignment_x = start_point.x
        current_y = start_point.y

        for item in items or []:
            if not self.host.can_place(item, sheet):
                logger.warning(f"视图无法放置到图纸 {sheet.sheet_id}: {item.item_id}")
                result.record(item, PlacementStatus.SKIPPED, message="宿主拒绝承载")
                continue

            placement = TwoPhasePlacement(self.host, item, sheet)
            try:
                placement.create(Point(x=0.0, y=current_y))
            except HostError as e:
                logger.warning(f"视图创建失败: {item.item_id}: {e}")
                result.record(item, PlacementStatus.FAILED, message=f"创建失败: {e}")
                continue

            try:
                outline = placement.measure()
                placed = placement.finalize(alignment_x, current_y)
            except HostError as e:
                # 已创建的放置保留，由调用方回滚
                logger.warning(f"视图定位失败: {item.item_id}: {e}")
                result.record(item, PlacementStatus.FAILED, placement.placed, f"定位失败: {e}")
                result.add_flag("存在已创建但未定位的视图")
                continue

            placed = placed.model_copy(update={"outline": placement.outline})
            result.record(item, PlacementStatus.PLACED, placed)
            current_y -= outline.height + spacing

        return result


def column_start_point(
    existing: Iterable[Outline | None], margin: float
) -> Point | None:
    """
    新列起点：已有内容并集的右边缘 + margin，首行上边缘取并集顶边

    Returns:
        图纸为空时返回None
    """
    combined = combine_outlines(existing)
    if combined is None:
        return None
    return Point(x=combined.maximum.x + margin, y=combined.maximum.y)


def place_column(
    host: IHostDocument,
    items: Sequence[Item] | None,
    start_point: Point,
    spacing: float,
    sheet: Sheet,
) -> list[PlacedItem]:
    """列布局（仅返回成功放置的视图）"""
    return ColumnLayoutEngine(host).place_column(items, start_point, spacing, sheet).placed
