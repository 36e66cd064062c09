"""
迁移引擎 - 将一个图框分组内的视图迁移到另一图纸的图框

保持视图相对图框插入点的位置：
    relative   = 视图外框右上角 - 源图框插入点
    new_center = relative - (W/2, H/2) + 目标图框插入点
若视图带标签，先记录 标签中心 - 视图中心，重建后按该偏移恢复。

逐项处理，单项失败不影响其余视图；失败项如实记录供调用方决定是否回滚。
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..interfaces import HostError, IHostDocument
from ..models import (
    BatchResult,
    Frame,
    Item,
    Outline,
    PlacementStatus,
    Point,
    Sheet,
)

logger = logging.getLogger(__name__)


def compute_relocated_center(
    outline: Outline,
    source_anchor: Point,
    target_anchor: Point | None = None,
) -> Point:
    """按右上角相对源插入点的偏移计算新中心"""
    relative = outline.maximum - source_anchor.flatten()
    half = Point(x=outline.width / 2, y=outline.height / 2)
    new_center = relative - half
    if target_anchor is not None:
        new_center = new_center + target_anchor.flatten()
    return new_center


class RelocationEngine:
    """视图迁移引擎"""

    def __init__(self, host: IHostDocument) -> None:
        self.host = host

    def relocate_group(
        self,
        source_frame: Frame,
        items: Sequence[Item] | None,
        target_frame: Frame | None,
        target_sheet: Sheet,
    ) -> BatchResult:
        """
        迁移分组内全部视图

        Args:
            source_frame: 源图框（提供插入点）
            items: 分组内视图（按顺序）
            target_frame: 目标图框；None或无插入点时按原点计算
            target_sheet: 目标图纸

        Returns:
            逐项结果（保持输入顺序）
        """
        result = BatchResult()
        if not items:
            return result

        if source_frame.anchor is None:
            for item in items:
                result.record(item, PlacementStatus.FAILED, message="源图框无插入点")
            result.add_flag("源图框无插入点，未迁移任何视图")
            return result

        target_anchor = target_frame.anchor if target_frame is not None else None
        for item in items:
            self._relocate_item(item, source_frame.anchor, target_anchor, target_sheet, result)

        return result

    def _relocate_item(
        self,
        item: Item,
        source_anchor: Point,
        target_anchor: Point | None,
        target_sheet: Sheet,
        result: BatchResult,
    ) -> None:
        """迁移单个视图：计算位置 → 删除旧放置 → 目标图纸重建 → 恢复标签偏移"""
        if item.outline is None:
            result.record(item, PlacementStatus.FAILED, message="视图无外框")
            return

        new_center = compute_relocated_center(item.outline, source_anchor, target_anchor)
        label_offset = item.label_offset

        try:
            self.host.delete_placement(item)
        except HostError as e:
            logger.warning(f"删除旧放置失败: {item.item_id}: {e}")
            result.record(item, PlacementStatus.FAILED, message=f"删除失败: {e}")
            return

        if not self.host.can_place(item, target_sheet):
            logger.warning(f"视图 {item.name or item.item_id} 无法放置到图纸 {target_sheet.sheet_id}")
            result.record(item, PlacementStatus.FAILED, message="目标图纸无法承载该视图")
            return

        try:
            placed = self.host.create_placement(item, target_sheet, new_center)
        except HostError as e:
            logger.warning(f"无法为视图 {item.name or item.item_id} 创建放置: {e}")
            result.record(item, PlacementStatus.FAILED, message=f"创建失败: {e}")
            return

        message = ""
        if label_offset is not None:
            try:
                placed = self.host.set_label_offset(placed, label_offset)
            except HostError as e:
                logger.warning(f"标签偏移恢复失败: {item.item_id}: {e}")
                message = f"标签偏移未恢复: {e}"
                result.add_flag("部分视图标签偏移未恢复")

        result.record(item, PlacementStatus.PLACED, placed, message)


def relocate_group(
    host: IHostDocument,
    source_frame: Frame,
    items: Sequence[Item] | None,
    target_frame: Frame | None,
    target_sheet: Sheet,
) -> BatchResult:
    """迁移分组（便捷函数）"""
    return RelocationEngine(host).relocate_group(source_frame, items, target_frame, target_sheet)
