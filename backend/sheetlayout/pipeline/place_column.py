"""
列放置流程 - 将选定视图排成一列放到图纸已有内容右侧

流程：
1. 校验输入（视图不能为空）
2. 读取图纸上的图框与视图，计算已有内容外框并集
3. 起点 = 并集右边缘 + 列边距，首行上边缘 = 并集顶边；空图纸取配置起点
4. 在事务内执行列布局；无任何视图放置成功则回滚
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..config import RuntimeConfig, get_config
from ..geometry import FrameOutlineResolver
from ..interfaces import IHostDocument, WorkflowError
from ..layout import ColumnLayoutEngine, column_start_point
from ..models import BatchResult, Item, Point
from ..units import mm_to_units

logger = logging.getLogger(__name__)

TRANSACTION_NAME = "Place views in column"


class PlaceColumnWorkflow:
    """列放置流程"""

    def __init__(self, host: IHostDocument, config: RuntimeConfig | None = None) -> None:
        self.host = host
        self.config = config or get_config()
        self.engine = ColumnLayoutEngine(host)

    def run(
        self,
        sheet_id: str,
        items: Sequence[Item],
        spacing_mm: float | None = None,
    ) -> BatchResult:
        """
        执行列放置

        Args:
            sheet_id: 目标图纸
            items: 待放置视图
            spacing_mm: 视图间距(mm)，None取默认预设

        Raises:
            WorkflowError: 未选择视图
        """
        if not items:
            raise WorkflowError("未选择需要放置的视图")

        sheet = self.host.get_sheet(sheet_id)
        layout_cfg = self.config.layout
        spacing = (
            mm_to_units(spacing_mm, layout_cfg.mm_per_unit)
            if spacing_mm is not None
            else layout_cfg.spacing_units()
        )
        start = self.start_point(sheet_id)

        logger.info(
            f"[{sheet_id}] 列放置 {len(items)} 个视图，起点=({start.x:.4f}, {start.y:.4f})"
        )

        with self.host.transaction(TRANSACTION_NAME):
            result = self.engine.place_column(items, start, spacing, sheet)
            if not result.placed:
                result.add_flag("没有视图放置成功，已回滚")
                self.host.rollback()

        logger.info(
            f"[{sheet_id}] 放置完成: 成功 {len(result.placed)}, "
            f"跳过 {len(result.skipped)}, 失败 {len(result.failed)}"
        )
        return result

    def start_point(self, sheet_id: str) -> Point:
        """根据图纸已有内容计算新列起点"""
        sheet = self.host.get_sheet(sheet_id)
        resolver = FrameOutlineResolver(self.config.geometry.rotation_epsilon)
        outlines = [item.outline for item in self.host.list_items_on_sheet(sheet)]
        outlines.extend(resolver.resolve(f) for f in self.host.list_frames_on_sheet(sheet))

        start = column_start_point(outlines, self.config.layout.column_margin_units())
        if start is None:
            x, y = self.config.layout.start_position
            return Point(x=x, y=y)
        return start
