"""
拆分图纸流程 - 为图纸上的每个图框创建独立图纸

流程：
1. 读取图框与视图并分组（首个命中优先）
2. 第一组留在原图纸；其余每个非空分组：
   - 新建图纸（图纸名由视图名拼接、图纸号沿用原图纸号，均去重）
   - 迁移视图（保持相对图框插入点的位置与标签偏移）
   - 复制图纸参数与图框参数
3. 删除原图纸上已建图分组的图框
4. 至少创建一张图纸则提交，否则回滚

测试要点：
- test_split_creates_sheets: 每个额外图框一张新图纸
- test_split_keeps_relative_position: 相对位置保持
- test_split_rollback_when_nothing_created: 全部失败时回滚
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field

from ..config import RuntimeConfig, get_config
from ..interfaces import HostError, IHostDocument, WorkflowError
from ..layout import (
    GroupingEngine,
    RelocationEngine,
    join_item_names,
    unique_name,
    unique_number,
)
from ..models import BatchResult, Frame, Item, Sheet
from .parameters import copy_parameters

logger = logging.getLogger(__name__)

TRANSACTION_NAME = "Create sheets from title blocks"


class SheetCreation(BaseModel):
    """单个新建图纸的结果"""
    source_frame_id: str
    sheet: Sheet
    frame: Frame
    relocation: BatchResult
    copied_parameters: list[str] = Field(default_factory=list)


class SplitReport(BaseModel):
    """拆分结果"""
    source_sheet_id: str
    created: list[SheetCreation] = Field(default_factory=list)
    deleted_frame_ids: list[str] = Field(default_factory=list)
    unassigned_item_ids: list[str] = Field(default_factory=list)
    flags: list[str] = Field(default_factory=list)
    committed: bool = False

    def add_flag(self, flag: str) -> None:
        if flag not in self.flags:
            self.flags.append(flag)


class SplitSheetWorkflow:
    """按图框拆分图纸"""

    def __init__(self, host: IHostDocument, config: RuntimeConfig | None = None) -> None:
        self.host = host
        self.config = config or get_config()
        self.grouping = GroupingEngine(
            tolerance=self.config.geometry.intersect_tolerance,
            rotation_epsilon=self.config.geometry.rotation_epsilon,
        )
        self.relocation = RelocationEngine(host)

    def prepare(self, sheet: Sheet) -> dict[Frame, list[Item]]:
        """
        读取并分组

        Raises:
            WorkflowError: 无图框/无视图/分组不足两组
        """
        frames = self.host.list_frames_on_sheet(sheet)
        if not frames:
            raise WorkflowError("图纸上未找到图框")

        items = self.host.list_items_on_sheet(sheet)
        if not items:
            raise WorkflowError("图纸上没有已放置的视图")

        groups = self.grouping.group(frames, items)
        if len(groups) <= 1:
            raise WorkflowError("图框数量不足，无法拆分为多张图纸")
        return groups

    def run(self, sheet_id: str) -> SplitReport:
        """执行拆分"""
        sheet = self.host.get_sheet(sheet_id)
        groups = self.prepare(sheet)
        report = SplitReport(source_sheet_id=sheet_id)

        assigned = {item.item_id for items in groups.values() for item in items}
        report.unassigned_item_ids = [
            item.item_id for item in self.host.list_items_on_sheet(sheet)
            if item.item_id not in assigned
        ]
        if report.unassigned_item_ids:
            report.add_flag("部分视图不在任何图框内，保留在原图纸")

        pairs = list(groups.items())
        with self.host.transaction(TRANSACTION_NAME):
            for frame, items in pairs[1:]:
                creation = self._create_sheet_for_group(sheet, frame, items, report)
                if creation is not None:
                    report.created.append(creation)

            # 只删除已成功建图的图框
            created_from = {creation.source_frame_id for creation in report.created}
            for frame, _ in pairs[1:]:
                if frame.frame_id not in created_from:
                    continue
                try:
                    self.host.delete_frame(frame)
                except HostError as e:
                    logger.warning(f"删除图框失败 {frame.frame_id}: {e}")
                    report.add_flag("部分图框未能从原图纸删除")
                    continue
                report.deleted_frame_ids.append(frame.frame_id)

            if report.created:
                report.committed = True
            else:
                report.add_flag("未能创建任何新图纸，已回滚")
                self.host.rollback()

        logger.info(
            f"[{sheet_id}] 拆分完成: 新建 {len(report.created)} 张图纸, "
            f"删除 {len(report.deleted_frame_ids)} 个图框"
        )
        return report

    def _create_sheet_for_group(
        self,
        source_sheet: Sheet,
        frame: Frame,
        items: list[Item],
        report: SplitReport,
    ) -> SheetCreation | None:
        """为单个分组创建图纸并迁移视图"""
        if not items:
            return None

        naming = self.config.naming
        name = unique_name(
            join_item_names(items, naming.name_separator),
            self.host.existing_names(),
            default=naming.default_sheet_name,
        )
        number = unique_number(
            source_sheet.number,
            self.host.existing_numbers(),
            default=naming.default_sheet_number,
        )

        try:
            new_sheet, new_frame = self.host.create_sheet(frame, name, number)
        except HostError as e:
            logger.error(f"新建图纸失败 ({frame.frame_id}): {e}")
            report.add_flag("部分图纸创建失败")
            return None

        relocation = self.relocation.relocate_group(frame, items, new_frame, new_sheet)
        for flag in relocation.flags:
            report.add_flag(flag)
        if relocation.failed:
            report.add_flag("部分视图迁移失败")

        copied = copy_parameters(self.host, source_sheet, new_sheet)
        copied += copy_parameters(self.host, frame, new_frame)

        logger.info(
            f"新建图纸 {new_sheet.number} '{new_sheet.name}': "
            f"迁移 {len(relocation.placed)}/{len(items)} 个视图"
        )
        return SheetCreation(
            source_frame_id=frame.frame_id,
            sheet=new_sheet,
            frame=new_frame,
            relocation=relocation,
            copied_parameters=copied,
        )
