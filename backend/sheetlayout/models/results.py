"""
批处理结果模型 - (输入, 结果) 对列表

批量操作遇到单项失败不中断，逐项记录结果，
由调用方决定提交或回滚事务。
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from .item import Item, PlacedItem


class PlacementStatus(str, Enum):
    """单项放置结果"""
    PLACED = "placed"
    SKIPPED = "skipped"     # 宿主拒绝承载（can_place为False）
    FAILED = "failed"       # 创建/删除/移动失败


class PlacementState(str, Enum):
    """两阶段放置状态"""
    TENTATIVE = "tentative"   # 已在临时位置创建
    MEASURED = "measured"     # 已读取真实外框
    FINAL = "final"           # 已移动到最终位置
    REFUSED = "refused"       # 宿主拒绝创建


class ItemOutcome(BaseModel):
    """单项结果"""
    item: Item
    status: PlacementStatus
    placed: PlacedItem | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status == PlacementStatus.PLACED


class BatchResult(BaseModel):
    """批量放置结果（保持输入顺序）"""
    outcomes: list[ItemOutcome] = Field(default_factory=list)
    flags: list[str] = Field(default_factory=list, description="告警标记")

    def record(
        self,
        item: Item,
        status: PlacementStatus,
        placed: PlacedItem | None = None,
        message: str = "",
    ) -> ItemOutcome:
        outcome = ItemOutcome(item=item, status=status, placed=placed, message=message)
        self.outcomes.append(outcome)
        return outcome

    def add_flag(self, flag: str) -> None:
        """添加告警标记（不中断）"""
        if flag not in self.flags:
            self.flags.append(flag)

    @property
    def placed(self) -> list[PlacedItem]:
        return [o.placed for o in self.outcomes if o.ok and o.placed is not None]

    @property
    def failed(self) -> list[ItemOutcome]:
        return [o for o in self.outcomes if o.status == PlacementStatus.FAILED]

    @property
    def skipped(self) -> list[ItemOutcome]:
        return [o for o in self.outcomes if o.status == PlacementStatus.SKIPPED]

    @property
    def succeeded(self) -> bool:
        """无失败项"""
        return not self.failed

    def __len__(self) -> int:
        return len(self.outcomes)
