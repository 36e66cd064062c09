"""
数据模型层 - 定义系统核心数据结构

所有模块通过这些模型交互，实现解耦：
- Point/Outline: 几何基础
- Frame/Sheet: 图框与图纸
- Item/PlacedItem: 视图与放置结果
- BatchResult: 批量操作的逐项结果
"""

from .frame import Frame, Sheet
from .geometry import ORIGIN, Outline, Point
from .item import Item, PlacedItem
from .results import BatchResult, ItemOutcome, PlacementState, PlacementStatus

__all__ = [
    "Point",
    "Outline",
    "ORIGIN",
    "Frame",
    "Sheet",
    "Item",
    "PlacedItem",
    "BatchResult",
    "ItemOutcome",
    "PlacementState",
    "PlacementStatus",
]
