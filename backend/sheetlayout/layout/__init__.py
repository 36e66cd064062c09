"""
布局模块 - 分组/列布局/迁移/命名

子模块：
- grouping: 视图按图框分组（首个命中优先）
- column: 两阶段列布局
- relocation: 分组迁移（保持相对插入点位置与标签偏移）
- naming: 唯一图纸名/图纸号
"""

from .column import ColumnLayoutEngine, TwoPhasePlacement, column_start_point, place_column
from .grouping import GroupingEngine, group_items_by_frames, non_empty_groups
from .naming import join_item_names, unique_name, unique_number
from .relocation import RelocationEngine, compute_relocated_center, relocate_group

__all__ = [
    "GroupingEngine",
    "group_items_by_frames",
    "non_empty_groups",
    "ColumnLayoutEngine",
    "TwoPhasePlacement",
    "column_start_point",
    "place_column",
    "RelocationEngine",
    "compute_relocated_center",
    "relocate_group",
    "unique_name",
    "unique_number",
    "join_item_names",
]
