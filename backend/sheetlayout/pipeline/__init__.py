"""
流程模块 - 在宿主事务内编排布局引擎

子模块：
- place_column: 视图列放置
- split_sheets: 按图框拆分图纸
- parameters: 参数复制
"""

from .parameters import SKIPPED_PARAMETERS, copy_parameters
from .place_column import PlaceColumnWorkflow
from .split_sheets import SheetCreation, SplitReport, SplitSheetWorkflow

__all__ = [
    "PlaceColumnWorkflow",
    "SplitSheetWorkflow",
    "SplitReport",
    "SheetCreation",
    "copy_parameters",
    "SKIPPED_PARAMETERS",
]
