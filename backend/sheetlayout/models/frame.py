"""
图框与图纸模型

Frame 对应一个图框（标题栏）实例：插入点为局部坐标系的右下角，
旋转角绕Z轴、以插入点为中心。Sheet 为承载图框与视图的图纸（不透明标识）。
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from .geometry import Point


class Frame(BaseModel):
    """图框（标题栏）"""
    frame_id: str = Field(..., description="图框实例唯一ID")
    anchor: Point | None = Field(None, description="插入点(右下角)，None表示无法解析")
    width: float = Field(..., ge=0, description="宽度")
    height: float = Field(..., ge=0, description="高度")
    rotation: float = Field(0.0, description="旋转角(弧度)")

    type_id: str | None = Field(None, description="图框类型(块名/族类型)")
    sheet_id: str | None = Field(None, description="所在图纸")
    name: str | None = None
    parameters: dict[str, Any] = Field(default_factory=dict, description="图签字段")

    model_config = {"frozen": True}

    # 分组映射以图框为键：按实例ID判等
    def __hash__(self) -> int:
        return hash(self.frame_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Frame):
            return NotImplemented
        return self.frame_id == other.frame_id


class Sheet(BaseModel):
    """图纸"""
    sheet_id: str
    name: str = ""
    number: str = ""
    parameters: dict[str, Any] = Field(default_factory=dict)
