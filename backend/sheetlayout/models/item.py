"""
视图模型 - 可放置的矩形视图及其放置结果
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from .geometry import Outline, Point


class Item(BaseModel):
    """可放置视图（放置后具有外框与标签外框）"""
    item_id: str = Field(..., description="视图唯一ID")
    name: str = ""
    outline: Outline | None = Field(None, description="视口外框")
    label_outline: Outline | None = Field(None, description="标签(图名)外框")
    type_id: str | None = Field(None, description="视口类型/样式")
    sheet_id: str | None = Field(None, description="当前所在图纸")
    properties: dict[str, Any] = Field(default_factory=dict, description="宿主附加数据")

    model_config = {"frozen": True}

    @property
    def is_placed(self) -> bool:
        return self.sheet_id is not None and self.outline is not None

    @property
    def label_offset(self) -> Point | None:
        """标签中心相对视口中心的偏移"""
        if self.outline is None or self.label_outline is None:
            return None
        return self.label_outline.center - self.outline.center


class PlacedItem(BaseModel):
    """放置结果：视图 + 在图纸上的实际位置"""
    item: Item
    placement_id: str
    sheet_id: str
    center: Point
    outline: Outline | None = None
    label_offset: Point | None = None

    @property
    def item_id(self) -> str:
        return self.item.item_id

    @property
    def height(self) -> float:
        return self.outline.height if self.outline else 0.0
