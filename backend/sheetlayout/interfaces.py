"""
模块接口契约 - 宿主文档协作者的抽象接口

设计原则：
1. 布局引擎只通过本接口访问宿主文档，不依赖具体CAD实现
2. 宿主侧失败以异常形式抛出，由引擎转换为逐项结果
3. 便于单元测试和mock替换

使用方式：
    from sheetlayout.interfaces import IHostDocument

    class MyDocument(IHostDocument):
        def list_frames_on_sheet(self, sheet: Sheet) -> list[Frame]:
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .models import Frame, Item, Outline, PlacedItem, Point, Sheet


# ============================================================================
# 宿主文档接口
# ============================================================================

class IHostDocument(ABC):
    """宿主文档接口 - 图纸/图框/视图的读取与放置"""

    # --- 读取 ---

    @abstractmethod
    def get_sheet(self, sheet_id: str) -> Sheet:
        """
        按ID获取图纸

        Raises:
            HostError: 图纸不存在
        """
        ...

    @abstractmethod
    def list_sheets(self) -> list[Sheet]:
        """列出全部图纸"""
        ...

    @abstractmethod
    def list_frames_on_sheet(self, sheet: Sheet) -> list[Frame]:
        """列出图纸上的图框（保持文档顺序）"""
        ...

    @abstractmethod
    def list_items_on_sheet(self, sheet: Sheet) -> list[Item]:
        """列出图纸上已放置的视图（含外框/标签外框）"""
        ...

    @abstractmethod
    def get_item(self, item_id: str) -> Item:
        """按ID获取视图（可能尚未放置）"""
        ...

    # --- 放置 ---

    @abstractmethod
    def can_place(self, item: Item, sheet: Sheet) -> bool:
        """宿主能否在该图纸上承载此视图"""
        ...

    @abstractmethod
    def create_placement(self, item: Item, sheet: Sheet, point: Point) -> PlacedItem:
        """
        在图纸上以point为中心创建视图放置

        宿主负责保留item.type_id指定的视口类型。

        Raises:
            PlacementError: 创建失败
        """
        ...

    @abstractmethod
    def measure(self, placed: PlacedItem) -> Outline:
        """
        读取已放置视图的真实外框（字体/标签等由宿主决定）

        Raises:
            PlacementError: 无法测量
        """
        ...

    @abstractmethod
    def recenter(self, placed: PlacedItem, center: Point) -> PlacedItem:
        """
        移动视图使其外框中心位于center

        Raises:
            PlacementError: 移动失败
        """
        ...

    @abstractmethod
    def set_label_offset(self, placed: PlacedItem, offset: Point) -> PlacedItem:
        """
        设置标签中心相对视口中心的偏移

        Raises:
            PlacementError: 设置失败
        """
        ...

    @abstractmethod
    def delete_placement(self, item: Item) -> None:
        """
        删除视图在当前图纸上的放置

        Raises:
            DeletionError: 删除失败
        """
        ...

    # --- 图纸/图框 ---

    @abstractmethod
    def create_sheet(self, frame: Frame, name: str, number: str) -> tuple[Sheet, Frame]:
        """
        以frame的图框类型新建图纸（图框插入于原点、不旋转）

        Returns:
            (新图纸, 新图纸上的图框)
        """
        ...

    @abstractmethod
    def delete_frame(self, frame: Frame) -> None:
        """删除图框实例"""
        ...

    # --- 参数 ---

    @abstractmethod
    def read_parameters(self, element: Sheet | Frame) -> dict[str, Any]:
        """读取可写参数"""
        ...

    @abstractmethod
    def write_parameter(self, element: Sheet | Frame, name: str, value: Any) -> None:
        """
        写入参数

        Raises:
            HostError: 参数不存在或只读
        """
        ...

    # --- 唯一性 ---

    @abstractmethod
    def existing_names(self) -> set[str]:
        """现有图纸名称"""
        ...

    @abstractmethod
    def existing_numbers(self) -> set[str]:
        """现有图纸编号"""
        ...

    # --- 事务 ---

    @abstractmethod
    def transaction(self, name: str) -> AbstractContextManager[None]:
        """
        事务上下文：正常退出提交，异常退出回滚

        使用方式：
            with host.transaction("放置视图"):
                ...
        """
        ...

    @abstractmethod
    def rollback(self) -> None:
        """回滚当前事务（在transaction上下文内调用）"""
        ...


# ============================================================================
# 异常定义
# ============================================================================

class SheetLayoutError(Exception):
    """基础异常"""
    pass


class HostError(SheetLayoutError):
    """宿主文档错误"""
    pass


class PlacementError(HostError):
    """放置错误（创建/测量/移动）"""
    pass


class DeletionError(HostError):
    """删除错误"""
    pass


class GeometryError(SheetLayoutError, ValueError):
    """几何前置条件错误"""
    pass


class PlacementStateError(SheetLayoutError):
    """两阶段放置状态迁移错误"""
    pass


class WorkflowError(SheetLayoutError):
    """流程校验错误（输入不满足命令前置条件）"""
    pass
