"""
内存宿主 - 基于字典的宿主文档实现

用途：
1. 单元测试与流程演练（无需CAD环境）
2. 作为新宿主绑定的参考实现

模拟宿主行为：
- 视图真实尺寸由宿主决定，创建后才能测量
- 一个视图同一时刻只能放置在一张图纸上
- 可配置拒绝创建/移动/删除，以及与图纸不兼容的视图
- 事务基于快照：异常或 rollback() 时恢复
"""

from __future__ import annotations

import copy
import itertools
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from ..interfaces import DeletionError, HostError, IHostDocument, PlacementError
from ..models import ORIGIN, Frame, Item, Outline, PlacedItem, Point, Sheet

logger = logging.getLogger(__name__)

LABEL_GAP = 0.01


@dataclass
class _ViewRecord:
    """视图内部记录"""
    item_id: str
    name: str
    width: float
    height: float
    label_size: tuple[float, float] | None = None
    type_id: str | None = None
    properties: dict[str, Any] = field(default_factory=dict)

    # 放置状态
    placement_id: str | None = None
    sheet_id: str | None = None
    center: Point | None = None
    label_offset: Point | None = None

    def outline(self) -> Outline | None:
        if self.center is None:
            return None
        return Outline.from_center(self.center, self.width, self.height)

    def label_outline(self) -> Outline | None:
        if self.center is None or self.label_size is None:
            return None
        offset = self.label_offset or self.default_label_offset()
        return Outline.from_center(self.center + offset, *self.label_size)

    def default_label_offset(self) -> Point:
        """默认标签位置：视口下方、左对齐"""
        lw, lh = self.label_size or (0.0, 0.0)
        return Point(
            x=-self.width / 2 + lw / 2,
            y=-self.height / 2 - LABEL_GAP - lh / 2,
        )


@dataclass
class _State:
    sheets: dict[str, Sheet] = field(default_factory=dict)
    frames: dict[str, Frame] = field(default_factory=dict)
    views: dict[str, _ViewRecord] = field(default_factory=dict)


class InMemoryDocument(IHostDocument):
    """内存宿主文档"""

    def __init__(self) -> None:
        self._state = _State()
        self._ids = itertools.count(1)

        # 故障注入
        self.refuse_create: set[str] = set()
        self.refuse_recenter: set[str] = set()
        self.refuse_delete: set[str] = set()
        self.refuse_label: set[str] = set()
        self.incompatible: set[tuple[str, str]] = set()  # (item_id, sheet_id)
        self.read_only_parameters: set[str] = set()
        self.refuse_create_sheet = False

        self._snapshot: _State | None = None
        self._rollback_requested = False
        self.committed: list[str] = []
        self.rolled_back: list[str] = []

    # ------------------------------------------------------------------
    # 构建文档（测试/演练用）
    # ------------------------------------------------------------------

    def add_sheet(
        self,
        name: str,
        number: str,
        sheet_id: str | None = None,
        parameters: dict[str, Any] | None = None,
    ) -> Sheet:
        sheet = Sheet(
            sheet_id=sheet_id or self._next_id("sheet"),
            name=name,
            number=number,
            parameters=dict(parameters or {}),
        )
        self._state.sheets[sheet.sheet_id] = sheet
        return sheet

    def add_frame(
        self,
        sheet: Sheet,
        anchor: Point | None,
        width: float,
        height: float,
        rotation: float = 0.0,
        frame_id: str | None = None,
        type_id: str | None = "A1",
        parameters: dict[str, Any] | None = None,
    ) -> Frame:
        frame = Frame(
            frame_id=frame_id or self._next_id("frame"),
            anchor=anchor,
            width=width,
            height=height,
            rotation=rotation,
            type_id=type_id,
            sheet_id=sheet.sheet_id,
            parameters=dict(parameters or {}),
        )
        self._state.frames[frame.frame_id] = frame
        return frame

    def add_view(
        self,
        name: str,
        width: float,
        height: float,
        label_size: tuple[float, float] | None = None,
        item_id: str | None = None,
        type_id: str | None = None,
    ) -> Item:
        """登记一个未放置的视图（尺寸只在放置后可见）"""
        record = _ViewRecord(
            item_id=item_id or self._next_id("view"),
            name=name,
            width=width,
            height=height,
            label_size=label_size,
            type_id=type_id,
        )
        self._state.views[record.item_id] = record
        return self._to_item(record)

    def place_view(self, item: Item, sheet: Sheet, center: Point) -> Item:
        """直接放置视图（不经过can_place）"""
        record = self._record(item.item_id)
        record.placement_id = self._next_id("vp")
        record.sheet_id = sheet.sheet_id
        record.center = center.flatten()
        record.label_offset = None
        return self._to_item(record)

    # ------------------------------------------------------------------
    # 读取
    # ------------------------------------------------------------------

    def get_sheet(self, sheet_id: str) -> Sheet:
        if sheet_id not in self._state.sheets:
            raise HostError(f"图纸不存在: {sheet_id}")
        return self._state.sheets[sheet_id]

    def list_sheets(self) -> list[Sheet]:
        return list(self._state.sheets.values())

    def list_frames_on_sheet(self, sheet: Sheet) -> list[Frame]:
        return [f for f in self._state.frames.values() if f.sheet_id == sheet.sheet_id]

    def list_items_on_sheet(self, sheet: Sheet) -> list[Item]:
        return [
            self._to_item(r) for r in self._state.views.values()
            if r.sheet_id == sheet.sheet_id
        ]

    def get_item(self, item_id: str) -> Item:
        return self._to_item(self._record(item_id))

    # ------------------------------------------------------------------
    # 放置
    # ------------------------------------------------------------------

    def can_place(self, item: Item, sheet: Sheet) -> bool:
        record = self._state.views.get(item.item_id)
        if record is None or sheet.sheet_id not in self._state.sheets:
            return False
        if (item.item_id, sheet.sheet_id) in self.incompatible:
            return False
        return record.sheet_id is None

    def create_placement(self, item: Item, sheet: Sheet, point: Point) -> PlacedItem:
        record = self._state.views.get(item.item_id)
        if record is None:
            raise PlacementError(f"视图不存在: {item.item_id}")
        if item.item_id in self.refuse_create:
            raise PlacementError(f"宿主拒绝创建: {item.item_id}")
        if record.sheet_id is not None:
            raise PlacementError(f"视图已放置在图纸 {record.sheet_id}: {item.item_id}")
        if sheet.sheet_id not in self._state.sheets:
            raise PlacementError(f"图纸不存在: {sheet.sheet_id}")

        record.placement_id = self._next_id("vp")
        record.sheet_id = sheet.sheet_id
        record.center = point.flatten()
        record.label_offset = None
        if item.type_id is not None:
            record.type_id = item.type_id
        return self._to_placed(record)

    def measure(self, placed: PlacedItem) -> Outline:
        record = self._placed_record(placed)
        return record.outline()

    def recenter(self, placed: PlacedItem, center: Point) -> PlacedItem:
        record = self._placed_record(placed)
        if record.item_id in self.refuse_recenter:
            raise PlacementError(f"宿主拒绝移动: {record.item_id}")
        record.center = center.flatten()
        return self._to_placed(record)

    def set_label_offset(self, placed: PlacedItem, offset: Point) -> PlacedItem:
        record = self._placed_record(placed)
        if record.item_id in self.refuse_label:
            raise PlacementError(f"宿主拒绝设置标签: {record.item_id}")
        if record.label_size is None:
            raise PlacementError(f"视图无标签: {record.item_id}")
        record.label_offset = offset.flatten()
        return self._to_placed(record)

    def delete_placement(self, item: Item) -> None:
        record = self._state.views.get(item.item_id)
        if record is None or record.sheet_id is None:
            raise DeletionError(f"视图未放置: {item.item_id}")
        if item.item_id in self.refuse_delete:
            raise DeletionError(f"宿主拒绝删除: {item.item_id}")
        record.placement_id = None
        record.sheet_id = None
        record.center = None
        record.label_offset = None

    # ------------------------------------------------------------------
    # 图纸/图框
    # ------------------------------------------------------------------

    def create_sheet(self, frame: Frame, name: str, number: str) -> tuple[Sheet, Frame]:
        if self.refuse_create_sheet:
            raise HostError(f"宿主拒绝新建图纸: {name}")
        parameter_names = set()
        for sheet in self._state.sheets.values():
            parameter_names.update(sheet.parameters)
        sheet = self.add_sheet(name, number, parameters=dict.fromkeys(parameter_names, ""))
        new_frame = self.add_frame(
            sheet,
            anchor=ORIGIN,
            width=frame.width,
            height=frame.height,
            type_id=frame.type_id,
            parameters=dict.fromkeys(frame.parameters, ""),
        )
        return sheet, new_frame

    def delete_frame(self, frame: Frame) -> None:
        if frame.frame_id not in self._state.frames:
            raise DeletionError(f"图框不存在: {frame.frame_id}")
        del self._state.frames[frame.frame_id]

    # ------------------------------------------------------------------
    # 参数
    # ------------------------------------------------------------------

    def read_parameters(self, element: Sheet | Frame) -> dict[str, Any]:
        current = self._current(element)
        return {k: v for k, v in current.parameters.items() if k not in self.read_only_parameters}

    def write_parameter(self, element: Sheet | Frame, name: str, value: Any) -> None:
        current = self._current(element)
        if name not in current.parameters:
            raise HostError(f"参数不存在: {name}")
        if name in self.read_only_parameters:
            raise HostError(f"参数只读: {name}")
        parameters = {**current.parameters, name: value}
        updated = current.model_copy(update={"parameters": parameters})
        if isinstance(updated, Frame):
            self._state.frames[updated.frame_id] = updated
        else:
            self._state.sheets[updated.sheet_id] = updated

    # ------------------------------------------------------------------
    # 唯一性
    # ------------------------------------------------------------------

    def existing_names(self) -> set[str]:
        return {s.name for s in self._state.sheets.values()}

    def existing_numbers(self) -> set[str]:
        return {s.number for s in self._state.sheets.values()}

    # ------------------------------------------------------------------
    # 事务
    # ------------------------------------------------------------------

    @contextmanager
    def transaction(self, name: str) -> Iterator[None]:
        if self._snapshot is not None:
            raise HostError("不支持嵌套事务")
        self._snapshot = copy.deepcopy(self._state)
        self._rollback_requested = False
        try:
            yield
        except BaseException:
            self._restore(name)
            raise
        else:
            if self._rollback_requested:
                self._restore(name)
            else:
                self.committed.append(name)
        finally:
            self._snapshot = None
            self._rollback_requested = False

    def rollback(self) -> None:
        if self._snapshot is None:
            raise HostError("当前不在事务中")
        self._rollback_requested = True

    def _restore(self, name: str) -> None:
        self._state = self._snapshot
        self.rolled_back.append(name)
        logger.info(f"事务已回滚: {name}")

    # ------------------------------------------------------------------
    # 内部
    # ------------------------------------------------------------------

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._ids)}"

    def _record(self, item_id: str) -> _ViewRecord:
        if item_id not in self._state.views:
            raise HostError(f"视图不存在: {item_id}")
        return self._state.views[item_id]

    def _placed_record(self, placed: PlacedItem) -> _ViewRecord:
        record = self._state.views.get(placed.item_id)
        if record is None or record.placement_id != placed.placement_id:
            raise PlacementError(f"放置已失效: {placed.placement_id}")
        return record

    def _current(self, element: Sheet | Frame) -> Sheet | Frame:
        if isinstance(element, Frame):
            if element.frame_id not in self._state.frames:
                raise HostError(f"图框不存在: {element.frame_id}")
            return self._state.frames[element.frame_id]
        return self.get_sheet(element.sheet_id)

    def _to_item(self, record: _ViewRecord) -> Item:
        return Item(
            item_id=record.item_id,
            name=record.name,
            outline=record.outline(),
            label_outline=record.label_outline(),
            type_id=record.type_id,
            sheet_id=record.sheet_id,
            properties=dict(record.properties),
        )

    def _to_placed(self, record: _ViewRecord) -> PlacedItem:
        outline = record.outline()
        label = record.label_outline()
        return PlacedItem(
            item=self._to_item(record),
            placement_id=record.placement_id,
            sheet_id=record.sheet_id,
            center=record.center,
            outline=outline,
            label_offset=label.center - outline.center if label else None,
        )
