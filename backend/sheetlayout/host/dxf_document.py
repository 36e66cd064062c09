"""
DXF宿主 - 基于 ezdxf 的宿主文档实现

映射关系：
- 图纸 Sheet   ↔ 图纸空间布局（layout 名即 sheet_id/name，图纸号存于布局XDATA）
- 图框 Frame   ↔ 块名以 title_block_prefix 开头的 INSERT（宽高取自属性，缺省取块范围）
- 视图 Item    ↔ VIEWPORT（XDATA 记录视图名与视口类型）
- 标签         ↔ TEXT（XDATA 关联视图名）
- 图签字段     ↔ INSERT 的 ATTRIB

依赖：
- ezdxf: DXF读写/实体查询/范围计算

测试要点：
- test_list_frames: 图框读取（含旋转）
- test_create_and_measure: 视口创建与测量
- test_relocate_keeps_label_offset: 迁移后标签偏移不变
"""

from __future__ import annotations

import io
import logging
import math
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import ezdxf
from ezdxf import bbox

from ..config import DxfConfig
from ..interfaces import DeletionError, HostError, IHostDocument, PlacementError
from ..models import ORIGIN, Frame, Item, Outline, PlacedItem, Point, Sheet

logger = logging.getLogger(__name__)

VIEW_TAG = "VIEW"
LABEL_TAG = "LABEL"
SHEET_TAG = "SHEET"

# DXF表名禁用字符
INVALID_NAME_CHARS = "<>/\\\":;?*|=`"


class DxfSheetDocument(IHostDocument):
    """DXF宿主文档"""

    def __init__(self, doc, config: DxfConfig | None = None, path: Path | None = None) -> None:
        self.doc = doc
        self.config = config or DxfConfig()
        self.path = path
        self._snapshot: str | None = None
        self._rollback_requested = False
        self._ensure_appid()

    @classmethod
    def open(cls, path: str | Path, config: DxfConfig | None = None) -> DxfSheetDocument:
        """读取DXF文件"""
        path = Path(path)
        if not path.exists():
            raise HostError(f"DXF文件不存在: {path}")
        try:
            doc = ezdxf.readfile(str(path))
        except Exception as e:
            raise HostError(f"DXF解析失败: {e}") from e
        return cls(doc, config=config, path=path)

    @classmethod
    def new(cls, config: DxfConfig | None = None) -> DxfSheetDocument:
        """新建空白DXF"""
        return cls(ezdxf.new("R2010"), config=config)

    def save(self, path: str | Path | None = None) -> Path:
        """保存（默认覆盖原文件）"""
        target = Path(path) if path else self.path
        if target is None:
            raise HostError("未指定保存路径")
        self.doc.saveas(str(target))
        self.path = target
        return target

    # ------------------------------------------------------------------
    # 构建文档
    # ------------------------------------------------------------------

    def add_sheet(self, name: str, number: str = "") -> Sheet:
        """新建图纸空间布局"""
        if name in self.doc.layouts:
            raise HostError(f"布局已存在: {name}")
        try:
            layout = self.doc.layouts.new(name)
            self._tag(layout.dxf_layout, [SHEET_TAG, number])
        except ezdxf.DXFError as e:
            raise HostError(f"布局创建失败: {name}: {e}") from e
        return self._to_sheet(layout)

    def add_title_block(
        self,
        sheet: Sheet,
        block_name: str,
        anchor: Point,
        width: float,
        height: float,
        rotation: float = 0.0,
        parameters: dict[str, Any] | None = None,
    ) -> Frame:
        """
        插入图框

        块定义不存在时自动创建（以右下角为基点的矩形）。
        """
        if block_name not in self.doc.blocks:
            block = self.doc.blocks.new(name=block_name)
            block.add_lwpolyline(
                [(0, 0), (-width, 0), (-width, height), (0, height)], close=True
            )
        layout = self._layout(sheet.sheet_id)
        insert = layout.add_blockref(
            block_name,
            (anchor.x, anchor.y),
            dxfattribs={"rotation": math.degrees(rotation)},
        )
        insert.add_attrib(self.config.width_attrib, str(width))
        insert.add_attrib(self.config.height_attrib, str(height))
        for tag, value in (parameters or {}).items():
            insert.add_attrib(tag, str(value))
        return self._to_frame(insert, layout)

    def define_view(
        self,
        name: str,
        width: float,
        height: float,
        view_center: tuple[float, float] = (0.0, 0.0),
        view_height: float | None = None,
        type_id: str | None = None,
    ) -> Item:
        """定义一个未放置的视图（模型空间中的观察区域）"""
        return Item(
            item_id=name,
            name=name,
            type_id=type_id,
            properties={
                "width": width,
                "height": height,
                "view_center": list(view_center),
                "view_height": view_height if view_height is not None else height,
            },
        )

    # ------------------------------------------------------------------
    # 读取
    # ------------------------------------------------------------------

    def get_sheet(self, sheet_id: str) -> Sheet:
        return self._to_sheet(self._layout(sheet_id))

    def list_sheets(self) -> list[Sheet]:
        return [self._to_sheet(layout) for layout in self._paperspaces()]

    def list_frames_on_sheet(self, sheet: Sheet) -> list[Frame]:
        layout = self._layout(sheet.sheet_id)
        prefix = self.config.title_block_prefix.upper()
        return [
            self._to_frame(insert, layout)
            for insert in layout.query("INSERT")
            if insert.dxf.name.upper().startswith(prefix)
        ]

    def list_items_on_sheet(self, sheet: Sheet) -> list[Item]:
        layout = self._layout(sheet.sheet_id)
        return [self._to_item(vp, layout) for vp in self._viewports(layout)]

    def get_item(self, item_id: str) -> Item:
        found = self._find_viewport(item_id)
        if found is None:
            raise HostError(f"视图未放置: {item_id}")
        vp, layout = found
        return self._to_item(vp, layout)

    # ------------------------------------------------------------------
    # 放置
    # ------------------------------------------------------------------

    def can_place(self, item: Item, sheet: Sheet) -> bool:
        if sheet.sheet_id not in self.doc.layouts:
            return False
        if "width" not in item.properties or "height" not in item.properties:
            return False
        return self._find_viewport(item.item_id) is None

    def create_placement(self, item: Item, sheet: Sheet, point: Point) -> PlacedItem:
        if not self.can_place(item, sheet):
            raise PlacementError(f"视图 {item.item_id} 无法放置到布局 {sheet.sheet_id}")
        layout = self._layout(sheet.sheet_id)
        props = item.properties
        try:
            vp = layout.add_viewport(
                center=(point.x, point.y),
                size=(float(props["width"]), float(props["height"])),
                view_center_point=tuple(props.get("view_center", (0.0, 0.0))),
                view_height=float(props.get("view_height", props["height"])),
            )
        except Exception as e:
            raise PlacementError(f"视口创建失败: {item.item_id}: {e}") from e
        vp.dxf.layer = self.config.viewport_layer
        self._tag(vp, [VIEW_TAG, item.item_id, item.type_id or ""])

        # 默认标签：视口左下角下方
        half_w = float(props["width"]) / 2
        half_h = float(props["height"]) / 2
        label = layout.add_text(
            item.name or item.item_id,
            dxfattribs={
                "height": self.config.label_height,
                "layer": self.config.label_layer,
                "insert": (point.x - half_w, point.y - half_h - 2 * self.config.label_height),
            },
        )
        self._tag(label, [LABEL_TAG, item.item_id])
        return self._to_placed(vp, layout)

    def measure(self, placed: PlacedItem) -> Outline:
        vp = self._entity(placed.placement_id)
        return self._viewport_outline(vp)

    def recenter(self, placed: PlacedItem, center: Point) -> PlacedItem:
        vp = self._entity(placed.placement_id)
        layout = self._layout(placed.sheet_id)
        old = vp.dxf.center
        dx, dy = center.x - old.x, center.y - old.y
        vp.dxf.center = (center.x, center.y, 0.0)
        # 标签随视口移动
        for label in self._labels(layout, placed.item_id):
            label.translate(dx, dy, 0.0)
        return self._to_placed(vp, layout)

    def set_label_offset(self, placed: PlacedItem, offset: Point) -> PlacedItem:
        vp = self._entity(placed.placement_id)
        layout = self._layout(placed.sheet_id)
        labels = self._labels(layout, placed.item_id)
        if not labels:
            raise PlacementError(f"视图无标签: {placed.item_id}")
        target = self._viewport_outline(vp).center + offset
        for label in labels:
            current = self._text_outline(label).center
            label.translate(target.x - current.x, target.y - current.y, 0.0)
        return self._to_placed(vp, layout)

    def delete_placement(self, item: Item) -> None:
        found = self._find_viewport(item.item_id)
        if found is None:
            raise DeletionError(f"视图未放置: {item.item_id}")
        vp, layout = found
        for label in self._labels(layout, item.item_id):
            layout.delete_entity(label)
        layout.delete_entity(vp)

    # ------------------------------------------------------------------
    # 图纸/图框
    # ------------------------------------------------------------------

    def create_sheet(self, frame: Frame, name: str, number: str) -> tuple[Sheet, Frame]:
        if not frame.type_id:
            raise HostError(f"图框无块名: {frame.frame_id}")
        sheet = self.add_sheet(self.layout_name(name), number)
        new_frame = self.add_title_block(
            sheet,
            frame.type_id,
            ORIGIN,
            frame.width,
            frame.height,
            parameters=dict.fromkeys(frame.parameters, ""),
        )
        return sheet, new_frame

    def delete_frame(self, frame: Frame) -> None:
        insert = self._entity(frame.frame_id, DeletionError)
        self._layout(frame.sheet_id).delete_entity(insert)

    # ------------------------------------------------------------------
    # 参数
    # ------------------------------------------------------------------

    def read_parameters(self, element: Sheet | Frame) -> dict[str, Any]:
        if isinstance(element, Sheet):
            # 布局无用户参数
            return {}
        insert = self._entity(element.frame_id)
        return self._frame_parameters(insert)

    def write_parameter(self, element: Sheet | Frame, name: str, value: Any) -> None:
        if isinstance(element, Sheet):
            raise HostError(f"布局不支持参数: {name}")
        insert = self._entity(element.frame_id)
        attrib = insert.get_attrib(name)
        if attrib is None or name in (self.config.width_attrib, self.config.height_attrib):
            raise HostError(f"参数不存在或只读: {name}")
        attrib.dxf.text = "" if value is None else str(value)

    # ------------------------------------------------------------------
    # 唯一性
    # ------------------------------------------------------------------

    def existing_names(self) -> set[str]:
        return {layout.name for layout in self._paperspaces()}

    def existing_numbers(self) -> set[str]:
        return {self._to_sheet(layout).number for layout in self._paperspaces()}

    @staticmethod
    def layout_name(name: str) -> str:
        """将DXF禁用字符替换为下划线"""
        cleaned = "".join("_" if ch in INVALID_NAME_CHARS else ch for ch in name)
        return cleaned.strip() or "_"

    # ------------------------------------------------------------------
    # 事务
    # ------------------------------------------------------------------

    @contextmanager
    def transaction(self, name: str) -> Iterator[None]:
        if self._snapshot is not None:
            raise HostError("不支持嵌套事务")
        stream = io.StringIO()
        self.doc.write(stream)
        self._snapshot = stream.getvalue()
        self._rollback_requested = False
        try:
            yield
        except BaseException:
            self._restore(name)
            raise
        else:
            if self._rollback_requested:
                self._restore(name)
        finally:
            self._snapshot = None
            self._rollback_requested = False

    def rollback(self) -> None:
        if self._snapshot is None:
            raise HostError("当前不在事务中")
        self._rollback_requested = True

    def _restore(self, name: str) -> None:
        self.doc = ezdxf.read(io.StringIO(self._snapshot))
        logger.info(f"事务已回滚: {name}")

    # ------------------------------------------------------------------
    # 内部
    # ------------------------------------------------------------------

    def _ensure_appid(self) -> None:
        appid = self.config.xdata_appid
        if appid not in self.doc.appids:
            self.doc.appids.new(appid)

    def _tag(self, entity, values: list[str]) -> None:
        entity.set_xdata(self.config.xdata_appid, [(1000, v) for v in values])

    def _read_tag(self, entity) -> list[str]:
        if not entity.has_xdata(self.config.xdata_appid):
            return []
        return [str(tag.value) for tag in entity.get_xdata(self.config.xdata_appid)]

    def _paperspaces(self) -> list:
        return [
            self.doc.layouts.get(name)
            for name in self.doc.layouts.names_in_taborder()
            if name.upper() != "MODEL"
        ]

    def _layout(self, name: str | None):
        if not name or name.upper() == "MODEL" or name not in self.doc.layouts:
            raise HostError(f"布局不存在: {name}")
        return self.doc.layouts.get(name)

    def _entity(self, handle: str, error: type[HostError] = PlacementError):
        entity = self.doc.entitydb.get(handle)
        if entity is None or not entity.is_alive:
            raise error(f"实体不存在: {handle}")
        return entity

    def _viewports(self, layout) -> list:
        """布局中的视图视口（排除主视口）"""
        result = []
        for vp in layout.query("VIEWPORT"):
            tag = self._read_tag(vp)
            if tag and tag[0] == VIEW_TAG:
                result.append(vp)
            elif not tag and vp.dxf.get("id", 0) > 1:
                result.append(vp)
        return result

    def _view_name(self, vp) -> str:
        tag = self._read_tag(vp)
        if len(tag) >= 2 and tag[0] == VIEW_TAG:
            return tag[1]
        return f"VP-{vp.dxf.handle}"

    def _find_viewport(self, item_id: str):
        for layout in self._paperspaces():
            for vp in self._viewports(layout):
                if self._view_name(vp) == item_id:
                    return vp, layout
        return None

    def _labels(self, layout, item_id: str) -> list:
        labels = []
        for text in layout.query("TEXT"):
            tag = self._read_tag(text)
            if len(tag) >= 2 and tag[0] == LABEL_TAG and tag[1] == item_id:
                labels.append(text)
        return labels

    def _viewport_outline(self, vp) -> Outline:
        center = vp.dxf.center
        return Outline.from_center(
            Point(x=float(center.x), y=float(center.y)), float(vp.dxf.width), float(vp.dxf.height)
        )

    def _text_outline(self, text) -> Outline:
        box = bbox.extents([text])
        if box.has_data:
            return Outline.from_bounds(box.extmin.x, box.extmin.y, box.extmax.x, box.extmax.y)
        insert = text.dxf.insert
        return Outline.from_bounds(insert.x, insert.y, insert.x, insert.y)

    def _frame_parameters(self, insert) -> dict[str, Any]:
        reserved = {self.config.width_attrib, self.config.height_attrib}
        return {
            attrib.dxf.tag: attrib.dxf.text
            for attrib in insert.attribs
            if attrib.dxf.tag not in reserved
        }

    def _frame_size(self, insert) -> tuple[float, float]:
        """图框宽高：优先属性，缺省取块范围"""
        width = insert.get_attrib(self.config.width_attrib)
        height = insert.get_attrib(self.config.height_attrib)
        if width is not None and height is not None:
            return float(width.dxf.text), float(height.dxf.text)
        block = self.doc.blocks.get(insert.dxf.name)
        box = bbox.extents(block) if block is not None else None
        if box is None or not box.has_data:
            return 0.0, 0.0
        return (
            box.size.x * abs(insert.dxf.get("xscale", 1.0)),
            box.size.y * abs(insert.dxf.get("yscale", 1.0)),
        )

    def _to_sheet(self, layout) -> Sheet:
        tag = self._read_tag(layout.dxf_layout)
        number = tag[1] if len(tag) >= 2 and tag[0] == SHEET_TAG else ""
        return Sheet(sheet_id=layout.name, name=layout.name, number=number)

    def _to_frame(self, insert, layout) -> Frame:
        width, height = self._frame_size(insert)
        origin = insert.dxf.insert
        return Frame(
            frame_id=insert.dxf.handle,
            anchor=Point(x=float(origin.x), y=float(origin.y)),
            width=width,
            height=height,
            rotation=math.radians(insert.dxf.get("rotation", 0.0)),
            type_id=insert.dxf.name,
            sheet_id=layout.name,
            parameters=self._frame_parameters(insert),
        )

    def _to_item(self, vp, layout) -> Item:
        tag = self._read_tag(vp)
        name = self._view_name(vp)
        type_id = tag[2] if len(tag) >= 3 and tag[2] else None
        labels = self._labels(layout, name)
        view_center = vp.dxf.get("view_center_point", (0.0, 0.0))
        return Item(
            item_id=name,
            name=name,
            outline=self._viewport_outline(vp),
            label_outline=self._text_outline(labels[0]) if labels else None,
            type_id=type_id,
            sheet_id=layout.name,
            properties={
                "width": float(vp.dxf.width),
                "height": float(vp.dxf.height),
                "view_center": [float(view_center[0]), float(view_center[1])],
                "view_height": float(vp.dxf.get("view_height", vp.dxf.height)),
            },
        )

    def _to_placed(self, vp, layout) -> PlacedItem:
        item = self._to_item(vp, layout)
        return PlacedItem(
            item=item,
            placement_id=vp.dxf.handle,
            sheet_id=layout.name,
            center=item.outline.center,
            outline=item.outline,
            label_offset=item.label_offset,
        )
