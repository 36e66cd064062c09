"""
命令行入口 - 对DXF文件执行列放置/拆分/分组预览

用法：
    sheetlayout place-column drawing.dxf --sheet Layout1 --views V1 V2 --spacing 10
    sheetlayout split drawing.dxf --sheet Layout1 --out split.dxf
    sheetlayout groups drawing.dxf --sheet Layout1
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from pathlib import Path

from .config import RuntimeConfig, configure_logging, get_config, reload_config
from .geometry import FrameOutlineResolver
from .host import DxfSheetDocument
from .interfaces import SheetLayoutError
from .layout import GroupingEngine
from .models import Item
from .pipeline import PlaceColumnWorkflow, SplitSheetWorkflow

logger = logging.getLogger("sheetlayout.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sheetlayout",
        description="Arrange viewports on DXF paperspace sheets.",
    )
    parser.add_argument(
        "--config",
        default="",
        help="可选：运行期配置YAML（默认：documents/sheetlayout.yaml）",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    place = sub.add_parser("place-column", help="将视图排成一列放到图纸右侧")
    place.add_argument("dxf", help="DXF文件")
    place.add_argument("--sheet", required=True, help="目标布局名")
    place.add_argument("--views", nargs="+", required=True, help="视图名（按放置顺序）")
    place.add_argument("--spacing", type=float, default=None, help="间距(mm)，默认取配置预设")
    place.add_argument("--size", nargs=2, type=float, metavar=("W", "H"), default=None,
                       help="未放置视图的视口尺寸（图纸单位）")
    place.add_argument("--out", default="", help="输出DXF（默认覆盖输入）")

    split = sub.add_parser("split", help="按图框拆分图纸")
    split.add_argument("dxf", help="DXF文件")
    split.add_argument("--sheet", required=True, help="源布局名")
    split.add_argument("--out", default="", help="输出DXF（默认覆盖输入）")

    groups = sub.add_parser("groups", help="预览视图按图框的分组")
    groups.add_argument("dxf", help="DXF文件")
    groups.add_argument("--sheet", required=True, help="布局名")

    return parser


def _resolve_views(
    host: DxfSheetDocument, names: Sequence[str], size: Sequence[float] | None
) -> list[Item]:
    """已放置的视图直接读取；未放置的按 --size 定义"""
    items: list[Item] = []
    for name in names:
        try:
            items.append(host.get_item(name))
            continue
        except SheetLayoutError:
            pass
        if size is None:
            raise SheetLayoutError(f"视图未放置且未指定 --size: {name}")
        items.append(host.define_view(name, size[0], size[1]))
    return items


def _cmd_place_column(args: argparse.Namespace, config: RuntimeConfig) -> int:
    host = DxfSheetDocument.open(args.dxf, config.dxf)
    items = _resolve_views(host, args.views, args.size)
    result = PlaceColumnWorkflow(host, config).run(args.sheet, items, args.spacing)

    for outcome in result.outcomes:
        print(f"{outcome.item.item_id}: {outcome.status.value} {outcome.message}".rstrip())
    for flag in result.flags:
        print(f"! {flag}")

    if not result.placed:
        return 1
    saved = host.save(args.out or None)
    print(f"已保存: {saved}")
    return 0


def _cmd_split(args: argparse.Namespace, config: RuntimeConfig) -> int:
    host = DxfSheetDocument.open(args.dxf, config.dxf)
    report = SplitSheetWorkflow(host, config).run(args.sheet)

    for creation in report.created:
        print(
            f"{creation.sheet.number} {creation.sheet.name}: "
            f"{len(creation.relocation.placed)} 个视图"
        )
    for flag in report.flags:
        print(f"! {flag}")

    if not report.committed:
        return 1
    saved = host.save(args.out or None)
    print(f"已保存: {saved}")
    return 0


def _cmd_groups(args: argparse.Namespace, config: RuntimeConfig) -> int:
    host = DxfSheetDocument.open(args.dxf, config.dxf)
    sheet = host.get_sheet(args.sheet)
    frames = host.list_frames_on_sheet(sheet)
    items = host.list_items_on_sheet(sheet)

    engine = GroupingEngine(
        tolerance=config.geometry.intersect_tolerance,
        rotation_epsilon=config.geometry.rotation_epsilon,
    )
    resolver = FrameOutlineResolver(config.geometry.rotation_epsilon)
    for frame, members in engine.group(frames, items).items():
        outline = resolver.resolve(frame)
        bounds = (
            f"({outline.minimum.x:.3f}, {outline.minimum.y:.3f})-"
            f"({outline.maximum.x:.3f}, {outline.maximum.y:.3f})"
            if outline else "无插入点"
        )
        print(f"{frame.type_id} [{frame.frame_id}] {bounds}")
        for item in members:
            print(f"  - {item.name}")

    dropped = engine.unassigned(frames, items)
    if dropped:
        print("未归属视图: " + ", ".join(item.name for item in dropped))
    return 0


COMMANDS = {
    "place-column": _cmd_place_column,
    "split": _cmd_split,
    "groups": _cmd_groups,
}


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    config = reload_config(Path(args.config)) if args.config else get_config()
    configure_logging(config.logging)

    try:
        return COMMANDS[args.command](args, config)
    except SheetLayoutError as e:
        logger.error(f"处理失败: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
