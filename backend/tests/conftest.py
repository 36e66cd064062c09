"""
pytest 配置与公共 fixtures

使用方式：
    def test_something(two_frame_sheet):
        host, sheet, frames, items = two_frame_sheet
        assert len(frames) == 2
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator

import pytest

from sheetlayout.config import RuntimeConfig
from sheetlayout.host import DxfSheetDocument, InMemoryDocument
from sheetlayout.models import Frame, Item, Outline, Point, Sheet


# ============================================================================
# 配置 Fixtures
# ============================================================================

@pytest.fixture
def runtime_config() -> RuntimeConfig:
    """运行期配置（默认值）"""
    return RuntimeConfig()


# ============================================================================
# 数据模型 Fixtures
# ============================================================================

@pytest.fixture
def sample_outline() -> Outline:
    """示例外框"""
    return Outline.from_bounds(0, 0, 10, 7)


@pytest.fixture
def sample_frame() -> Frame:
    """示例图框：插入点(10,0)，外框 (0,0)-(10,7)"""
    return Frame(frame_id="F1", anchor=Point(x=10, y=0), width=10, height=7, type_id="A1")


@pytest.fixture
def sample_item() -> Item:
    """示例已放置视图（带标签）"""
    return Item(
        item_id="V1",
        name="Plan",
        outline=Outline.from_center(Point(x=5, y=3), 2, 1),
        label_outline=Outline.from_center(Point(x=4.5, y=2.3), 1, 0.1),
        sheet_id="S1",
    )


# ============================================================================
# 宿主 Fixtures
# ============================================================================

@pytest.fixture
def memory_host() -> InMemoryDocument:
    """空的内存宿主"""
    return InMemoryDocument()


@pytest.fixture
def two_frame_sheet(
    memory_host: InMemoryDocument,
) -> tuple[InMemoryDocument, Sheet, list[Frame], dict[str, Item]]:
    """
    一张图纸、两个并排图框、三个视图

    图框A: (0,0)-(10,7)   视图 Plan
    图框B: (12,0)-(22,7)  视图 Section（带标签）
    视图 Detail 落在两个图框之外
    """
    host = memory_host
    sheet = host.add_sheet(
        "Plan",
        "A-101",
        parameters={"Designer": "Li", "Sheet Number": "A-101"},
    )
    frame_a = host.add_frame(sheet, Point(x=10, y=0), 10, 7, parameters={"Title": "GA"})
    frame_b = host.add_frame(sheet, Point(x=22, y=0), 10, 7, parameters={"Title": "Sections"})

    plan = host.place_view(host.add_view("Plan", 2, 1), sheet, Point(x=5, y=3.5))
    section = host.place_view(
        host.add_view("Section", 4, 2, label_size=(1.0, 0.1)), sheet, Point(x=17, y=3)
    )
    detail = host.place_view(host.add_view("Detail", 1, 1), sheet, Point(x=30, y=30))

    items = {"Plan": plan, "Section": section, "Detail": detail}
    return host, sheet, [frame_a, frame_b], items


@pytest.fixture
def dxf_host() -> DxfSheetDocument:
    """
    DXF宿主：布局 Plan 上两个图框、两个视口

    图框A: 插入点(10,0)  视口 Plan (中心(5,3.5)，2x1)
    图框B: 插入点(22,0)  视口 Section (中心(17,3)，4x2)
    """
    host = DxfSheetDocument.new()
    sheet = host.add_sheet("Plan", "A-101")
    host.add_title_block(sheet, "TITLEBLOCK_A1", Point(x=10, y=0), 10, 7, parameters={"TITLE": "GA"})
    host.add_title_block(
        sheet, "TITLEBLOCK_A1", Point(x=22, y=0), 10, 7, parameters={"TITLE": "Sections"}
    )
    host.create_placement(host.define_view("Plan", 2, 1), sheet, Point(x=5, y=3.5))
    host.create_placement(host.define_view("Section", 4, 2), sheet, Point(x=17, y=3))
    return host


# ============================================================================
# 文件 Fixtures
# ============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """临时目录"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
