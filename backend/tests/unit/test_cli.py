"""
命令行单元测试

每个模块完成后必须运行：pytest tests/unit/test_cli.py -v
"""

from pathlib import Path

import pytest

from sheetlayout.cli import main
from sheetlayout.host import DxfSheetDocument


@pytest.fixture
def dxf_file(dxf_host: DxfSheetDocument, temp_dir: Path) -> Path:
    return dxf_host.save(temp_dir / "plan.dxf")


class TestCli:
    """子命令"""

    def test_groups(self, dxf_file: Path, capsys: pytest.CaptureFixture[str]):
        """测试分组预览"""
        assert main(["groups", str(dxf_file), "--sheet", "Plan"]) == 0
        out = capsys.readouterr().out
        assert "  - Plan" in out
        assert "  - Section" in out

    def test_split(self, dxf_file: Path, temp_dir: Path):
        """测试拆分并另存"""
        out = temp_dir / "split.dxf"
        assert main(["split", str(dxf_file), "--sheet", "Plan", "--out", str(out)]) == 0

        result = DxfSheetDocument.open(out)
        assert "Section" in result.existing_names()
        assert result.get_item("Section").sheet_id == "Section"

    def test_place_column(self, dxf_file: Path, temp_dir: Path):
        """测试按尺寸定义视图并放置"""
        out = temp_dir / "column.dxf"
        code = main([
            "place-column", str(dxf_file),
            "--sheet", "Plan",
            "--views", "Legend", "Notes",
            "--size", "1", "0.5",
            "--spacing", "5",
            "--out", str(out),
        ])
        assert code == 0

        result = DxfSheetDocument.open(out)
        names = {i.name for i in result.list_items_on_sheet(result.get_sheet("Plan"))}
        assert {"Legend", "Notes"} <= names

    def test_place_column_without_size(self, dxf_file: Path):
        """测试未放置视图缺少尺寸"""
        assert main(["place-column", str(dxf_file), "--sheet", "Plan", "--views", "Ghost"]) == 1

    def test_missing_file(self, temp_dir: Path):
        assert main(["split", str(temp_dir / "missing.dxf"), "--sheet", "Plan"]) == 1

    def test_unsplittable_sheet(self, temp_dir: Path):
        """测试单图框图纸拆分失败"""
        host = DxfSheetDocument.new()
        host.add_sheet("Only", "1")
        path = host.save(temp_dir / "only.dxf")
        assert main(["split", str(path), "--sheet", "Only"]) == 1
