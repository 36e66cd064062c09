"""
命名服务单元测试

每个模块完成后必须运行：pytest tests/unit/test_naming.py -v
"""

from sheetlayout.layout import join_item_names, unique_name, unique_number
from sheetlayout.models import Item


class TestUniqueName:
    """唯一图纸名"""

    def test_no_conflict(self):
        assert unique_name("X", set()) == "X"

    def test_first_conflict(self):
        assert unique_name("Sheet1", {"Sheet1"}) == "Sheet1 (1)"

    def test_counter_increments(self):
        assert unique_name("Sheet1", {"Sheet1", "Sheet1 (1)"}) == "Sheet1 (2)"

    def test_gap_is_filled(self):
        """测试从1起取首个空位"""
        assert unique_name("A", {"A", "A (2)"}) == "A (1)"

    def test_default_for_empty(self):
        """测试空名使用默认名"""
        assert unique_name("", set()) == "New Sheet"
        assert unique_name(None, {"New Sheet"}) == "New Sheet (1)"
        assert unique_name("", set(), default="Blank") == "Blank"


class TestUniqueNumber:
    """唯一图纸号"""

    def test_same_separator_as_names(self):
        """测试编号与名称使用同一分隔形式"""
        assert unique_number("A-101", {"A-101"}) == "A-101 (1)"

    def test_default(self):
        assert unique_number(None, set()) == "001"
        assert unique_number("", {"001"}) == "001 (1)"


class TestJoinItemNames:
    """视图名拼接"""

    def test_join(self):
        items = [Item(item_id="1", name="Plan"), Item(item_id="2", name=""), Item(item_id="3", name="Section")]
        assert join_item_names(items) == "Plan. Section"
        assert join_item_names(items, " + ") == "Plan + Section"

    def test_empty(self):
        assert join_item_names([]) == ""
