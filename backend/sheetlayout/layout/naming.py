"""
命名服务 - 生成不与现有名称/编号冲突的图纸名与图纸号

冲突时追加 " (n)"，n 从1递增直到不冲突。名称与编号统一使用同一分隔形式。
"""

from __future__ import annotations

from collections.abc import Collection, Iterable

from ..models import Item

DISAMBIGUATOR = " ({n})"


def _disambiguate(base: str, existing: Collection[str]) -> str:
    if base not in existing:
        return base
    counter = 1
    while True:
        candidate = base + DISAMBIGUATOR.format(n=counter)
        if candidate not in existing:
            return candidate
        counter += 1


def unique_name(base: str | None, existing: Collection[str], default: str = "New Sheet") -> str:
    """唯一图纸名（base为空时使用default）"""
    return _disambiguate(base or default, existing)


def unique_number(base: str | None, existing: Collection[str], default: str = "001") -> str:
    """唯一图纸号（base为空时使用default）"""
    return _disambiguate(base or default, existing)


def join_item_names(items: Iterable[Item], separator: str = ". ") -> str:
    """由视图名拼接图纸名（跳过空名）"""
    return separator.join(item.name for item in items if item.name)
