"""
单位换算 - 图纸单位(英尺当量) ↔ 展示单位(毫米)
"""

from __future__ import annotations

MM_PER_UNIT = 304.8


def mm_to_units(value_mm: float, mm_per_unit: float = MM_PER_UNIT) -> float:
    """毫米 → 图纸单位"""
    return value_mm / mm_per_unit


def units_to_mm(value: float, mm_per_unit: float = MM_PER_UNIT) -> float:
    """图纸单位 → 毫米"""
    return value * mm_per_unit
