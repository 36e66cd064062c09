"""
几何基础模型 - 点与轴对齐外框

约定：
- 平面单位为图纸单位（英尺当量），与毫米换算见 units.py
- Outline 始终投影到 z=0
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, field_validator, model_validator


class Point(BaseModel):
    """三维坐标点（本引擎只使用XY平面）"""
    x: float
    y: float
    z: float = 0.0

    model_config = {"frozen": True}

    @classmethod
    def from_tuple(cls, values: Iterable[float]) -> Point:
        """从(x, y[, z])元组构建"""
        coords = [float(v) for v in values]
        if len(coords) == 2:
            coords.append(0.0)
        if len(coords) != 3:
            raise ValueError(f"坐标维度错误: {coords}")
        return cls(x=coords[0], y=coords[1], z=coords[2])

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def flatten(self) -> Point:
        """投影到z=0"""
        if self.z == 0.0:
            return self
        return Point(x=self.x, y=self.y)

    def __add__(self, other: Point) -> Point:
        return Point(x=self.x + other.x, y=self.y + other.y, z=self.z + other.z)

    def __sub__(self, other: Point) -> Point:
        return Point(x=self.x - other.x, y=self.y - other.y, z=self.z - other.z)

    def __mul__(self, factor: float) -> Point:
        return Point(x=self.x * factor, y=self.y * factor, z=self.z * factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> Point:
        return Point(x=self.x / divisor, y=self.y / divisor, z=self.z / divisor)


ORIGIN = Point(x=0.0, y=0.0)


class Outline(BaseModel):
    """轴对齐外框（AABB）"""
    minimum: Point
    maximum: Point

    model_config = {"frozen": True}

    @field_validator("minimum", "maximum")
    @classmethod
    def _project_to_plane(cls, value: Point) -> Point:
        return value.flatten()

    @model_validator(mode="after")
    def _check_order(self) -> Outline:
        if self.minimum.x > self.maximum.x or self.minimum.y > self.maximum.y:
            raise ValueError(
                f"外框角点顺序错误: min={self.minimum.as_tuple()} max={self.maximum.as_tuple()}"
            )
        return self

    @classmethod
    def from_bounds(cls, xmin: float, ymin: float, xmax: float, ymax: float) -> Outline:
        return cls(minimum=Point(x=xmin, y=ymin), maximum=Point(x=xmax, y=ymax))

    @classmethod
    def from_center(cls, center: Point, width: float, height: float) -> Outline:
        """按中心点与尺寸构建"""
        half = Point(x=width / 2, y=height / 2)
        return cls(minimum=center - half, maximum=center + half)

    @property
    def center(self) -> Point:
        return (self.minimum + self.maximum) / 2

    @property
    def width(self) -> float:
        return self.maximum.x - self.minimum.x

    @property
    def height(self) -> float:
        return self.maximum.y - self.minimum.y

    def translated(self, dx: float, dy: float) -> Outline:
        """平移后的新外框"""
        delta = Point(x=dx, y=dy)
        return Outline(minimum=self.minimum + delta, maximum=self.maximum + delta)
