"""
运行期配置 - 读取 documents/sheetlayout.yaml

职责：
- 加载间距/边距/单位/容差等布局参数
- 提供环境变量覆盖机制（SHEETLAYOUT_ 前缀，嵌套用 __ 分隔）
- 类型安全的配置访问
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from ..units import MM_PER_UNIT, mm_to_units

DEFAULT_CONFIG_PATH = Path("documents/sheetlayout.yaml")


class LayoutConfig(BaseModel):
    """布局配置"""

    spacing_mm: dict[str, float] = Field(
        default_factory=lambda: {"small": 5.0, "medium": 10.0, "large": 20.0}
    )
    default_spacing: str = "large"
    column_margin_mm: float = 20.0
    start_position: tuple[float, float] = (0.5, 0.5)  # 空图纸起点（图纸单位）
    mm_per_unit: float = MM_PER_UNIT

    def spacing_units(self, preset: str | None = None) -> float:
        """间距预设（图纸单位）"""
        key = preset or self.default_spacing
        if key not in self.spacing_mm:
            raise KeyError(f"未知间距预设: {key}")
        return mm_to_units(self.spacing_mm[key], self.mm_per_unit)

    def column_margin_units(self) -> float:
        return mm_to_units(self.column_margin_mm, self.mm_per_unit)


class GeometryConfig(BaseModel):
    """几何容差"""

    rotation_epsilon: float = 1e-6
    intersect_tolerance: float = 0.0


class NamingConfig(BaseModel):
    """命名配置"""

    default_sheet_name: str = "New Sheet"
    default_sheet_number: str = "001"
    name_separator: str = ". "


class DxfConfig(BaseModel):
    """DXF宿主配置"""

    title_block_prefix: str = "TITLEBLOCK"
    width_attrib: str = "SHEET_WIDTH"
    height_attrib: str = "SHEET_HEIGHT"
    viewport_layer: str = "VIEWPORTS"
    label_layer: str = "VIEW_TITLES"
    label_height: float = 0.01
    xdata_appid: str = "SHEETLAYOUT"


class LoggingConfig(BaseModel):
    """日志配置"""

    log_level: str = "INFO"
    log_to_file: bool = False
    log_file: str = "sheetlayout.log"


class RuntimeConfig(BaseSettings):
    """运行期配置（支持环境变量覆盖）"""

    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    geometry: GeometryConfig = Field(default_factory=GeometryConfig)
    naming: NamingConfig = Field(default_factory=NamingConfig)
    dxf: DxfConfig = Field(default_factory=DxfConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "SHEETLAYOUT_",
        "env_nested_delimiter": "__",
    }

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> RuntimeConfig:
        """从YAML文件加载配置"""
        path = Path(yaml_path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        opts = data.get("runtime_options", {})

        return cls(
            layout=LayoutConfig(**cls._extract(opts, "layout")),
            geometry=GeometryConfig(**cls._extract(opts, "geometry")),
            naming=NamingConfig(**cls._extract(opts, "naming")),
            dxf=DxfConfig(**cls._extract(opts, "dxf")),
            logging=LoggingConfig(**cls._extract(opts, "logging")),
        )

    @staticmethod
    def _extract(data: dict[str, Any], key: str) -> dict[str, Any]:
        """提取并展平配置（{"default": v} 取 v）"""
        section = data.get(key) or {}
        result = {}
        for k, v in section.items():
            if isinstance(v, dict) and "default" in v:
                result[k] = v["default"]
            else:
                result[k] = v
        return result


# 全局配置实例
_config: RuntimeConfig | None = None


def get_config() -> RuntimeConfig:
    """获取全局配置（惰性加载）"""
    global _config
    if _config is None:
        _config = RuntimeConfig.from_yaml(DEFAULT_CONFIG_PATH)
    return _config


def reload_config(yaml_path: str | Path | None = None) -> RuntimeConfig:
    """重新加载配置"""
    global _config
    _config = RuntimeConfig.from_yaml(yaml_path or DEFAULT_CONFIG_PATH)
    return _config
