"""
配置层 - 加载运行期配置

职责：
- 加载 documents/sheetlayout.yaml（布局/几何/命名/DXF/日志参数）
- 提供类型安全的配置访问接口
- 初始化日志
"""

from .logging_setup import configure_logging
from .runtime_config import (
    DxfConfig,
    GeometryConfig,
    LayoutConfig,
    LoggingConfig,
    NamingConfig,
    RuntimeConfig,
    get_config,
    reload_config,
)

__all__ = [
    "RuntimeConfig",
    "LayoutConfig",
    "GeometryConfig",
    "NamingConfig",
    "DxfConfig",
    "LoggingConfig",
    "get_config",
    "reload_config",
    "configure_logging",
]
