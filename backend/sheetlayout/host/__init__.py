"""
宿主绑定 - IHostDocument 的具体实现

子模块：
- memory: 内存宿主（测试/参考实现）
- dxf_document: ezdxf 宿主（图纸空间布局/INSERT图框/VIEWPORT视图）
"""

from .dxf_document import DxfSheetDocument
from .memory import InMemoryDocument

__all__ = [
    "InMemoryDocument",
    "DxfSheetDocument",
]
