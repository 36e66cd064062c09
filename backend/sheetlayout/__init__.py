"""
图纸视图布局系统 - 核心模块

模块结构：
- models/     数据模型定义（点/外框/图框/视图/批处理结果）
- geometry/   几何内核与图框外框解析
- layout/     分组/列布局/迁移/命名
- host/       宿主文档绑定（内存/ezdxf）
- pipeline/   流程编排（列放置/按图框拆分图纸）
- config/     配置加载与日志
- cli         命令行入口
"""

__version__ = "0.1.0"
