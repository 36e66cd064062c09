"""
参数复制 - 将源图纸/图框的可写参数复制到目标

图纸名与图纸号由命名服务生成，不参与复制。
单个参数失败只记录日志，不中断。
"""

from __future__ import annotations

import logging

from ..interfaces import HostError, IHostDocument
from ..models import Frame, Sheet

logger = logging.getLogger(__name__)

SKIPPED_PARAMETERS = frozenset(
    name.casefold() for name in ("Sheet Number", "Sheet Name", "Номер листа", "Имя")
)


def copy_parameters(
    host: IHostDocument,
    source: Sheet | Frame,
    target: Sheet | Frame,
    skip: frozenset[str] = SKIPPED_PARAMETERS,
) -> list[str]:
    """
    复制参数

    Returns:
        成功复制的参数名（按源参数顺序）
    """
    copied: list[str] = []
    target_names = set(host.read_parameters(target))

    for name, value in host.read_parameters(source).items():
        if name.casefold() in skip or name not in target_names:
            continue
        try:
            host.write_parameter(target, name, value)
        except HostError as e:
            logger.warning(f"参数复制失败 {name}: {e}")
            continue
        copied.append(name)

    return copied
