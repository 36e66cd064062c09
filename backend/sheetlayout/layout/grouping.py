"""
分组引擎 - 按空间归属将视图划分到图框

规则：
1. 每个图框一个分组（保持图框输入顺序），初始为空
2. 按输入顺序遍历视图，依次检查图框：
   外框相交 或 视图中心落在图框外框内 → 归入该图框并停止（首个命中优先）
3. 未命中任何图框的视图静默剔除（可通过 unassigned 取回）

注意：图框重叠时结果依赖图框顺序。
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..geometry import FrameOutlineResolver, center_inside, intersects
from ..geometry.frame_outline import DEFAULT_ROTATION_EPSILON
from ..models import Frame, Item

logger = logging.getLogger(__name__)


class GroupingEngine:
    """视图→图框分组引擎"""

    def __init__(
        self,
        tolerance: float = 0.0,
        rotation_epsilon: float = DEFAULT_ROTATION_EPSILON,
    ) -> None:
        self.tolerance = tolerance
        self.rotation_epsilon = rotation_epsilon

    def group(
        self,
        frames: Sequence[Frame] | None,
        items: Sequence[Item] | None,
    ) -> dict[Frame, list[Item]]:
        """
        将视图分组到图框

        Args:
            frames: 图框（顺序决定重叠时的归属）
            items: 视图

        Returns:
            {图框: [视图...]}，图框与视图均保持输入顺序
        """
        if not frames:
            return {}

        groups: dict[Frame, list[Item]] = {frame: [] for frame in frames}
        resolver = FrameOutlineResolver(self.rotation_epsilon)

        for item in items or []:
            owner = self.find_owner(frames, item, resolver)
            if owner is None:
                logger.debug(f"视图未落入任何图框，已剔除: {item.item_id}")
                continue
            groups[owner].append(item)

        return groups

    def find_owner(
        self,
        frames: Sequence[Frame],
        item: Item,
        resolver: FrameOutlineResolver | None = None,
    ) -> Frame | None:
        """返回首个包含该视图的图框"""
        if item.outline is None:
            return None

        resolver = resolver or FrameOutlineResolver(self.rotation_epsilon)
        for frame in frames:
            frame_outline = resolver.resolve(frame)
            if frame_outline is None:
                continue
            if intersects(item.outline, frame_outline, self.tolerance) or center_inside(
                item.outline, frame_outline
            ):
                return frame
        return None

    def unassigned(
        self,
        frames: Sequence[Frame] | None,
        items: Sequence[Item] | None,
    ) -> list[Item]:
        """未归入任何图框的视图（保持输入顺序）"""
        if not items:
            return []
        resolver = FrameOutlineResolver(self.rotation_epsilon)
        return [
            item for item in items
            if self.find_owner(frames or [], item, resolver) is None
        ]


def group_items_by_frames(
    frames: Sequence[Frame] | None,
    items: Sequence[Item] | None,
    tolerance: float = 0.0,
) -> dict[Frame, list[Item]]:
    """按图框分组视图（首个命中优先）"""
    return GroupingEngine(tolerance=tolerance).group(frames, items)


def non_empty_groups(groups: dict[Frame, list[Item]]) -> dict[Frame, list[Item]]:
    """去掉空分组（保持顺序）"""
    return {frame: items for frame, items in groups.items() if items}
