"""
块合并引擎

把 source Profile 的块逐个合并进 target Profile：
- 起点相同、终点相同：按 mode 合并计数（set 取按位或，count/atomic 相加）；
- 起点相同、终点不同：ExtentConflictError；
- 新块：检查与前后相邻块不重叠后按序插入。

source.blocks 已按起点排序，因此在同一次 merge_into 中维护单调前进的游标
`start_index`，每个块只在 blocks[start_index:] 上做二分查找，而不是每次从头开始。

合并在 target.blocks 的副本上进行，全部成功后才写回；失败时 target 保持原状。
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional

from .errors import ExtentConflictError, ModeMismatchError, OverlapError, UnsupportedModeError
from .profile import Block, Profile, MODE_SET, MODE_COUNT, MODE_ATOMIC


@dataclass
class MergeStats:
    """一次合并中新插入与合并计数的块数量。"""

    inserted: int = 0
    combined: int = 0

    def __add__(self, other: "MergeStats") -> "MergeStats":
        return MergeStats(self.inserted + other.inserted, self.combined + other.combined)


def combine_counts(mode: str, a: int, b: int, file_name: Optional[str] = None) -> int:
    """按覆盖模式合并两个执行计数。"""
    if mode == MODE_SET:
        # 保持按位或语义，不钳制到 0/1
        return a | b
    if mode in (MODE_COUNT, MODE_ATOMIC):
        return a + b
    raise UnsupportedModeError(f"cannot combine counts in mode {mode!r}", file_name=file_name)


def _search(blocks: List[Block], block: Block, lo: int) -> int:
    """返回 blocks[lo:] 中第一个起点 >= block 起点的下标。"""
    hi = len(blocks)
    key = block.start
    while lo < hi:
        mid = (lo + hi) // 2
        if blocks[mid].start < key:
            lo = mid + 1
        else:
            hi = mid
    return lo


def merge_block(blocks: List[Block], block: Block, mode: str, start_index: int = 0,
                file_name: Optional[str] = None, stats: Optional[MergeStats] = None) -> int:
    """把单个块合并进有序列表 blocks（原地修改），返回下一次查找的游标。"""
    i = _search(blocks, block, start_index)

    if i < len(blocks) and blocks[i].start == block.start:
        existing = blocks[i]
        if existing.end != block.end:
            raise ExtentConflictError("same start position with different extents",
                                      file_name=file_name, blocks=(existing, block))
        blocks[i] = replace(existing, count=combine_counts(mode, existing.count, block.count, file_name))
        if stats is not None:
            stats.combined += 1
        return i + 1

    if i > 0:
        prev = blocks[i - 1]
        # 半开区间：前块终点等于本块起点视为相接；空块落在前块终点上视为重叠
        if prev.end > block.start or prev.end >= block.end:
            raise OverlapError("block overlaps its predecessor", "before",
                               file_name=file_name, blocks=(prev, block))
    if i < len(blocks):
        succ = blocks[i]
        if succ.start < block.end:
            raise OverlapError("block overlaps its successor", "after",
                               file_name=file_name, blocks=(succ, block))

    blocks.insert(i, block)
    if stats is not None:
        stats.inserted += 1
    return i + 1


def merge_into(target: Profile, source: Profile) -> MergeStats:
    """把 source 的所有块合并进 target。

    模式不一致时在修改任何数据之前抛出 ModeMismatchError。source 不会被修改。
    """
    if target.mode != source.mode:
        raise ModeMismatchError(
            f"cannot merge profiles with different modes ({target.mode!r} vs {source.mode!r})",
            file_name=target.file_name)

    stats = MergeStats()
    blocks = list(target.blocks)
    start_index = 0
    last_start = None
    for b in source.blocks:
        # 游标仅在 source 严格有序时有效；乱序或重复起点退回从头查找
        if last_start is not None and b.start <= last_start:
            start_index = 0
        last_start = b.start
        start_index = merge_block(blocks, b, target.mode, start_index,
                                  file_name=target.file_name, stats=stats)
    target.blocks = blocks
    return stats


__all__ = ["MergeStats", "combine_counts", "merge_block", "merge_into"]
