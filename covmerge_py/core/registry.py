"""
Profile 注册表

按文件名有序保存所有 Profile。`add` 对新文件做有序插入，对已有文件委托给合并引擎。
整个运行共享同一个覆盖模式：第一个加入的 Profile 决定 `mode`，之后任何模式不同的
Profile（无论是否同一文件）都会被拒绝。
"""
from __future__ import annotations

import threading
from typing import Iterable, Iterator, List, Optional

from .errors import ModeMismatchError, UnsupportedModeError
from .merge import MergeStats, merge_into
from .profile import Profile, MODES


class ProfileRegistry:
    """有序 Profile 集合（按 file_name 升序）。

    - `add` 在锁内执行，允许多个读取线程把解析结果交给同一个注册表；
    - 已合并的 incoming Profile 之后不再被引用或修改。
    """

    def __init__(self) -> None:
        self._profiles: List[Profile] = []
        self._mode: Optional[str] = None
        self._lock = threading.Lock()

    @property
    def mode(self) -> Optional[str]:
        return self._mode

    def _search(self, file_name: str) -> int:
        lo, hi = 0, len(self._profiles)
        while lo < hi:
            mid = (lo + hi) // 2
            if self._profiles[mid].file_name < file_name:
                lo = mid + 1
            else:
                hi = mid
        return lo

    def add(self, incoming: Profile) -> MergeStats:
        """加入一个 Profile，返回本次插入/合并的块统计。"""
        if incoming.mode not in MODES:
            raise UnsupportedModeError(f"unknown coverage mode {incoming.mode!r}",
                                       file_name=incoming.file_name)
        with self._lock:
            if self._mode is not None and incoming.mode != self._mode:
                raise ModeMismatchError(
                    f"profile mode {incoming.mode!r} differs from run mode {self._mode!r}",
                    file_name=incoming.file_name)

            i = self._search(incoming.file_name)
            if i < len(self._profiles) and self._profiles[i].file_name == incoming.file_name:
                return merge_into(self._profiles[i], incoming)

            # 首个 Profile 同样经过合并引擎：排序并检查重叠，注册表独占新建的副本
            target = Profile(incoming.file_name, incoming.mode)
            stats = merge_into(target, incoming)
            self._profiles.insert(i, target)
            if self._mode is None:
                self._mode = incoming.mode
            return stats

    def add_all(self, profiles: Iterable[Profile]) -> MergeStats:
        total = MergeStats()
        for p in profiles:
            total = total + self.add(p)
        return total

    def get(self, file_name: str) -> Optional[Profile]:
        i = self._search(file_name)
        if i < len(self._profiles) and self._profiles[i].file_name == file_name:
            return self._profiles[i]
        return None

    def all(self) -> List[Profile]:
        """返回按文件名排序的 Profile 列表（副本）。"""
        return list(self._profiles)

    def __len__(self) -> int:
        return len(self._profiles)

    def __iter__(self) -> Iterator[Profile]:
        return iter(self.all())


__all__ = ["ProfileRegistry"]
