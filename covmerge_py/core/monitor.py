"""
合并过程监控组件

功能：
- 记录每个输入文件的合并元数据（时间戳、Profile 数、块数、新插入/合并的块数等）
- 汇总整个运行的插入/合并统计
- 导出为 JSON 供后续分析
"""
from __future__ import annotations

import json
import os
import time
from dataclasses import dataclass, asdict
from typing import List, Optional

from .merge import MergeStats


@dataclass
class MergeRecord:
    timestamp: float
    source: str
    profiles: int
    blocks: int
    inserted: int
    combined: int
    new_files: int


class Monitor:
    """监控器：维护每个输入文件的合并记录。"""

    def __init__(self) -> None:
        self.records: List[MergeRecord] = []

    def record_input(self, source: str, profiles: int, blocks: int,
                     stats: MergeStats, new_files: int = 0) -> MergeRecord:
        """记录一个输入文件的合并结果，返回创建的 MergeRecord。"""
        rec = MergeRecord(timestamp=time.time(), source=source,
                          profiles=profiles, blocks=blocks,
                          inserted=stats.inserted, combined=stats.combined,
                          new_files=new_files)
        self.records.append(rec)
        return rec

    def totals(self) -> MergeStats:
        total = MergeStats()
        for r in self.records:
            total = total + MergeStats(r.inserted, r.combined)
        return total

    def export_records(self, path: str) -> str:
        """把记录导出为 JSON 文件，返回文件路径。"""
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump([asdict(r) for r in self.records], f, ensure_ascii=False, indent=2)
        return path


__all__ = ["Monitor", "MergeRecord"]
