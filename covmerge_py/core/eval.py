"""
评估组件：覆盖率统计

遍历合并后的 Profile，按语句数加权统计已覆盖/未覆盖语句，计算覆盖百分比，
并可把逐文件统计导出为 CSV。
"""
from __future__ import annotations

import csv
import math
from typing import Iterable, List, NamedTuple

from .profile import Profile


class CoverageSummary(NamedTuple):
    covered: int
    not_covered: int
    ratio: float

    @property
    def total(self) -> int:
        return self.covered + self.not_covered


class FileSummary(NamedTuple):
    file_name: str
    covered: int
    not_covered: int
    ratio: float


def _ratio(covered: int, not_covered: int) -> float:
    total = covered + not_covered
    if total == 0:
        return float("nan")
    return 100.0 * covered / total


def _count(profile: Profile):
    covered = not_covered = 0
    for b in profile.blocks:
        if b.count == 0:
            not_covered += b.num_stmt
        else:
            covered += b.num_stmt
    return covered, not_covered


def summarize(profiles: Iterable[Profile]) -> CoverageSummary:
    """统计所有 Profile 的语句覆盖。

    返回 (covered, not_covered, ratio)；没有任何语句时 ratio 为 NaN。
    """
    covered = not_covered = 0
    for p in profiles:
        c, n = _count(p)
        covered += c
        not_covered += n
    return CoverageSummary(covered, not_covered, _ratio(covered, not_covered))


def summarize_files(profiles: Iterable[Profile]) -> List[FileSummary]:
    rows: List[FileSummary] = []
    for p in profiles:
        c, n = _count(p)
        rows.append(FileSummary(p.file_name, c, n, _ratio(c, n)))
    return rows


def format_summary(summary: CoverageSummary) -> str:
    if math.isnan(summary.ratio):
        return "coverage: no data"
    return f"coverage: {summary.ratio:.2f}% of statements"


def export_summary_csv(rows: List[FileSummary], path: str) -> None:
    """把逐文件统计导出为 CSV，列为 `file,covered,not_covered,percent`。"""
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["file", "covered", "not_covered", "percent"])
        for r in rows:
            pct = "" if math.isnan(r.ratio) else f"{r.ratio:.2f}"
            writer.writerow([r.file_name, r.covered, r.not_covered, pct])


__all__ = ["CoverageSummary", "FileSummary", "summarize", "summarize_files",
           "format_summary", "export_summary_csv"]
