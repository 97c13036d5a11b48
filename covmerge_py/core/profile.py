"""
覆盖数据结构

- Block: 一个插装区域（起止位置 + 语句数 + 执行计数），值对象，不可变；
- Profile: 一个源文件的全部覆盖数据（文件名、计数模式、按起点排序的块列表）。
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

MODE_SET = "set"
MODE_COUNT = "count"
MODE_ATOMIC = "atomic"

MODES = (MODE_SET, MODE_COUNT, MODE_ATOMIC)


@dataclass(frozen=True)
class Block:
    """一个插装区域。

    字段：
      start_line/start_col/end_line/end_col: 1 起始的行列位置
      num_stmt: 区域内语句数（插装时确定，合并时不累加）
      count: 执行计数，语义取决于 mode
    """

    start_line: int
    start_col: int
    end_line: int
    end_col: int
    num_stmt: int
    count: int

    @property
    def start(self) -> Tuple[int, int]:
        return (self.start_line, self.start_col)

    @property
    def end(self) -> Tuple[int, int]:
        return (self.end_line, self.end_col)

    def format(self, file_name: str) -> str:
        return (f"{file_name}:{self.start_line}.{self.start_col},"
                f"{self.end_line}.{self.end_col} {self.num_stmt} {self.count}")

    def __str__(self) -> str:
        return (f"{self.start_line}.{self.start_col},{self.end_line}.{self.end_col}"
                f" stmts={self.num_stmt} count={self.count}")


@dataclass
class Profile:
    file_name: str
    mode: str
    blocks: List[Block] = field(default_factory=list)


__all__ = ["Block", "Profile", "MODE_SET", "MODE_COUNT", "MODE_ATOMIC", "MODES"]
