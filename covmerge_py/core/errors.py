"""
合并错误类型

合并过程中发现的所有不一致都以异常形式向上抛出，由顶层（`merger.main`）决定
如何终止；核心模块本身从不调用 `sys.exit`。

异常携带：
- kind: 错误类别字符串
- file_name: 出错的源文件标识
- blocks: 相互冲突的 Block 记录（便于诊断）
"""
from __future__ import annotations

from typing import Optional, Sequence


class MergeError(RuntimeError):
    """合并失败的基类。"""

    kind = "merge error"

    def __init__(self, message: str, file_name: Optional[str] = None,
                 blocks: Sequence = ()) -> None:
        self.file_name = file_name
        self.blocks = tuple(blocks)
        super().__init__(message)

    def __str__(self) -> str:
        msg = f"{self.kind}: {self.args[0]}"
        if self.file_name is not None:
            msg += f" [{self.file_name}]"
        for b in self.blocks:
            msg += f"\n  {b}"
        return msg


class ModeMismatchError(MergeError):
    kind = "mode mismatch"


class UnsupportedModeError(MergeError):
    kind = "unsupported mode"


class ExtentConflictError(MergeError):
    """同一起点、不同终点：同一区域在不同运行中被不同地插装。"""

    kind = "extent conflict"


class OverlapError(MergeError):
    """新插入的块与相邻块重叠。`side` 为 'before' 或 'after'。"""

    def __init__(self, message: str, side: str, file_name: Optional[str] = None,
                 blocks: Sequence = ()) -> None:
        self.side = side
        self.kind = f"overlap {side}"
        super().__init__(message, file_name=file_name, blocks=blocks)


class ProfileParseError(ValueError):
    """覆盖文件文本格式错误。"""

    def __init__(self, message: str, source: Optional[str] = None,
                 lineno: Optional[int] = None) -> None:
        self.source = source
        self.lineno = lineno
        if source is not None and lineno is not None:
            message = f"{source}:{lineno}: {message}"
        elif source is not None:
            message = f"{source}: {message}"
        super().__init__(message)


__all__ = [
    "MergeError",
    "ModeMismatchError",
    "UnsupportedModeError",
    "ExtentConflictError",
    "OverlapError",
    "ProfileParseError",
]
