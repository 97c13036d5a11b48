"""core 子模块：数据结构、合并引擎、注册表与统计。"""

from .errors import (
    MergeError,
    ModeMismatchError,
    UnsupportedModeError,
    ExtentConflictError,
    OverlapError,
    ProfileParseError,
)
from .profile import Block, Profile, MODE_SET, MODE_COUNT, MODE_ATOMIC, MODES
from .merge import MergeStats, merge_into
from .registry import ProfileRegistry
from .eval import CoverageSummary, summarize, format_summary

__all__ = [
    "MergeError",
    "ModeMismatchError",
    "UnsupportedModeError",
    "ExtentConflictError",
    "OverlapError",
    "ProfileParseError",
    "Block",
    "Profile",
    "MODE_SET",
    "MODE_COUNT",
    "MODE_ATOMIC",
    "MODES",
    "MergeStats",
    "merge_into",
    "ProfileRegistry",
    "CoverageSummary",
    "summarize",
    "format_summary",
]
