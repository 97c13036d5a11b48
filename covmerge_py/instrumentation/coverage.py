"""覆盖文件文本格式的读写。

格式（与 `go test -coverprofile` 输出一致）：

    mode: <set|count|atomic>
    <file>:<startLine>.<startCol>,<endLine>.<endCol> <numStmt> <count>

`parse_profiles` 把文本解析为按文件名排序的 Profile 列表（块按起点排序，同一输入内
起止完全相同的重复块会被合并）；`dump_profiles` 按相同格式写回。
"""

from __future__ import annotations

import io
import re
from typing import Dict, Iterable, List, Optional, TextIO

from ..core.errors import ProfileParseError
from ..core.merge import combine_counts
from ..core.profile import Block, Profile

MODE_PREFIX = "mode: "

LINE_RE = re.compile(r"^(.+):([0-9]+)\.([0-9]+),([0-9]+)\.([0-9]+) ([0-9]+) ([0-9]+)$")


def _normalize(profile: Profile, source: Optional[str]) -> None:
    """排序并合并同一输入中重复出现的块。"""
    blocks = sorted(profile.blocks, key=lambda b: b.start)
    out: List[Block] = []
    for b in blocks:
        if out and out[-1].start == b.start and out[-1].end == b.end:
            last = out[-1]
            if last.num_stmt != b.num_stmt:
                raise ProfileParseError(
                    f"inconsistent NumStmt for {profile.file_name}:{b.start_line}.{b.start_col}: "
                    f"{last.num_stmt} != {b.num_stmt}", source=source)
            out[-1] = Block(last.start_line, last.start_col, last.end_line, last.end_col,
                            last.num_stmt, combine_counts(profile.mode, last.count, b.count, profile.file_name))
            continue
        out.append(b)
    profile.blocks = out


def parse_profiles_text(lines: Iterable[str], source: Optional[str] = None) -> List[Profile]:
    """从文本行解析 Profile 列表。"""
    files: Dict[str, Profile] = {}
    mode = None
    for lineno, raw in enumerate(lines, 1):
        line = raw.rstrip("\r\n")
        if not line.strip():
            continue
        if mode is None:
            if not line.startswith(MODE_PREFIX):
                raise ProfileParseError(f"bad mode line: {line!r}", source=source, lineno=lineno)
            mode = line[len(MODE_PREFIX):].strip()
            if not mode:
                raise ProfileParseError("empty mode", source=source, lineno=lineno)
            continue

        m = LINE_RE.match(line)
        if m is None:
            raise ProfileParseError(f"line {line!r} doesn't match expected format", source=source, lineno=lineno)
        fn = m.group(1)
        p = files.get(fn)
        if p is None:
            p = Profile(file_name=fn, mode=mode)
            files[fn] = p
        sl, sc, el, ec, ns, cnt = (int(m.group(k)) for k in range(2, 8))
        p.blocks.append(Block(sl, sc, el, ec, ns, cnt))

    profiles = [files[k] for k in sorted(files)]
    for p in profiles:
        _normalize(p, source)
    return profiles


def parse_profiles(path: str) -> List[Profile]:
    """读取并解析覆盖文件。I/O 错误原样抛出，非 UTF-8 内容视为格式错误。"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return parse_profiles_text(f, source=path)
    except UnicodeDecodeError as e:
        raise ProfileParseError(f"not valid UTF-8 text: {e.reason} at byte {e.start}", source=path) from e


def dump_profiles(profiles: List[Profile], out: TextIO) -> None:
    """按注册表顺序写出；没有 Profile 时不写任何内容（不输出空的 mode 行）。"""
    if not profiles:
        return
    out.write(f"{MODE_PREFIX}{profiles[0].mode}\n")
    for p in profiles:
        for b in p.blocks:
            out.write(b.format(p.file_name) + "\n")


def dumps_profiles(profiles: List[Profile]) -> str:
    buf = io.StringIO()
    dump_profiles(profiles, buf)
    return buf.getvalue()


__all__ = ["parse_profiles", "parse_profiles_text", "dump_profiles", "dumps_profiles"]
