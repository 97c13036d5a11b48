"""covmerge - 覆盖文件合并入口模块。
"""
from __future__ import annotations

import sys
import argparse
from concurrent.futures import ThreadPoolExecutor
from typing import Iterator, List, Optional, Tuple
from pathlib import Path

# 兼容性：允许直接用 `python merger.py` 运行而不报相对导入错误。
if __name__ == "__main__" and __package__ is None:
	import os as _os
	_this_dir = _os.path.dirname(_os.path.abspath(__file__))
	_pkg_parent = _os.path.dirname(_this_dir)
	if _pkg_parent not in sys.path:
		sys.path.insert(0, _pkg_parent)
	__package__ = "covmerge_py"


from .core.errors import MergeError, ProfileParseError
from .core.eval import export_summary_csv, format_summary, summarize, summarize_files
from .core.monitor import Monitor
from .core.profile import Profile
from .core.registry import ProfileRegistry
from .instrumentation.coverage import dump_profiles, parse_profiles
from .utils.config import load_config

EXIT_OK = 0
EXIT_MERGE = 1
EXIT_NOINPUT = 2
EXIT_PARSE = 3
EXIT_OUTPUT = 4
EXIT_CONFIG = 5


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
	parser = argparse.ArgumentParser(description="covmerge - merge coverage profiles from multiple test runs")
	parser.add_argument("profiles", nargs="+", metavar="profile", help="coverage profile files to merge")
	parser.add_argument("-o", "--output", help="write merged profile here instead of stdout")
	parser.add_argument("--summary-csv", help="write per-file coverage CSV to this path")
	parser.add_argument("--records", help="write per-input merge records (JSON) to this path")
	parser.add_argument("--config", help="JSON config file (command line flags take precedence)")
	parser.add_argument("-j", "--jobs", type=int, help="number of threads used to parse input files")
	parser.add_argument("-q", "--quiet", action="store_true", help="do not print the coverage summary line")
	return parser.parse_args(argv)


def _parse_inputs(paths: List[str], jobs: int) -> Iterator[Tuple[str, List[Profile]]]:
	"""按输入顺序产出 (path, profiles)；jobs > 1 时并行读取解析。"""
	if jobs > 1 and len(paths) > 1:
		with ThreadPoolExecutor(max_workers=jobs) as pool:
			yield from zip(paths, pool.map(parse_profiles, paths))
	else:
		for p in paths:
			yield p, parse_profiles(p)


def merge_files(paths: List[str], registry: ProfileRegistry, monitor: Optional[Monitor] = None,
				jobs: int = 1) -> ProfileRegistry:
	"""解析所有输入并按给定顺序逐个加入注册表（单一写入者）。"""
	for path, profiles in _parse_inputs(paths, jobs):
		before = len(registry)
		stats = registry.add_all(profiles)
		if monitor is not None:
			monitor.record_input(source=path, profiles=len(profiles),
								 blocks=sum(len(p.blocks) for p in profiles),
								 stats=stats, new_files=len(registry) - before)
	return registry


def _write_output(profiles: List[Profile], output: Optional[str]) -> None:
	if output is None:
		dump_profiles(profiles, sys.stdout)
		sys.stdout.flush()
		return
	out_path = Path(output)
	if out_path.parent and not out_path.parent.exists():
		out_path.parent.mkdir(parents=True, exist_ok=True)
	with open(out_path, "w", encoding="utf-8") as f:
		dump_profiles(profiles, f)


def main(argv: Optional[list] = None) -> int:
	"""解析参数、合并所有输入并输出结果，返回进程退出码。"""
	args = parse_args(argv)

	try:
		cfg = load_config(args.config)
	except (OSError, ValueError) as e:
		print(f"error: cannot load config: {e}", file=sys.stderr)
		return EXIT_CONFIG

	output = args.output if args.output is not None else cfg["output"]
	summary_csv = args.summary_csv if args.summary_csv is not None else cfg["summary_csv"]
	records_path = args.records if args.records is not None else cfg["records"]
	jobs = args.jobs if args.jobs is not None else int(cfg["jobs"])
	show_summary = bool(cfg["summary"]) and not args.quiet

	for p in args.profiles:
		if not Path(p).is_file():
			print(f"error: profile not found: {p}", file=sys.stderr)
			return EXIT_NOINPUT

	registry = ProfileRegistry()
	monitor = Monitor()
	try:
		merge_files(args.profiles, registry, monitor, jobs=jobs)
	except ProfileParseError as e:
		print(f"error: failed to parse profiles: {e}", file=sys.stderr)
		return EXIT_PARSE
	except MergeError as e:
		print(f"error: {e}", file=sys.stderr)
		return EXIT_MERGE
	except OSError as e:
		print(f"error: cannot read profile: {e}", file=sys.stderr)
		return EXIT_NOINPUT

	profiles = registry.all()
	try:
		_write_output(profiles, output)
		if summary_csv:
			export_summary_csv(summarize_files(profiles), summary_csv)
		if records_path:
			monitor.export_records(records_path)
	except OSError as e:
		print(f"error: cannot write output: {e}", file=sys.stderr)
		return EXIT_OUTPUT

	if show_summary:
		totals = monitor.totals()
		print(f"merged {len(args.profiles)} file(s): {len(profiles)} source file(s), "
			  f"{totals.inserted} block(s) inserted, {totals.combined} combined", file=sys.stderr)
		print(format_summary(summarize(profiles)), file=sys.stderr)

	return EXIT_OK


if __name__ == "__main__":
	sys.exit(main())
