"""
配置模块

提供默认配置与从 JSON 文件加载配置的接口；命令行参数会覆盖这里的值。
"""
from __future__ import annotations

import json
from typing import Optional

DEFAULTS = {
    "jobs": 1,            # 并行解析输入文件的线程数（合并始终串行）
    "summary": True,      # 是否在 stderr 打印覆盖率汇总
    "output": None,       # 合并结果输出路径，None 表示 stdout
    "summary_csv": None,  # 逐文件覆盖率 CSV 路径
    "records": None,      # 合并记录 JSON 路径
}


def _check_value(path: str, key: str, value) -> None:
    if key == "jobs":
        # bool 是 int 的子类，需要单独排除
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ValueError(f"config {path}: 'jobs' must be a positive integer, got {value!r}")
    elif key == "summary":
        if not isinstance(value, bool):
            raise ValueError(f"config {path}: 'summary' must be true or false, got {value!r}")
    elif value is not None and not isinstance(value, str):
        raise ValueError(f"config {path}: '{key}' must be a path string or null, got {value!r}")


def load_config(path: Optional[str] = None) -> dict:
    """从 JSON 文件加载配置，叠加在 DEFAULTS 之上。

    path 为 None 时返回 DEFAULTS 的副本；出现未知键或值类型不符时抛出 ValueError。
    """
    cfg = DEFAULTS.copy()
    if path is None:
        return cfg
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"config {path}: expected a JSON object")
    unknown = sorted(set(data) - set(DEFAULTS))
    if unknown:
        raise ValueError(f"config {path}: unknown keys: {', '.join(unknown)}")
    for key, value in data.items():
        _check_value(path, key, value)
    cfg.update(data)
    return cfg
