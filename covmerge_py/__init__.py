"""
covmerge_py

覆盖文件合并工具的 Python 包入口。

子模块：
- core: Profile 数据结构、合并引擎、注册表、覆盖率统计与监控
- instrumentation: 覆盖文件文本格式的读写
- utils: 配置

命令行入口见 `covmerge_py.merger`。
"""

__all__ = [
    "core",
    "instrumentation",
    "utils",
]

__version__ = "0.1.0"
