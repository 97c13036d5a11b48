"""instrumentation 子模块：覆盖文件格式的解析与输出。"""
