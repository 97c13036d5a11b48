import os
import sys

# 允许在未安装包的情况下直接运行 pytest
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
