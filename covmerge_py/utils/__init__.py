"""utils 子模块：配置等公共工具。"""
