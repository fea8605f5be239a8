# seismopert/__init__.py
"""
seismopert：层析成像反演结果的扰动后处理

将已知参数列表换算为相对一维参考结构的百分比扰动，并生成 GMT 出图脚本。
"""

__version__ = "0.1.0"
