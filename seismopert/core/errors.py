# seismopert/core/errors.py
"""
seismopert 异常类型定义
"""


class SeismopertError(Exception):
    """seismopert 所有异常的基类"""


class ConfigurationError(SeismopertError, ValueError):
    """配置或输入文件不合法（缺失必需文件、未知结构名、多重网格设计冲突等）"""


class OutOfRangeError(SeismopertError, ValueError):
    """半径超出参考结构的定义范围"""
