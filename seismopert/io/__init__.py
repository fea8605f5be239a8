# seismopert/io/__init__.py
"""文本文件读写：参数列表、多重网格设计、参考结构、扰动列表与输出目录"""
