# seismopert/visualization/__init__.py
"""GMT 绘图脚本生成（只生成脚本文本，不执行绘图）"""
