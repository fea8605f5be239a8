# seismopert/workflow/__init__.py
"""运行流程：单模型出图（ModelMapper）与批处理（ModelSetMapper）"""

from .model_mapper import ModelMapper
from .model_set_mapper import ModelSetMapper

__all__ = ["ModelMapper", "ModelSetMapper"]
