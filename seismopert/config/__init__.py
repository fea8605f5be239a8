# seismopert/config/__init__.py
from .builder import MapperConfig, MapperConfigBuilder, dump_config, load_config

__all__ = ["MapperConfig", "MapperConfigBuilder", "load_config", "dump_config"]
