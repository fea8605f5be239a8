# seismopert/config/default.py

"""
默认配置模块：为 seismopert 提供默认参数。
用户可通过 MapperConfigBuilder 或 YAML 配置文件显式覆盖这些值。
"""

# ========================================
# 🌍 参考结构与物理量
# ========================================
DEFAULT_STRUCTURE_NAME = "PREM"
DEFAULT_VARIABLE_TYPES = ["Vs"]

# ========================================
# 🔁 批处理（反演方法 × 基向量数）
# ========================================
DEFAULT_INVERSE_METHODS = ["CG"]
DEFAULT_MAX_NUM = 20
UNKNOWNS_FILE_NAME = "unknowns.lst"

# ========================================
# 🗺️ 地图区域与 GMT 脚本
# ========================================
DEFAULT_SCALE = 3.0                # 色标范围 ±scale (%)
DEFAULT_PANELS_PER_ROW = 4
MAP_SIZE_INTERVAL = 5              # 区域边界取整到该间隔 (deg)
MAP_RIM = 5                        # 区域四周额外留白 (deg)
GRID_INTERVAL = 5                  # 无法由位置确定时的 xyz2grd 网格间隔 (deg)
SMOOTHING_FACTOR = 10              # grdsample 间隔约为网格间隔的 1/10
PANEL_WIDTH = 21
PANEL_HEIGHT = 20

# ========================================
# 📁 输出
# ========================================
MODEL_MAP_ROOT = "modelMap"
MODEL_SET_MAP_ROOT = "modelMaps"
CPT_FILE_NAME = "cp_master.cpt"
