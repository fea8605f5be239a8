# seismopert/cli.py
"""
命令行入口

    seismopert map config.yml          单模型出图
    seismopert map-set config.yml      批处理出图
    seismopert template map -o x.yml   生成配置模板
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from .config import default
from .config.builder import load_config
from .core.errors import SeismopertError
from .logging_config import setup_logging
from .workflow import ModelMapper, ModelSetMapper

logger = logging.getLogger(__name__)

_TEMPLATES = {
    "map": {
        "workPath": ".",
        "tag": None,
        "modelPath": "model.lst",
        "structureName": default.DEFAULT_STRUCTURE_NAME,
        "structurePath": None,
        "referenceStructureName": None,
        "multigridPath": None,
        "unknownsPath": None,
        "variableTypes": list(default.DEFAULT_VARIABLE_TYPES),
        "mapRegion": None,
        "scale": default.DEFAULT_SCALE,
        "boundaries": None,
        "displayLayers": None,
        "nPanelsPerRow": default.DEFAULT_PANELS_PER_ROW,
    },
    "map-set": {
        "workPath": ".",
        "tag": None,
        "resultPath": ".",
        "structureName": default.DEFAULT_STRUCTURE_NAME,
        "variableTypes": list(default.DEFAULT_VARIABLE_TYPES),
        "inverseMethods": list(default.DEFAULT_INVERSE_METHODS),
        "maxNum": default.DEFAULT_MAX_NUM,
        "mapRegion": None,
        "scale": default.DEFAULT_SCALE,
    },
}


def write_template(kind: str, path: Path) -> Path:
    """写出配置模板（None 值表示可选项）"""
    if path.exists():
        raise FileExistsError(f"{path} 已存在")
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(_TEMPLATES[kind], f, allow_unicode=True, sort_keys=False)
    return path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="seismopert", description="反演结果百分比扰动后处理")
    parser.add_argument("--log-level", default="INFO", help="日志级别 (DEBUG/INFO/WARNING)")
    parser.add_argument("--log-file", default=None, help="同时写入的日志文件")
    sub = parser.add_subparsers(dest="command", required=True)

    p_map = sub.add_parser("map", help="单模型出图")
    p_map.add_argument("config", type=Path, help="YAML 配置文件")

    p_set = sub.add_parser("map-set", help="批处理出图（反演方法 × 基向量数）")
    p_set.add_argument("config", type=Path, help="YAML 配置文件")

    p_tpl = sub.add_parser("template", help="生成配置模板")
    p_tpl.add_argument("kind", choices=sorted(_TEMPLATES))
    p_tpl.add_argument("-o", "--output", type=Path, default=None, help="输出路径")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    try:
        if args.command == "template":
            out = args.output or Path(f"{args.kind.replace('-', '_')}.yml")
            logger.info("已写出模板 %s", write_template(args.kind, out))
        elif args.command == "map":
            ModelMapper(load_config(args.config)).run()
        else:
            ModelSetMapper(load_config(args.config)).run()
    except (SeismopertError, OSError, ValueError) as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
