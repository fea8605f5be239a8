# seismopert/io/output.py
"""
输出目录：每次运行生成带时间戳的唯一目录
"""
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from .reader import PathLike

logger = logging.getLogger(__name__)


def temporary_string(now: Optional[datetime] = None) -> str:
    """时间戳字符串 yyyyMMddHHmmss"""
    return (now or datetime.now()).strftime("%Y%m%d%H%M%S")


def create_output_folder(parent: PathLike, name_root: str, tag: Optional[str] = None,
                         date_string: Optional[str] = None) -> Path:
    '''
    创建输出目录 <name_root>[_<tag>]_<时间戳>（无 tag 时为 <name_root><时间戳>）

    Raises:
        FileExistsError: 目录已存在
    '''
    date_string = date_string or temporary_string()
    name = f"{name_root}_{tag}_{date_string}" if tag else f"{name_root}{date_string}"
    folder = Path(parent) / name
    folder.mkdir(parents=True, exist_ok=False)
    logger.info("创建输出目录 %s", folder)
    return folder
