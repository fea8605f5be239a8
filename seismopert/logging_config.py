# seismopert/logging_config.py
"""
日志配置：为 seismopert 命名空间安装控制台（及可选文件）输出
"""
import logging
import sys
from typing import Optional, Union


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    配置 'seismopert' 包的 logger

    Args:
        level: 日志级别（logging.DEBUG / "INFO" 等）
        log_file: 可选，同时写入的日志文件

    Returns:
        包 logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"未知日志级别: {level}")

    logger = logging.getLogger("seismopert")
    logger.setLevel(level)
    # 重复调用时避免重复输出
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("日志初始化完成")
    return logger
