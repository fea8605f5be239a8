# seismopert/io/reader.py
"""
信息文件读取：跳过空行与注释行
"""
from pathlib import Path
from typing import List, Union

PathLike = Union[str, Path]

COMMENT_CHARS = ("#", "!")
# 结构文件中 c/C 开头的行也视为注释
STRUCTURE_COMMENT_CHARS = COMMENT_CHARS + ("c", "C")


def read_information_lines(path: PathLike, includes_alphabet: bool = True) -> List[str]:
    '''
    读取信息文件的有效行

    Args:
        path: 文件路径
        includes_alphabet: 内容是否可能以字母开头；False 时 c/C 开头的行也是注释

    Returns:
        去除首尾空白后的有效行

    Raises:
        FileNotFoundError: 文件不存在
    '''
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"找不到文件: {path}")
    comments = COMMENT_CHARS if includes_alphabet else STRUCTURE_COMMENT_CHARS
    lines = []
    with open(path, "r", encoding="utf-8") as f:
        for raw in f:
            line = raw.strip()
            if not line or line.startswith(comments):
                continue
            lines.append(line)
    return lines
