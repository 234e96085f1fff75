"""本地文件系统与 scheme 识别实现。

`LocalFileSystem` 支持 `scheme://相对路径` 形式的虚拟路径：scheme 通过构造参数
映射到本地基础目录（例如 `{"public": "/var/www/files"}`），`realpath` 负责解析。
写入采用“同目录临时文件 + os.replace”，读者不会看到写了一半的文件。
"""

from __future__ import annotations

import os
import re
import shutil
import tempfile
from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple, Union

_SCHEME = re.compile(r"^(?P<scheme>[A-Za-z][A-Za-z0-9+.-]*)://(?P<target>.*)$", re.S)


def split_scheme(path: str) -> Tuple[Optional[str], str]:
    """拆分 `scheme://target`。

    参数:
        path: 任意路径字符串。

    返回值:
        (scheme, target)：无 scheme 时为 `(None, path)`。

    副作用:
        无。
    """

    match = _SCHEME.match(path)
    if match is None:
        return None, path
    return match.group("scheme"), match.group("target")


class StreamSchemeDetector:
    """仅按语法识别 `scheme://` 前缀，不关心 scheme 是否已注册。"""

    def has_scheme(self, path: str) -> bool:
        return split_scheme(path)[0] is not None


class LocalFileSystem:
    """基于 `os`/`pathlib` 的文件系统端口实现。

    参数:
        schemes: scheme 名 → 本地基础目录 的映射。
    """

    def __init__(self, schemes: Optional[Mapping[str, Union[str, Path]]] = None) -> None:
        self.schemes: Dict[str, Path] = {
            name: Path(base).expanduser() for name, base in (schemes or {}).items()
        }

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def is_readable(self, path: str) -> bool:
        return os.access(path, os.R_OK)

    def is_writable(self, path: str) -> bool:
        return os.access(path, os.W_OK)

    def read_text(self, path: str) -> str:
        return Path(path).read_text(encoding="utf-8")

    def write_atomic(self, path: str, data: str) -> None:
        """以替换方式写入文件，目标已存在时保留其权限位。

        参数:
            path: 目标文件路径。
            data: 文本内容（UTF-8）。

        返回值:
            None。

        副作用:
            在目标目录创建临时文件并 `os.replace` 到目标；失败时清理临时文件
            并重新抛出 `OSError`。
        """

        target = Path(path)
        fd, tmp_name = tempfile.mkstemp(
            dir=str(target.parent), prefix=f".{target.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(data)
            if target.is_file():
                shutil.copymode(str(target), tmp_name)
            os.replace(tmp_name, str(target))
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def realpath(self, path: str) -> Optional[str]:
        """解析为规范绝对路径；未注册的 scheme 返回 None。"""

        scheme, target = split_scheme(path)
        if scheme is None:
            return os.path.realpath(path)
        base = self.schemes.get(scheme)
        if base is None:
            return None
        return os.path.realpath(str(base / target.lstrip("/")))

    def basename(self, path: str) -> str:
        return os.path.basename(path)
