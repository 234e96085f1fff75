"""测试全局配置与替身实现。

将 `src` 目录加入 `sys.path`，以便在未打包安装时可直接导入包；
同时提供内存文件系统替身（实现 `FileSystem` 端口），用于权限与读写失败场景，
避免依赖运行用户（如 root）对真实文件权限的处理方式。
"""

from __future__ import annotations

import posixpath
import sys
from pathlib import Path
from typing import Dict, Optional, Set

import pytest

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from yaml_toolkit.filesystem import StreamSchemeDetector, split_scheme  # noqa: E402
from yaml_toolkit.messenger import MemoryMessenger  # noqa: E402
from yaml_toolkit.storage import YamlStorage  # noqa: E402
from yaml_toolkit.validator import YamlValidator  # noqa: E402


class FakeFileSystem:
    """内存文件系统，实现 `FileSystem` 端口。

    属性:
        files: 路径 → 内容。
        unreadable/unwritable: 无读/写权限的路径集合。
        broken_reads/broken_writes: 读/写时抛出 OSError 的路径集合。
        schemes: scheme → 基础目录（纯字符串拼接）。
        writes: 成功写入的 (路径, 内容) 记录。
    """

    def __init__(self) -> None:
        self.files: Dict[str, str] = {}
        self.unreadable: Set[str] = set()
        self.unwritable: Set[str] = set()
        self.broken_reads: Set[str] = set()
        self.broken_writes: Set[str] = set()
        self.schemes: Dict[str, str] = {}
        self.writes: list = []
        self.calls: list = []

    def exists(self, path: str) -> bool:
        self.calls.append(("exists", path))
        return path in self.files

    def is_readable(self, path: str) -> bool:
        return path not in self.unreadable

    def is_writable(self, path: str) -> bool:
        return path not in self.unwritable

    def read_text(self, path: str) -> str:
        if path in self.broken_reads:
            raise OSError("I/O error")
        return self.files[path]

    def write_atomic(self, path: str, data: str) -> None:
        if path in self.broken_writes:
            raise OSError("disk full")
        self.files[path] = data
        self.writes.append((path, data))

    def realpath(self, path: str) -> Optional[str]:
        self.calls.append(("realpath", path))
        scheme, target = split_scheme(path)
        if scheme is None:
            return path
        base = self.schemes.get(scheme)
        if base is None:
            return None
        return posixpath.join(base, target)

    def basename(self, path: str) -> str:
        return posixpath.basename(path)


@pytest.fixture
def fake_fs() -> FakeFileSystem:
    return FakeFileSystem()


@pytest.fixture
def messenger() -> MemoryMessenger:
    return MemoryMessenger()


@pytest.fixture
def validator() -> YamlValidator:
    return YamlValidator()


@pytest.fixture
def fake_storage(fake_fs: FakeFileSystem, messenger: MemoryMessenger) -> YamlStorage:
    """基于内存文件系统与真实校验器的存储服务。"""

    return YamlStorage(
        file_system=fake_fs,
        validator=YamlValidator(),
        scheme_detector=StreamSchemeDetector(),
        messenger=messenger,
    )
