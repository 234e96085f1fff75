"""外部协作者的端口定义（Protocol）。

Storage 只依赖这些结构化接口，具体实现（本地文件系统、消息队列、校验器）
由调用方通过构造参数注入，便于在单测中替换为内存实现或 mock。
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Protocol

LoggerFactory = Callable[[str], logging.Logger]


class FileSystem(Protocol):
    """文件系统端口。

    `read_text` 与 `write_atomic` 失败时抛出 `OSError`（或解码错误）；
    `realpath` 无法解析时返回 None。
    """

    def exists(self, path: str) -> bool: ...

    def is_readable(self, path: str) -> bool: ...

    def is_writable(self, path: str) -> bool: ...

    def read_text(self, path: str) -> str: ...

    def write_atomic(self, path: str, data: str) -> None: ...

    def realpath(self, path: str) -> Optional[str]: ...

    def basename(self, path: str) -> str: ...


class SchemeDetector(Protocol):
    """判断路径是否使用 `scheme://` 形式的虚拟/流式前缀。"""

    def has_scheme(self, path: str) -> bool: ...


class Messenger(Protocol):
    """面向终端用户的消息通道。"""

    def add_error(self, message: str) -> None: ...


class Validator(Protocol):
    """YAML 校验器端口。"""

    def check_yaml(self, content: Any) -> bool: ...

    def get_result(self) -> Any: ...
