"""YAML Toolkit：YAML 校验与文件读写工具包。

该包包含输入分类校验器（`YamlValidator`）、带错误码与日志上报的文件存储
（`YamlStorage`），以及对应的文件系统/消息端口与命令行入口。
"""

from .storage import OperationInfo, StorageCode, YamlStorage
from .validator import ValidationResult, ValidatorCode, YamlValidator

__all__ = [
    "__version__",
    "get_version",
    "OperationInfo",
    "StorageCode",
    "ValidationResult",
    "ValidatorCode",
    "YamlStorage",
    "YamlValidator",
]

__version__ = "0.1.0"


def get_version() -> str:
    """返回当前包版本号。

    返回值:
        str: 版本号字符串，例如 "0.1.0"。
    副作用:
        无副作用，仅读取内置常量。
    """

    return __version__
