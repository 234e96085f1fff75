"""YAML 文件存储：带校验、错误码与日志上报的读写服务。

每次 `load`/`save` 先重置状态，再按固定顺序检查路径、文件存在性与权限，
内容校验委托给注入的校验器。所有失败都经由 `_fail` 统一出口：记录 ERROR 日志、
按需推送用户消息、保存 `OperationInfo` 并返回 False。

注意：实例的 `absolute_path`/`filename`/`info` 会被每次调用覆盖，
同一实例不可并发使用。
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Any, Mapping, Optional, Sequence, Union

from . import codec
from .filesystem import LocalFileSystem, StreamSchemeDetector
from .messenger import MemoryMessenger
from .ports import FileSystem, LoggerFactory, Messenger, SchemeDetector, Validator
from .validator import YamlValidator

if TYPE_CHECKING:
    from .settings import ToolkitSettings

PathLike = Union[str, "os.PathLike[str]"]


class StorageCode(IntEnum):
    """存储操作错误码。"""

    SUCCESS = 0
    EMPTY_PATH = 1
    FILE_NOT_FOUND = 2
    FILE_NOT_READABLE = 3
    FILE_NOT_WRITABLE = 4
    READ_FAILED = 5
    EMPTY_FILE = 6
    NO_YAML_DATA = 7
    WRITE_FAILED = 8
    NO_DATA = 9


class Stage(str, Enum):
    LOAD = "load"
    SAVE = "save"


_STAGE_ACTIONS = {Stage.LOAD: "Loading", Stage.SAVE: "Saving"}


@dataclass(frozen=True)
class OperationInfo:
    """最近一次 load/save 的结果。"""

    error_code: int
    error_text: str


def is_empty_data(data: Any) -> bool:
    """判断待保存数据是否为空（None、空白字符串、空映射/列表）。"""

    if data is None:
        return True
    if isinstance(data, str):
        return not data.strip()
    if isinstance(data, (Mapping, Sequence)):
        return not data
    return False


class YamlStorage:
    """YAML 文件读写服务。

    参数:
        file_system: 文件系统端口。
        validator: 校验器端口。
        scheme_detector: scheme 识别端口。
        messenger: 用户消息通道（verbose 模式下使用）。
        logger_factory: 日志通道工厂，默认 `logging.getLogger`。
        message_break: 组合错误消息时使用的换行标记。
    """

    def __init__(
        self,
        file_system: FileSystem,
        validator: Validator,
        scheme_detector: SchemeDetector,
        messenger: Messenger,
        logger_factory: LoggerFactory = logging.getLogger,
        message_break: str = "<br>",
    ) -> None:
        self.file_system = file_system
        self.validator = validator
        self.scheme_detector = scheme_detector
        self.messenger = messenger
        self.logger_factory = logger_factory
        self.message_break = message_break

        self.absolute_path = ""
        self.filename = ""
        self._info: Optional[OperationInfo] = None
        self._logger: Optional[logging.Logger] = None
        self._verbose = False
        self._stage = Stage.LOAD

    @classmethod
    def from_settings(cls, settings: "ToolkitSettings") -> "YamlStorage":
        """按配置装配默认端口实现。

        参数:
            settings: 工具包配置。

        返回值:
            YamlStorage: 使用本地文件系统、内存消息队列与标准日志的实例。

        副作用:
            无。
        """

        return cls(
            file_system=LocalFileSystem(settings.schemes),
            validator=YamlValidator(),
            scheme_detector=StreamSchemeDetector(),
            messenger=MemoryMessenger(),
            message_break=settings.message_break,
        )

    def get_info(self) -> Optional[OperationInfo]:
        """返回最近一次操作的错误码与文本。"""

        return self._info

    def load(
        self, path: PathLike, logger_channel: str = "default", verbose: bool = False
    ) -> Any:
        """读取并校验 YAML 文件。

        参数:
            path: 文件路径，支持 `scheme://` 形式。
            logger_channel: 失败时写入的日志通道。
            verbose: 为 True 时失败消息同时推送到用户消息通道。

        返回值:
            解析后的数据；失败时返回 False，细节见 `get_info`。

        副作用:
            读取文件系统；失败时写日志。
        """

        self._reset(logger_channel, verbose, Stage.LOAD)
        file_path = os.fspath(path)
        if not file_path:
            return self._fail(StorageCode.EMPTY_PATH, "Empty file path provided")

        absolute = self._prepare_path(file_path)
        if not self._check_exists(absolute) or not self._check_readable(absolute):
            return False
        return self._parse_file(absolute)

    def save(
        self,
        path: PathLike,
        data: Any,
        logger_channel: str = "default",
        verbose: bool = False,
    ) -> bool:
        """校验数据并写入已存在的 YAML 文件。

        参数:
            path: 目标文件路径，文件必须已存在且可写。
            data: 结构化映射、字符串列表或原始 YAML 文本。
            logger_channel: 失败时写入的日志通道。
            verbose: 为 True 时失败消息同时推送到用户消息通道。

        返回值:
            bool: 是否写入成功。

        副作用:
            校验通过时以替换方式写入规范化 YAML 文本；失败时写日志。
        """

        self._reset(logger_channel, verbose, Stage.SAVE)
        file_path = os.fspath(path)
        if not file_path:
            return self._fail(StorageCode.EMPTY_PATH, "Empty file path provided")
        if is_empty_data(data):
            return self._fail(StorageCode.NO_DATA, "No data provided")

        absolute = self._prepare_path(file_path)
        if not self._check_exists(absolute) or not self._check_writable(absolute):
            return False

        if isinstance(data, str):
            data = codec.normalize_newlines(data)
        if not self.validator.check_yaml(data):
            details = self.validator.get_result()
            return self._fail(details.error_code, self._format_validation_error(details))
        return self._write_file(absolute, self.validator.get_result().yaml)

    def _reset(self, logger_channel: str, verbose: bool, stage: Stage) -> None:
        self._info = None
        self.absolute_path = ""
        self.filename = ""
        self._logger = self.logger_factory(logger_channel)
        self._verbose = verbose
        self._stage = stage

    def _prepare_path(self, file_path: str) -> str:
        if self.scheme_detector.has_scheme(file_path):
            file_path = self.file_system.realpath(file_path) or file_path
        absolute = file_path
        if self.file_system.exists(file_path):
            absolute = self.file_system.realpath(file_path) or file_path
        self.absolute_path = absolute
        self.filename = self.file_system.basename(absolute)
        return absolute

    def _check_exists(self, absolute: str) -> bool:
        if not self.file_system.exists(absolute):
            return self._fail(StorageCode.FILE_NOT_FOUND, f"File {self.filename} not found")
        return True

    def _check_readable(self, absolute: str) -> bool:
        if not self.file_system.is_readable(absolute):
            return self._fail(
                StorageCode.FILE_NOT_READABLE, f"File {self.filename} is not readable"
            )
        return True

    def _check_writable(self, absolute: str) -> bool:
        if not self.file_system.is_writable(absolute):
            return self._fail(
                StorageCode.FILE_NOT_WRITABLE, f"File {self.filename} is not writable"
            )
        return True

    def _parse_file(self, absolute: str) -> Any:
        try:
            content = self.file_system.read_text(absolute)
        except (OSError, UnicodeDecodeError):
            return self._fail(
                StorageCode.READ_FAILED, f"The file {self.filename} could not be read"
            )

        if not content.strip():
            return self._fail(StorageCode.EMPTY_FILE, f"The file {self.filename} is empty")

        content = codec.normalize_newlines(content)
        if not content.strip():
            return self._fail(
                StorageCode.NO_YAML_DATA, f"File {self.filename} has no YAML data"
            )

        if not self.validator.check_yaml(content):
            details = self.validator.get_result()
            return self._fail(details.error_code, self._format_validation_error(details))

        self._info = OperationInfo(StorageCode.SUCCESS, "YAML validation passed.")
        return self.validator.get_result().parsed

    def _write_file(self, absolute: str, yaml_text: str) -> bool:
        try:
            self.file_system.write_atomic(absolute, yaml_text)
        except OSError:
            return self._fail(
                StorageCode.WRITE_FAILED, f"The file {self.filename} cannot be written."
            )
        self._info = OperationInfo(StorageCode.SUCCESS, "File saved successfully.")
        return True

    def _fail(self, code: int, message: str) -> bool:
        """统一失败出口：写日志、按需推送消息、记录结果并返回 False。"""

        if self._logger is not None:
            self._logger.error("%s\n\tFile: %s", message, self.absolute_path)
        if self._verbose:
            self.messenger.add_error(message)
        self._info = OperationInfo(code, message)
        return False

    def _format_validation_error(self, details: Any) -> str:
        message = "\n".join(
            [
                details.error,
                f"{_STAGE_ACTIONS[self._stage]} the file: {self.filename}",
                details.error_description,
            ]
        )
        return message.replace("\n", self.message_break)
