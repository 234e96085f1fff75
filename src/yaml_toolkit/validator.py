"""YAML 校验器：输入分类与统一结果记录。

`classify` 将任意输入归入一个 `InputKind`（空、片段列表、结构化数据、原始文本、
标量、不支持类型），`YamlValidator.check_yaml` 按类别分派到对应的校验策略，
并以 `ValidationResult` 保存最近一次结果。

示例:
    validator = YamlValidator()
    validator.check_yaml("key: value")  # True
    validator.get_result().parsed       # {"key": "value"}
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from enum import Enum, IntEnum
from typing import Any, Callable, Dict, List, Mapping, Optional

from . import codec

logger = logging.getLogger(__name__)

ROUND_TRIP_MISMATCH = "Dumped YAML does not match the original array"


class ValidatorCode(IntEnum):
    """校验器错误码。"""

    SUCCESS = 0
    VALIDATION_FAILED = 10
    SCALAR_VALUE = 11
    PARSE_FAILED = 12
    UNSUPPORTED_TYPE = 13
    NO_DATA = 14


class InputKind(str, Enum):
    """输入分类标签。"""

    EMPTY = "empty"
    SNIPPETS = "snippets"
    STRUCTURE = "structure"
    TEXT = "text"
    SCALAR = "scalar"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class ClassifiedInput:
    """分类后的输入。

    属性:
        kind: 分类标签。
        value: 供对应策略使用的值（文本已做换行归一化）。
        origin: 原始输入的类型名，用于 `validation_type` 描述。
    """

    kind: InputKind
    value: Any
    origin: str


@dataclass
class SnippetReport:
    """片段列表中单个元素的校验记录。"""

    index: int
    valid: bool
    yaml: str
    parsed: Any = None
    error: Optional[str] = None


@dataclass
class ValidationResult:
    """一次校验的完整结果。

    属性:
        passed: 是否通过（对外字典键为 `pass`）。
        validation_type: 分类描述 + 原始输入类型。
        error_code: `ValidatorCode` 数值，0 表示成功。
        error: 简短错误标签。
        error_description: 详细原因。
        parsed: 解析后的结构，仅在通过时非空。
        yaml: 规范化 YAML 文本。
        debug: 原始输入或逐项明细，仅供诊断。
    """

    passed: bool
    validation_type: str
    error_code: int
    error: str
    error_description: str = ""
    parsed: Any = None
    yaml: Optional[str] = None
    debug: Any = field(default=None, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        """返回与外部约定一致的字典（键 `pass` 替代 `passed`）。"""

        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["pass"] = data.pop("passed")
        return data


def classify(content: Any) -> ClassifiedInput:
    """对输入做一次显式分类。

    参数:
        content: 任意输入（None、字符串、字符串列表、映射、标量等）。

    返回值:
        ClassifiedInput: 带标签的输入；字符串在分类前已做换行归一化。

    副作用:
        无。
    """

    origin = type(content).__name__
    if content is None:
        return ClassifiedInput(InputKind.EMPTY, content, origin)
    if isinstance(content, str):
        text = codec.normalize_newlines(content)
        if not text.strip():
            return ClassifiedInput(InputKind.EMPTY, content, origin)
        return ClassifiedInput(InputKind.TEXT, text, origin)
    if isinstance(content, Mapping):
        kind = InputKind.STRUCTURE if content else InputKind.EMPTY
        return ClassifiedInput(kind, content, origin)
    if isinstance(content, (list, tuple)):
        if not content:
            return ClassifiedInput(InputKind.EMPTY, content, origin)
        if all(isinstance(item, str) for item in content):
            return ClassifiedInput(InputKind.SNIPPETS, list(content), origin)
        return ClassifiedInput(InputKind.STRUCTURE, list(content), origin)
    if isinstance(content, (bool, int, float)):
        return ClassifiedInput(InputKind.SCALAR, content, origin)
    return ClassifiedInput(InputKind.UNSUPPORTED, content, origin)


def _plain(value: Any) -> Any:
    """把任意映射递归转为 dict、序列转为 list，便于生成指纹。"""

    if isinstance(value, Mapping):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


def _fingerprint(value: Any) -> Optional[str]:
    """JSON 指纹：键顺序与数值/布尔类型均参与比较；不可序列化时返回 None。"""

    try:
        return json.dumps(_plain(value), ensure_ascii=False, default=str)
    except (TypeError, ValueError, RecursionError):
        return None


class YamlValidator:
    """容错的 YAML 校验器。

    接受原始 YAML 文本、YAML 片段列表、结构化映射与标量；每次调用完全替换
    上一次的结果，调用之间不共享任何状态。
    """

    def __init__(self) -> None:
        self._result: Optional[ValidationResult] = None
        self._handlers: Dict[InputKind, Callable[[ClassifiedInput], ValidationResult]] = {
            InputKind.EMPTY: self._check_empty,
            InputKind.SNIPPETS: self._check_snippets,
            InputKind.STRUCTURE: self._check_structure,
            InputKind.TEXT: self._check_text,
            InputKind.SCALAR: self._check_scalar,
            InputKind.UNSUPPORTED: self._check_unsupported,
        }

    def check_yaml(self, content: Any) -> bool:
        """校验任意输入。

        参数:
            content: 原始 YAML 文本、字符串列表、映射或标量。

        返回值:
            bool: 是否通过；详细信息通过 `get_result` 获取。

        副作用:
            替换内部保存的最近一次结果。
        """

        item = classify(content)
        logger.debug("checking %s input (origin %s)", item.kind.value, item.origin)
        self._result = self._handlers[item.kind](item)
        return self._result.passed

    def get_result(self) -> Optional[ValidationResult]:
        """返回最近一次校验结果；尚未校验时为 None。"""

        return self._result

    def _check_empty(self, item: ClassifiedInput) -> ValidationResult:
        return ValidationResult(
            passed=False,
            validation_type="Empty input",
            error_code=ValidatorCode.NO_DATA,
            error="No data to validate",
            error_description="YAML Validator received empty or null data",
            debug=item.value,
        )

    def _check_text(self, item: ClassifiedInput) -> ValidationResult:
        try:
            data = codec.parse(item.value)
        except (codec.YAMLError, RecursionError) as exc:
            return self._parse_failure(item, str(exc))
        decoded = ClassifiedInput(item.kind, data, item.origin)
        if isinstance(data, (Mapping, list)):
            return self._check_structure(decoded)
        return self._check_scalar(decoded)

    def _check_snippets(self, item: ClassifiedInput) -> ValidationResult:
        reports: List[SnippetReport] = []
        for index, snippet in enumerate(item.value):
            try:
                parsed = codec.parse(snippet)
            except (codec.YAMLError, RecursionError) as exc:
                reports.append(SnippetReport(index, False, snippet, error=str(exc)))
            else:
                reports.append(SnippetReport(index, True, snippet, parsed=parsed))

        debug = [asdict(r) for r in reports]
        validation_type = f"List of snippets from input {item.origin}"
        if all(r.valid for r in reports):
            return ValidationResult(
                passed=True,
                validation_type=validation_type,
                error_code=ValidatorCode.SUCCESS,
                error="YAML validation passed",
                parsed=list(item.value),
                yaml=codec.dump(list(item.value)),
                debug=debug,
            )
        return ValidationResult(
            passed=False,
            validation_type=validation_type,
            error_code=ValidatorCode.VALIDATION_FAILED,
            error="YAML validation failed",
            error_description="\n".join(r.error or "" for r in reports if not r.valid),
            yaml="\n".join(item.value),
            debug=debug,
        )

    def _check_structure(self, item: ClassifiedInput) -> ValidationResult:
        data = item.value
        try:
            text = codec.dump(data)
            reparsed = codec.parse(text)
        except (codec.YAMLError, RecursionError) as exc:
            return self._parse_failure(item, str(exc))

        validation_type = f"Structured data from input {item.origin}"
        expected = _fingerprint(data)
        if expected is None or _fingerprint(reparsed) != expected:
            return ValidationResult(
                passed=False,
                validation_type=validation_type,
                error_code=ValidatorCode.VALIDATION_FAILED,
                error="YAML validation failed",
                error_description=ROUND_TRIP_MISMATCH,
                yaml=text,
                debug={"original": data, "reparsed": reparsed},
            )
        return ValidationResult(
            passed=True,
            validation_type=validation_type,
            error_code=ValidatorCode.SUCCESS,
            error="YAML validation passed",
            parsed=reparsed,
            yaml=text,
            debug=data,
        )

    def _check_scalar(self, item: ClassifiedInput) -> ValidationResult:
        return ValidationResult(
            passed=False,
            validation_type=f"Scalar from input {item.origin}",
            error_code=ValidatorCode.SCALAR_VALUE,
            error="Scalar value",
            error_description="Scalar values are not evaluated",
            yaml=codec.dump(item.value),
            debug=item.value,
        )

    def _check_unsupported(self, item: ClassifiedInput) -> ValidationResult:
        return ValidationResult(
            passed=False,
            validation_type=f"Without validation from input {item.origin}",
            error_code=ValidatorCode.UNSUPPORTED_TYPE,
            error="Unsupported input type",
            error_description=f"Input of type {item.origin} cannot be validated",
            debug=item.value,
        )

    def _parse_failure(self, item: ClassifiedInput, message: str) -> ValidationResult:
        return ValidationResult(
            passed=False,
            validation_type=f"Without validation from input {item.origin}",
            error_code=ValidatorCode.PARSE_FAILED,
            error="Conversion to yaml failed",
            error_description=message,
            debug=item.value,
        )
