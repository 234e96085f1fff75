"""YAML 编解码封装（规范化输出）。

所有解析与序列化均委托给 PyYAML：
- `parse` 使用 `yaml.safe_load`；
- `dump` 使用固定配置（块风格、2 空格缩进、保持键顺序、多行字符串用 `|` 字面块），
  对同一输入保证输出稳定；
- `normalize_newlines` 将字面转义的换行（反斜杠 + 字母）还原为真实换行。
"""

from __future__ import annotations

import re
from typing import Any, Mapping

import yaml

YAMLError = yaml.YAMLError

_ESCAPED_NEWLINE = re.compile(r"\\r\\n|\\r|\\n")


class CanonicalDumper(yaml.SafeDumper):
    """多行字符串输出为字面块、元组按列表输出、任意映射按普通映射输出的 Dumper。"""


def _represent_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


def _represent_mapping(dumper: yaml.SafeDumper, data: Mapping) -> yaml.MappingNode:
    return dumper.represent_dict(dict(data))


def _represent_other(dumper: yaml.SafeDumper, data: Any) -> yaml.Node:
    # Mapping 是抽象基类，不出现在 MRO 中，只能在兜底处判断
    if isinstance(data, Mapping):
        return _represent_mapping(dumper, data)
    return dumper.represent_undefined(data)


CanonicalDumper.add_representer(str, _represent_str)
CanonicalDumper.add_representer(tuple, yaml.SafeDumper.represent_list)
CanonicalDumper.add_multi_representer(dict, _represent_mapping)
CanonicalDumper.add_multi_representer(object, _represent_other)


def normalize_newlines(text: str) -> str:
    """将字面 `\\r\\n`、`\\r`、`\\n` 转义序列替换为真实换行符。

    参数:
        text: 原始文本（可能来自 textarea 或序列化存储）。

    返回值:
        str: 归一化后的文本；不含转义序列时原样返回。

    副作用:
        无。
    """

    return _ESCAPED_NEWLINE.sub("\n", text)


def parse(text: str) -> Any:
    """解析 YAML 文本。

    参数:
        text: YAML 文本。

    返回值:
        Any: 解析结果（映射、列表或标量）。

    副作用:
        无；语法错误抛出 `yaml.YAMLError`。
    """

    return yaml.safe_load(text)


def dump(data: Any) -> str:
    """按规范化配置序列化为 YAML 文本。

    参数:
        data: 待序列化的数据。

    返回值:
        str: YAML 文本（标量会带文档结束标记 `...`）。

    副作用:
        无；无法表示的类型抛出 `yaml.representer.RepresenterError`。
    """

    return yaml.dump(
        data,
        Dumper=CanonicalDumper,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
        indent=2,
    )
