"""工具包配置 Schema 与加载器（严格校验）。

配置来源优先级：显式传入的文件路径 → 环境变量 `YAML_TOOLKIT_CONFIG` → 默认值。
文件内出现未知字段时抛出 `pydantic.ValidationError`。

示例配置:
    logger_channel: yaml_toolkit
    verbose: false
    log_level: INFO
    message_break: "<br>"
    schemes:
      public: /var/www/files
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field

CONFIG_ENV = "YAML_TOOLKIT_CONFIG"


class ToolkitSettings(BaseModel):
    """工具包配置。

    参数:
        logger_channel: 默认日志通道名。
        verbose: 失败时是否同时推送到用户消息通道。
        log_level: 命令行入口使用的日志级别。
        message_break: 组合错误消息时使用的换行标记。
        schemes: scheme 名 → 本地基础目录。
    """

    model_config = ConfigDict(extra="forbid")

    logger_channel: str = "default"
    verbose: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    message_break: str = "<br>"
    schemes: Dict[str, str] = Field(default_factory=dict)


def _read_yaml(path: Path) -> Dict[str, Any]:
    """读取工具包配置文件，得到传给 `ToolkitSettings` 的字段。

    参数:
        path: 已展开用户目录的配置文件路径。

    返回值:
        dict: 顶层映射的副本；文件为空或只有注释时为空字典。

    副作用:
        读取文件；语法错误抛出 `yaml.YAMLError`，顶层不是映射时
        `dict()` 抛出 TypeError/ValueError，均交由 CLI 转为参数错误。
    """

    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    return dict(data or {})


def load_settings(path: Optional[Path] = None) -> ToolkitSettings:
    """加载并校验配置。

    参数:
        path: 配置文件路径；为 None 时读取环境变量 `YAML_TOOLKIT_CONFIG`。

    返回值:
        ToolkitSettings: 通过校验的配置；未指定任何文件时返回默认配置。

    副作用:
        读取环境变量与文件系统；显式指定但不存在的文件抛出 FileNotFoundError。
    """

    if path is None:
        env_path = os.environ.get(CONFIG_ENV)
        if not env_path:
            return ToolkitSettings()
        path = Path(env_path)
    return ToolkitSettings(**_read_yaml(Path(path).expanduser()))
