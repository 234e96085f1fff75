"""命令行入口。

提供三个子命令：
- `check`：校验一段 YAML 文本或文件内容，打印结果记录；
- `load`：经由 `YamlStorage.load` 读取文件，打印数据与操作信息；
- `save`：把 YAML 文本或 JSON 数据写入已存在的文件。

失败时以退出码 1 结束，结果仍以 JSON 打印到标准输出。

示例:
    yaml-toolkit check --text "key: value"
    yaml-toolkit load public://settings.yml --config toolkit.yml
"""

from __future__ import annotations

import json as _json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Optional

import typer
import yaml
from pydantic import ValidationError

from .messenger import EchoMessenger
from .settings import ToolkitSettings, load_settings
from .storage import YamlStorage
from .validator import YamlValidator

app = typer.Typer(help="YAML Toolkit / 校验与读写 CLI")


def _settings(config: Optional[str]) -> ToolkitSettings:
    """加载配置并初始化日志级别。

    参数:
        config: 配置文件路径；None 时按环境变量/默认值加载。

    返回值:
        ToolkitSettings: 配置对象。

    副作用:
        配置 root logger；配置非法时抛出 `typer.BadParameter`。
    """

    try:
        settings = load_settings(Path(config) if config else None)
    except (OSError, ValidationError, yaml.YAMLError, TypeError, ValueError) as exc:
        raise typer.BadParameter(f"invalid config: {exc}")
    logging.basicConfig(level=settings.log_level)
    return settings


def _storage(settings: ToolkitSettings, verbose: bool) -> YamlStorage:
    storage = YamlStorage.from_settings(settings)
    if verbose:
        storage.messenger = EchoMessenger()
    return storage


def _echo(payload: Any) -> None:
    typer.echo(_json.dumps(payload, ensure_ascii=False, default=str))


@app.command()
def check(
    text: Optional[str] = typer.Option(None, "--text", help="待校验的 YAML 文本"),
    file: Optional[str] = typer.Option(None, "--file", help="待校验的 YAML 文件"),
) -> None:
    """校验 YAML 文本或文件内容并打印结果记录。

    参数:
        text: YAML 文本（与 --file 二选一）。
        file: YAML 文件路径。

    返回值:
        无；以 JSON 打印 `ValidationResult`，未通过时退出码为 1。

    副作用:
        可能读取文件系统。
    """

    if (text is None) == (file is None):
        raise typer.BadParameter("需要且只能提供 --text 或 --file 之一")
    try:
        content = text if text is not None else Path(file).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise typer.BadParameter(f"cannot read {file}: {exc}")

    validator = YamlValidator()
    ok = validator.check_yaml(content)
    _echo(validator.get_result().to_dict())
    if not ok:
        raise typer.Exit(code=1)


@app.command()
def load(
    path: str = typer.Argument(..., help="YAML 文件路径（支持 scheme://）"),
    channel: Optional[str] = typer.Option(None, "--channel", help="日志通道"),
    verbose: Optional[bool] = typer.Option(
        None, "--verbose/--quiet", help="失败时是否输出用户消息"
    ),
    config: Optional[str] = typer.Option(None, "--config", help="工具包配置文件"),
) -> None:
    """读取 YAML 文件并打印 `{data, info}`。

    参数:
        path: 文件路径。
        channel: 日志通道；缺省取配置中的 `logger_channel`。
        verbose: 缺省取配置中的 `verbose`。
        config: 配置文件路径。

    返回值:
        无；读取失败时退出码为 1。

    副作用:
        读取文件系统，失败时写日志。
    """

    settings = _settings(config)
    verbose = settings.verbose if verbose is None else verbose
    storage = _storage(settings, verbose)
    data = storage.load(path, channel or settings.logger_channel, verbose)
    info = storage.get_info()
    _echo({"data": data, "info": asdict(info) if info else None})
    if data is False:
        raise typer.Exit(code=1)


@app.command()
def save(
    path: str = typer.Argument(..., help="已存在的目标文件路径"),
    text: Optional[str] = typer.Option(None, "--text", help="YAML 文本"),
    json_data: Optional[str] = typer.Option(None, "--json", help="JSON 数据"),
    channel: Optional[str] = typer.Option(None, "--channel", help="日志通道"),
    verbose: Optional[bool] = typer.Option(
        None, "--verbose/--quiet", help="失败时是否输出用户消息"
    ),
    config: Optional[str] = typer.Option(None, "--config", help="工具包配置文件"),
) -> None:
    """校验数据并写入文件，打印 `{saved, info}`。

    参数:
        path: 目标文件路径（必须已存在）。
        text: YAML 文本（与 --json 二选一）。
        json_data: JSON 数据。
        channel: 日志通道。
        verbose: 缺省取配置中的 `verbose`。
        config: 配置文件路径。

    返回值:
        无；写入失败时退出码为 1。

    副作用:
        写文件系统，失败时写日志。
    """

    if (text is None) == (json_data is None):
        raise typer.BadParameter("需要且只能提供 --text 或 --json 之一")
    if json_data is not None:
        try:
            data: Any = _json.loads(json_data)
        except ValueError as exc:
            raise typer.BadParameter(f"invalid JSON: {exc}")
    else:
        data = text

    settings = _settings(config)
    verbose = settings.verbose if verbose is None else verbose
    storage = _storage(settings, verbose)
    saved = storage.save(path, data, channel or settings.logger_channel, verbose)
    info = storage.get_info()
    _echo({"saved": saved, "info": asdict(info) if info else None})
    if not saved:
        raise typer.Exit(code=1)


def main() -> None:
    """CLI 入口包装。

    参数:
        无。

    返回值:
        无。

    副作用:
        调用 Typer 应用进行命令行解析与执行。
    """

    app()


if __name__ == "__main__":
    main()
