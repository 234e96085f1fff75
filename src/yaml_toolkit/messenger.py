"""面向用户的消息通道实现。"""

from __future__ import annotations

from typing import List

import typer


class MemoryMessenger:
    """把错误消息排队保存，由调用方在合适时机取出展示。"""

    def __init__(self) -> None:
        self.errors: List[str] = []

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def drain(self) -> List[str]:
        """取出并清空已排队的消息。"""

        messages, self.errors = self.errors, []
        return messages


class EchoMessenger:
    """直接输出到标准错误（命令行场景）。"""

    def add_error(self, message: str) -> None:
        typer.secho(message, err=True, fg=typer.colors.RED)
