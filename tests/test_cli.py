"""Typer CLI 的基础测试。

覆盖:
- check 子命令对文本/文件的校验与退出码
- load/save 子命令的 JSON 输出与错误码
- 配置文件中的 scheme 映射
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from yaml_toolkit.run import app

runner = CliRunner()


def _payload(result) -> dict:
    """取标准输出最后一行 JSON。"""

    return json.loads(result.stdout.strip().splitlines()[-1])


def test_check_text_ok():
    result = runner.invoke(app, ["check", "--text", "key: value"])
    assert result.exit_code == 0
    payload = _payload(result)
    assert payload["pass"] is True
    assert payload["parsed"] == {"key": "value"}


def test_check_text_invalid():
    result = runner.invoke(app, ["check", "--text", "key: [value"])
    assert result.exit_code == 1
    assert _payload(result)["error_code"] == 12


def test_check_file(tmp_path: Path):
    p = tmp_path / "x.yml"
    p.write_text("a:\n  - 1\n  - 2\n", encoding="utf-8")
    result = runner.invoke(app, ["check", "--file", str(p)])
    assert result.exit_code == 0
    assert _payload(result)["parsed"] == {"a": [1, 2]}


def test_check_requires_one_source():
    result = runner.invoke(app, ["check"])
    assert result.exit_code != 0


def test_load_ok(tmp_path: Path):
    p = tmp_path / "valid.yml"
    p.write_text("foo: bar\n", encoding="utf-8")
    result = runner.invoke(app, ["load", str(p)])
    assert result.exit_code == 0
    payload = _payload(result)
    assert payload["data"] == {"foo": "bar"}
    assert payload["info"]["error_code"] == 0


def test_load_missing(tmp_path: Path):
    result = runner.invoke(app, ["load", str(tmp_path / "missing.yml"), "--quiet"])
    assert result.exit_code == 1
    payload = _payload(result)
    assert payload["data"] is False
    assert payload["info"]["error_code"] == 2


def test_load_with_scheme_config(tmp_path: Path):
    (tmp_path / "site.yml").write_text("name: demo\n", encoding="utf-8")
    cfg = tmp_path / "toolkit.yml"
    cfg.write_text(f"schemes:\n  public: {tmp_path}\n", encoding="utf-8")
    result = runner.invoke(app, ["load", "public://site.yml", "--config", str(cfg)])
    assert result.exit_code == 0
    assert _payload(result)["data"] == {"name": "demo"}


def test_save_json(tmp_path: Path):
    p = tmp_path / "out.yml"
    p.write_text("old: 1\n", encoding="utf-8")
    result = runner.invoke(app, ["save", str(p), "--json", '{"foo": "bar", "n": 2}'])
    assert result.exit_code == 0
    assert _payload(result)["saved"] is True
    assert p.read_text(encoding="utf-8") == "foo: bar\nn: 2\n"


def test_save_text_to_missing_file(tmp_path: Path):
    result = runner.invoke(app, ["save", str(tmp_path / "new.yml"), "--text", "a: 1"])
    assert result.exit_code == 1
    assert _payload(result)["info"]["error_code"] == 2


def test_save_rejects_bad_json(tmp_path: Path):
    result = runner.invoke(app, ["save", str(tmp_path / "x.yml"), "--json", "{nope"])
    assert result.exit_code != 0


def test_check_file_not_utf8(tmp_path: Path):
    p = tmp_path / "latin.yml"
    p.write_bytes(b"\xff\xfe: x\n")
    result = runner.invoke(app, ["check", "--file", str(p)])
    assert result.exit_code == 2
    assert not isinstance(result.exception, UnicodeDecodeError)


@pytest.mark.parametrize("config_text", ["key: [bad", "- a\n- b\n", "- 1\n- 2\n"])
def test_load_rejects_broken_config(tmp_path: Path, config_text: str):
    """语法错误或顶层不是映射的配置文件作为参数错误退出。"""

    cfg = tmp_path / "toolkit.yml"
    cfg.write_text(config_text, encoding="utf-8")
    result = runner.invoke(app, ["load", str(tmp_path / "x.yml"), "--config", str(cfg)])
    assert result.exit_code == 2
    assert isinstance(result.exception, SystemExit)
