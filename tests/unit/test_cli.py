"""
Unit tests for the command-line interface.
"""

import json

import pytest

from lightshuttle import __version__
from lightshuttle import cli


def test_check_not_root():
    cli.check_not_root(1000)
    with pytest.raises(cli.RootUserError, match="Refusing to run as root."):
        cli.check_not_root(0)


def test_version(capsys):
    assert cli.main(["version"]) == 0
    assert capsys.readouterr().out.strip() == f"LightShuttle version {__version__}"


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 1
    assert "usage" in capsys.readouterr().out


def test_serve_refuses_root(monkeypatch, capsys):
    monkeypatch.setattr(cli, "_current_uid", lambda: 0)
    assert cli.main(["serve"]) == 1
    assert "Refusing to run as root." in capsys.readouterr().err


def test_serve_passes_host_and_port(monkeypatch):
    calls = []
    monkeypatch.setattr(cli, "_current_uid", lambda: 0)
    monkeypatch.setattr("lightshuttle.main.run", lambda host=None, port=None: calls.append((host, port)))
    assert cli.main(["serve", "--allow-root", "--host", "0.0.0.0", "--port", "9000"]) == 0
    assert calls == [("0.0.0.0", 9000)]


def test_openapi_to_file(tmp_path):
    target = tmp_path / "openapi.json"
    assert cli.main(["openapi", "--output", str(target)]) == 0
    document = json.loads(target.read_text(encoding="utf-8"))
    assert "/api/v1/apps" in document["paths"]
    assert "/api/v1/apps/{name}/recreate" in document["paths"]
