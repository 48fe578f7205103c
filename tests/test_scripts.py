"""
Тести для скриптів запуску

Запуск: pytest tests/test_scripts.py -v
"""

import importlib.util
import sys
from pathlib import Path

import pytest


SCRIPTS_DIR = Path(__file__).parent.parent / "scripts"


def _load(name: str):
    spec = importlib.util.spec_from_file_location(name, SCRIPTS_DIR / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_run_web_command(monkeypatch, capsys):
    """Лаунчер передає порт і хост у streamlit та повертає його код виходу"""
    run_web = _load("run_web")
    calls = []

    def fake_call(cmd):
        calls.append(cmd)
        return 3

    monkeypatch.setattr(run_web.subprocess, "call", fake_call)
    monkeypatch.setattr(sys, "argv", ["run_web.py", "--port", "9000", "--host", "0.0.0.0"])
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)

    with pytest.raises(SystemExit) as exc:
        run_web.main()

    assert exc.value.code == 3
    cmd = calls[0]
    assert cmd[1:4] == ["-m", "streamlit", "run"]
    assert Path(cmd[4]).exists()
    assert Path(cmd[4]).parts[-2:] == ("web_ui", "app.py")
    assert cmd[cmd.index("--server.port") + 1] == "9000"
    assert cmd[cmd.index("--server.address") + 1] == "0.0.0.0"
    assert "GEMINI_API_KEY" in capsys.readouterr().out

    print(f"✓ run_web: {' '.join(cmd[1:4])}")
