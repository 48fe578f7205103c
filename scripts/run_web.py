#!/usr/bin/env python3
"""
SurgiEval — Запуск Web UI (Streamlit)

Запуск:
    python scripts/run_web.py
    python scripts/run_web.py --port 8501

Генерація сценаріїв потребує GEMINI_API_KEY в environment.
"""

import argparse
import os
import subprocess
import sys
from pathlib import Path

web_ui_path = Path(__file__).parent.parent / "surgi_eval" / "web_ui" / "app.py"


def main():
    parser = argparse.ArgumentParser(description='SurgiEval Web UI')
    parser.add_argument('--port', type=int, default=8501, help='Port (default: 8501)')
    parser.add_argument('--host', default='localhost', help='Host (default: localhost)')
    args = parser.parse_args()

    if not os.getenv("GEMINI_API_KEY"):
        print("⚠️  GEMINI_API_KEY не задано: генерація сценаріїв не працюватиме")

    cmd = [
        sys.executable, "-m", "streamlit", "run", str(web_ui_path),
        "--server.port", str(args.port),
        "--server.address", args.host,
        "--browser.gatherUsageStats", "false",
    ]
    try:
        sys.exit(subprocess.call(cmd))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
