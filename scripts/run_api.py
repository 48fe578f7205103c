#!/usr/bin/env python3
"""
SurgiEval — Запуск API сервера

Запуск:
    python scripts/run_api.py
    python scripts/run_api.py --port 8080
    python scripts/run_api.py --host 127.0.0.1 --port 8000
"""

import sys
import os
import argparse
from pathlib import Path

# Додаємо корінь проекту до path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def main():
    parser = argparse.ArgumentParser(description='SurgiEval API Server')
    parser.add_argument('--host', default='0.0.0.0', help='Host (default: 0.0.0.0)')
    parser.add_argument('--port', type=int, default=8000, help='Port (default: 8000)')
    parser.add_argument('--reload', action='store_true', help='Enable auto-reload')
    parser.add_argument('--log-level', default='INFO', help='Log level (default: INFO)')

    args = parser.parse_args()

    print("=" * 60)
    print("🏥 SurgiEval — API Server")
    print("=" * 60)
    print(f"   Host: {args.host}")
    print(f"   Port: {args.port}")
    print(f"   Reload: {args.reload}")
    print(f"   Gemini key: {'set' if os.getenv('GEMINI_API_KEY') else 'NOT SET'}")
    print("=" * 60)

    try:
        import uvicorn
    except ImportError:
        print("❌ uvicorn не встановлено!")
        print("   Встановіть: pip install uvicorn[standard]")
        sys.exit(1)

    # APIConfig читає порт і рівень логування з environment
    os.environ["API_HOST"] = args.host
    os.environ["API_PORT"] = str(args.port)
    os.environ["LOG_LEVEL"] = args.log_level

    from surgi_eval.config import setup_logging
    setup_logging(args.log_level)

    # Один процес: сесії зберігаються в пам'яті
    uvicorn.run(
        "surgi_eval.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        workers=1,
        log_level=args.log_level.lower(),
    )


if __name__ == "__main__":
    main()
