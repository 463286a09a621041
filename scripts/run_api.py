#!/usr/bin/env python
"""
Run the billing API with uvicorn, on the host/port from Settings.

Usage:
    python scripts/run_api.py [--no-reload]
"""
import os
import subprocess
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
src_path = project_root / 'src'
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from xerox_billing.config.settings import Settings


def build_command(settings: Settings, reload: bool = True) -> list[str]:
    cmd = [
        sys.executable, "-m", "uvicorn",
        "xerox_billing.api.main:app",
        "--host", settings.api_host,
        "--port", str(settings.api_port),
    ]
    if reload:
        cmd.append("--reload")
    return cmd


def main():
    settings = Settings.load(project_root)

    # Ensure src is in the child's python path
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(src_path), env.get("PYTHONPATH")]))

    cmd = build_command(settings, reload='--no-reload' not in sys.argv)
    print(f"Starting {settings.shop_name} Billing API on {settings.api_host}:{settings.api_port}")
    try:
        subprocess.run(cmd, cwd=str(project_root), env=env)
    except KeyboardInterrupt:
        print("\nAPI stopped.")


if __name__ == "__main__":
    main()
