"""Root conftest: loads .env.test before any direct_chat module reads settings."""
from __future__ import annotations

import os
from pathlib import Path

_ROOT = Path(__file__).resolve().parent


def _load_env_file(path: Path) -> None:
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        key, _, value = line.partition("=")
        os.environ.setdefault(key.strip(), value.strip())


if (_ROOT / ".env.test").exists():
    _load_env_file(_ROOT / ".env.test")

# Tests never talk to Redis; waiters are resolved in-process.
os.environ["NOTIFY_BACKEND"] = "local"
