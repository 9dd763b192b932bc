"""Test configuration and fixtures.

This conftest loads optional .env variables (project root .env) without
overriding the process environment, keeps the Redis log sink off, and exposes
the small async web3 doubles shared by the adapter and client tests.
"""

from pathlib import Path
import os

import pytest


ROOT = Path(__file__).resolve().parents[1]


def _load_dotenv(dotenv_path: Path) -> None:
    if not dotenv_path.exists():
        return
    for line in dotenv_path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        k, v = line.split('=', 1)
        k = k.strip()
        v = v.strip().strip('"').strip("'")
        # don't override existing env vars
        if k not in os.environ:
            os.environ[k] = v


# Load .env from repository root if present
_load_dotenv(ROOT / '.env')

# Sanitize env vars that may contain inline comments (e.g. "8453 #base").
# Some CI or shell exports accidentally include comments which break pydantic int parsing.
for _k, _v in list(os.environ.items()):
    if isinstance(_v, str) and '#' in _v:
        cleaned = _v.split('#', 1)[0].strip()
        if cleaned != _v:
            os.environ[_k] = cleaned

# Tests never talk to Redis
os.environ['LOG_REDIS_ENABLED'] = 'false'


from tests.fakes import make_async_w3  # noqa: E402


@pytest.fixture
def async_w3_factory():
    return make_async_w3
