"""Config file discovery.

Walk-up finder locates writenex.toml, similar to how git finds .git/.
Supports the WRITENEX_CONFIG env var and the --config CLI flag.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "writenex.toml"
CONFIG_ENV_VAR = "WRITENEX_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for writenex.toml.

    WRITENEX_CONFIG, when set, wins outright; if it names a missing file
    the result is None rather than a walk-up hit.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def read_config(path: Path) -> dict[str, Any]:
    """Parse *path* as TOML.

    Raises:
        tomllib.TOMLDecodeError: The file is not valid TOML.
    """
    return tomllib.loads(path.read_text(encoding="utf-8"))
