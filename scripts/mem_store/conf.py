"""mem_store - Central configuration."""

import os
from pathlib import Path

# =============================================================================
# RECORD DEFAULTS
# =============================================================================

DEFAULT_ID_ATTRIBUTE = "id"
DEFAULT_INDEXES = (DEFAULT_ID_ATTRIBUTE,)

# =============================================================================
# PATHS
# =============================================================================

USER_HOME = Path.home()
STORE_HOME = Path(os.environ.get("MEM_STORE_HOME", USER_HOME / ".mem_store"))

LOG_FILE = STORE_HOME / "mem_store.log"

# =============================================================================
# LOGGING
# =============================================================================


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


LOG_ENABLED = _env_flag("MEM_STORE_LOG")
LOG_TO_STDERR = _env_flag("MEM_STORE_LOG_STDERR")
