"""Global configuration and defaults for orderkit."""

from __future__ import annotations

import os
from typing import Final

DEFAULT_DIRECTION: Final = "asc"

# Profiling harness sizing; kept small so a run stays well under a second
PROFILE_SIZE: Final = int(os.environ.get("ORDERKIT_PROFILE_SIZE", "2000"))
PROFILE_SEED: Final = int(os.environ.get("ORDERKIT_PROFILE_SEED", "42"))
PROFILE_REPEAT: Final = int(os.environ.get("ORDERKIT_PROFILE_REPEAT", "3"))
