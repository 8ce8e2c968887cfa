"""Allow-list loading from the JSON config file."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from relaybridge.models import AllowList

logger = logging.getLogger(__name__)


def load_allow_list_from_file(path: str) -> AllowList:
    """Load and validate the allow-list.

    The file holds a JSON array of identity tokens, e.g.
    ``["15550001111@c.us", "15550002222@c.us"]``. Duplicates are dropped,
    first occurrence wins.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Allow-list file not found: {path}")
    raw = json.loads(p.read_text())
    validated = AllowList.model_validate(raw)
    allow_list = AllowList(tuple(dict.fromkeys(validated.root)))
    logger.info("Loaded %d allow-listed identities from %s", len(allow_list), path)
    return allow_list
