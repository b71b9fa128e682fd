# (c) Copyright IBM Corp. 2025

import json
from typing import Any, Optional

from porthound.log import logger


def _attributes(o: Any) -> dict:
    """Reduces an object json can't encode to its non-None attributes."""
    if not hasattr(o, "__dict__"):
        logger.debug(f"Couldn't serialize non dict type: {type(o)}")
        return {}
    return {k.lower(): v for k, v in o.__dict__.items() if v is not None}


def to_json(obj: Any) -> Optional[bytes]:
    """
    Compact JSON, as bytes, with keys in attribute order.

    Returns None when <obj> can't be encoded.
    """
    try:
        return json.dumps(obj, default=_attributes, separators=(",", ":")).encode()
    except Exception:
        logger.debug("to_json non-fatal encoding issue: ", exc_info=True)


def to_pretty_json(obj: Any) -> Optional[str]:
    try:
        return json.dumps(obj, default=_attributes, sort_keys=True, indent=4)
    except Exception:
        logger.debug("to_pretty_json non-fatal encoding issue: ", exc_info=True)
