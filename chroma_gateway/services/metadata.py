import json
import logging
import math
from typing import Any, Dict, Optional, Union

MetadataValue = Union[str, int, float, bool, None]


# -------------------------
# SANITIZE
# -------------------------

def _coerce(key: str, value: Any):
    """Return (keep, value) for a single metadata entry."""
    if isinstance(value, float) and not math.isfinite(value):
        # NaN and Infinity are not JSON
        return False, None

    if value is None or isinstance(value, (str, bool, int, float)):
        return True, value

    if isinstance(value, (list, tuple, dict)):
        try:
            return True, json.dumps(value, separators=(",", ":"), allow_nan=False)
        except (TypeError, ValueError) as e:
            logging.debug(f"[Metadata] Dropping '{key}', not serializable: {e}")
            return False, None

    return False, None


def sanitize_metadata(raw: Any) -> Optional[Dict[str, MetadataValue]]:
    """
    Coerce a JSON value into metadata ChromaDB accepts.

    - anything that is not an object is dropped (None)
    - null, strings, numbers and booleans are kept as they are
    - arrays and objects become their compact JSON text
    - everything else is dropped
    - an empty result is reported as None
    """
    if not isinstance(raw, dict):
        return None

    sanitized: Dict[str, MetadataValue] = {}
    for key, value in raw.items():
        keep, coerced = _coerce(key, value)
        if keep:
            sanitized[str(key)] = coerced

    return sanitized or None


# -------------------------
# MERGE STRATEGY
# -------------------------

def merge_metadata(old: Any, new: Any) -> Optional[Dict[str, MetadataValue]]:
    """New keys win over stored ones; both sides are sanitized first."""
    merged = {**(sanitize_metadata(old) or {}), **(sanitize_metadata(new) or {})}
    return merged or None
