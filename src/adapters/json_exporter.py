"""JSON export of response bodies and entities.

Why JSON:
- Lets CLI users persist lookups (e.g. brand comprehensive data) and feed
  them to other tools.
"""

from __future__ import annotations

import json
import math
from datetime import date, datetime
from pathlib import Path
from typing import Any

from core.domain.models import OmedaEntity


def to_jsonable(value: Any) -> Any:
    """Convert entities, datetimes and `nan` into JSON-compatible values."""

    if isinstance(value, OmedaEntity):
        return to_jsonable(value.to_dict())
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def export_json(*, payload: Any, output_path: Path) -> Path:
    """Write `payload` as UTF-8 JSON with a stable layout."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(to_jsonable(payload), ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
