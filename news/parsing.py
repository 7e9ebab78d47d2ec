from __future__ import annotations

import json
import math
import re
from typing import Tuple

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def parse_sentiment_response(raw: str) -> Tuple[int, float]:
    """Parse engine JSON of the form ``{"rating": n, "confidence": x}``.

    The rating is rounded and clamped to 1..5, the confidence clamped to 0..1.
    Code fences and surrounding prose are tolerated.
    """
    if not raw or not raw.strip():
        raise ValueError("Empty engine response")

    match = _JSON_OBJECT.search(raw)
    if not match:
        raise ValueError("No JSON object found in engine response")

    obj = json.loads(match.group(0))
    if not isinstance(obj, dict):
        raise ValueError("Engine response is not a JSON object")

    try:
        rating = float(obj["rating"])
        confidence = float(obj["confidence"])
    except KeyError as exc:
        raise ValueError(f"Missing key {exc} in engine response") from exc
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Non-numeric rating/confidence: {exc}") from exc
    if not (math.isfinite(rating) and math.isfinite(confidence)):
        raise ValueError("Rating/confidence must be finite numbers")

    return max(1, min(5, int(round(rating)))), max(0.0, min(1.0, confidence))
