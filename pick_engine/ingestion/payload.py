"""
Payload loader: JSON bundle files -> (Event, SentimentSnapshot, Forecast).

Bundle format
-------------
A file holds either a single bundle object or a list of them::

    {
      "event":     { ...Event fields... },
      "sentiment": { ...SentimentSnapshot fields... } | null,
      "forecast":  { ...Forecast fields, incl. optional "risk"... }
    }

``sentiment`` may be omitted or ``null``.  ``forecast`` may be omitted, in
which case an empty forecast (no probabilities) is used and the engine
returns its fallback prediction.

Validation rules
----------------
- Every field is validated by the pydantic models; out-of-range
  probabilities and unknown enum values are rejected.
- A sentiment ``event_id`` that disagrees with the event is rejected.
- Failures raise ``PayloadError`` naming the file and bundle index.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from pick_engine.models.event import Event
from pick_engine.models.forecast import Forecast
from pick_engine.models.prediction import Prediction
from pick_engine.models.sentiment import SentimentSnapshot

log = logging.getLogger(__name__)


class PayloadError(ValueError):
    """Raised when a payload file cannot be turned into engine inputs."""


@dataclass(frozen=True)
class PayloadBundle:
    event:     Event
    sentiment: Optional[SentimentSnapshot]
    forecast:  Forecast


def parse_bundle(raw: Any, source: str = "<payload>", index: int = 0) -> PayloadBundle:
    """Validate one bundle dict.

    Raises:
        PayloadError: If ``raw`` is not a dict, lacks ``event``, or any
            model rejects its section.
    """
    where = f"{source}[{index}]"
    if not isinstance(raw, dict):
        raise PayloadError(f"{where}: bundle must be an object, got {type(raw).__name__}.")
    if "event" not in raw:
        raise PayloadError(f"{where}: missing required key 'event'.")

    try:
        event = Event.model_validate(raw["event"])
        sentiment_raw = raw.get("sentiment")
        sentiment = (
            SentimentSnapshot.model_validate(sentiment_raw)
            if sentiment_raw is not None
            else None
        )
        forecast = Forecast.model_validate(raw.get("forecast") or {})
    except ValidationError as exc:
        raise PayloadError(f"{where}: {exc}") from exc

    if sentiment is not None and sentiment.event_id != event.event_id:
        raise PayloadError(
            f"{where}: sentiment event_id {sentiment.event_id} "
            f"does not match event {event.event_id}."
        )
    return PayloadBundle(event=event, sentiment=sentiment, forecast=forecast)


def _read_json(path: Path) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"Payload file not found: {path}")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise PayloadError(f"{path}: invalid JSON ({exc.msg} at line {exc.lineno}).") from exc


def load_bundles(path: Path) -> list[PayloadBundle]:
    """Load every bundle in ``path`` (a single object or a list).

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        PayloadError:      If the JSON or any bundle is invalid.
    """
    data = _read_json(path)
    items = data if isinstance(data, list) else [data]
    bundles = [parse_bundle(item, str(path), i) for i, item in enumerate(items)]
    log.info("Loaded %d bundle(s) from %s", len(bundles), path)
    return bundles


def load_predictions(path: Path) -> list[Prediction]:
    """Load prediction JSON as written by ``export_predictions_json``."""
    data = _read_json(path)
    items = data if isinstance(data, list) else [data]
    try:
        return [Prediction.model_validate(item) for item in items]
    except ValidationError as exc:
        raise PayloadError(f"{path}: {exc}") from exc
