"""
Export helpers for predictions.

All functions write to disk and return the written ``Path``.  The low-level
writers accept generic ``list[dict]`` data; the prediction writers adapt
``Prediction`` models to that shape.

CSV exports are flat (no nested dicts) so they open directly in a
spreadsheet.  ``flatten_predictions_for_export()`` produces one row per
prediction with primary/secondary picks as separate columns and the
disclaimers joined by ``"; "``.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Optional

from pick_engine.models.prediction import MarketSelection, Prediction

CSV_COLUMNS: list[str] = [
    "event_id",
    "generated_at",
    "category",
    "top_score",
    "primary_market",
    "primary_selection",
    "primary_confidence",
    "secondary_market",
    "secondary_selection",
    "secondary_confidence",
    "disclaimers",
]


def export_to_csv(
    records: list[dict],
    path: Path,
    fieldnames: list[str] | None = None,
) -> Path:
    """Write ``records`` to a UTF-8 CSV file.

    Args:
        records:    List of row dicts.
        path:       Destination file path (parent dirs created if missing).
        fieldnames: Column order.  If None, uses the keys of the first record.

    Returns:
        ``path`` as written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if not records:
        path.write_text("", encoding="utf-8")
        return path
    cols = fieldnames or list(records[0].keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(records)
    return path


def export_to_json(data: dict | list, path: Path) -> Path:
    """Write ``data`` to a pretty-printed JSON file (parent dirs created)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
    return path


def _pick_columns(prefix: str, pick: Optional[MarketSelection]) -> dict:
    if pick is None:
        return {
            f"{prefix}_market":     "",
            f"{prefix}_selection":  "",
            f"{prefix}_confidence": "",
        }
    return {
        f"{prefix}_market":     pick.market_type.value,
        f"{prefix}_selection":  pick.selection,
        f"{prefix}_confidence": pick.confidence,
    }


def flatten_predictions_for_export(predictions: list[Prediction]) -> list[dict]:
    """One flat row per prediction, keyed by ``CSV_COLUMNS``."""
    rows: list[dict] = []
    for p in predictions:
        rows.append(
            {
                "event_id":     p.event_id,
                "generated_at": p.generated_at.isoformat(),
                "category":     p.category.value,
                "top_score":    p.top_score,
                **_pick_columns("primary", p.primary),
                **_pick_columns("secondary", p.secondary),
                "disclaimers":  "; ".join(p.disclaimers),
            }
        )
    return rows


def predictions_to_records(predictions: list[Prediction]) -> list[dict]:
    """JSON-ready dicts (enums as values, datetimes as ISO strings)."""
    return [p.model_dump(mode="json") for p in predictions]


def export_predictions_json(predictions: list[Prediction], path: Path) -> Path:
    return export_to_json(predictions_to_records(predictions), path)


def export_predictions_csv(predictions: list[Prediction], path: Path) -> Path:
    return export_to_csv(flatten_predictions_for_export(predictions), path, CSV_COLUMNS)
