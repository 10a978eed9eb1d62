"""JSON and CSV exports of the performance log."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional, Sequence

from stagelog.schemas.performance import Performance
from stagelog.schemas.show import AccessScheme, Show
from stagelog.schemas.stats import StatisticsSnapshot
from stagelog.services.aggregates import round2, total_cost
from stagelog.services.statistics import build_show_lookup, show_title

CSV_HEADERS = ("Date", "Show", "Venue", "Rating", "Cost", "Notes")


def _dump(items: Iterable[Any]) -> list:
    return [item.model_dump(mode="json") for item in items]


def export_json(
    performances: Sequence[Performance],
    shows: Sequence[Show],
    access_schemes: Sequence[AccessScheme],
    stats: Optional[StatisticsSnapshot] = None,
    generated: Optional[datetime] = None,
) -> Dict[str, Any]:
    return {
        "generated": (generated or datetime.now(timezone.utc)).isoformat(),
        "performances": _dump(performances),
        "shows": _dump(shows),
        "access_schemes": _dump(access_schemes),
        "stats": stats.model_dump(mode="json") if stats is not None else None,
    }


def export_json_text(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _quote(value: Optional[str]) -> str:
    text = value or ""
    return '"' + text.replace('"', '""') + '"'


def _number(value: float) -> str:
    if not value:
        return ""
    return f"{round2(value):.2f}".rstrip("0").rstrip(".")


def export_csv(performances: Sequence[Performance], shows: Sequence[Show]) -> str:
    """One row per performance; text columns quoted, blank when unrated or free."""
    lookup = build_show_lookup(shows)
    lines = [",".join(CSV_HEADERS)]
    for performance in performances:
        lines.append(",".join([
            performance.date_seen.isoformat() if performance.date_seen else "",
            _quote(show_title(performance, lookup)),
            _quote(performance.theatre_name),
            _number(performance.weighted_rating),
            _number(total_cost(performance)),
            _quote(performance.general_notes),
        ]))
    return "\n".join(lines)
