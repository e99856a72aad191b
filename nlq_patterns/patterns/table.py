"""
Static pattern table.

The table is loaded once from patterns.json into an ordered tuple of
PatternRecord. Order is significant: row i is joined with the i-th vector
of the embedding blob.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..core.config import get_patterns_path
from .types import FREQUENCY_LABELS, PatternRecord, freeze_template
from util.logging import logger

REQUIRED_FIELDS = ("id", "category", "examples", "pattern", "template", "confidence")


def parse_pattern(raw: Dict[str, Any]) -> PatternRecord:
    """Build a PatternRecord from one JSON object, validating its fields."""
    missing = [name for name in REQUIRED_FIELDS if name not in raw]
    if missing:
        raise ValueError(f"Pattern {raw.get('id', '?')} missing fields: {missing}")

    for name in ("id", "category", "pattern"):
        if not isinstance(raw[name], str):
            raise ValueError(f"Pattern {raw['id']!r} field {name} must be a string")

    examples = raw["examples"]
    if not isinstance(examples, list) or not all(isinstance(e, str) for e in examples):
        raise ValueError(f"Pattern {raw['id']} examples must be a list of strings")

    confidence = float(raw["confidence"])
    if not 0.0 <= confidence <= 1.0:
        raise ValueError(f"Pattern {raw['id']} confidence out of range: {confidence}")

    frequency = raw.get("frequency")
    if frequency is not None and frequency not in FREQUENCY_LABELS:
        raise ValueError(f"Pattern {raw['id']} has unknown frequency label: {frequency}")

    if not isinstance(raw["template"], dict):
        raise ValueError(f"Pattern {raw['id']} template must be an object")

    return PatternRecord(
        id=raw["id"],
        category=raw["category"],
        examples=tuple(examples),
        pattern=raw["pattern"],
        template=freeze_template(raw["template"]),
        confidence=confidence,
        domain=raw.get("domain"),
        frequency=frequency,
    )


def build_pattern_table(rows: Iterable[Dict[str, Any]]) -> Tuple[PatternRecord, ...]:
    """Validate rows and return them as an immutable, ordered table."""
    table: List[PatternRecord] = []
    seen = set()
    for raw in rows:
        record = parse_pattern(raw)
        if record.id in seen:
            raise ValueError(f"Duplicate pattern id: {record.id}")
        seen.add(record.id)
        table.append(record)
    return tuple(table)


def load_pattern_table(path: Optional[Path] = None) -> Tuple[PatternRecord, ...]:
    """
    Load the pattern table from JSON.

    Args:
        path: JSON file to read, defaults to the configured table

    Returns:
        Ordered tuple of PatternRecord
    """
    source = Path(path) if path is not None else get_patterns_path()
    with open(source, "r", encoding="utf-8") as f:
        rows = json.load(f)

    table = build_pattern_table(rows)
    logger.log_pattern_table_load(
        str(source), len(table), len({p.category for p in table})
    )
    return table


EMBEDDED_PATTERNS: Tuple[PatternRecord, ...] = load_pattern_table()

_BY_ID = {p.id: p for p in EMBEDDED_PATTERNS}


def get_pattern(pattern_id: str) -> Optional[PatternRecord]:
    """Look up a shipped pattern by id."""
    return _BY_ID.get(pattern_id)
