"""
Tests for the static pattern table.
"""

import json
import re

import pytest
from nlq_patterns.patterns.table import EMBEDDED_PATTERNS, build_pattern_table, get_pattern, load_pattern_table
from nlq_patterns.patterns.types import FREQUENCY_LABELS, PatternRecord

PLACEHOLDER = re.compile(r"\$\{(\d+)\}")


def _row(pattern_id="p1", **overrides):
    row = {
        "id": pattern_id,
        "category": "temporal",
        "examples": ["documents from 2020"],
        "pattern": "^(.+?)\\s+from\\s+(\\d{4})$",
        "template": {"like": "${1}", "where": {"year": "${2}"}},
        "confidence": 0.88,
    }
    row.update(overrides)
    return row


def _placeholders(value):
    if isinstance(value, str):
        return [int(n) for n in PLACEHOLDER.findall(value)]
    if hasattr(value, "items"):
        found = []
        for k, v in value.items():
            found.extend(_placeholders(k))
            found.extend(_placeholders(v))
        return found
    if isinstance(value, (list, tuple)):
        found = []
        for v in value:
            found.extend(_placeholders(v))
        return found
    return []


def test_table_has_220_patterns():
    """Test that the shipped table has the expected size."""
    assert len(EMBEDDED_PATTERNS) == 220
    assert all(isinstance(p, PatternRecord) for p in EMBEDDED_PATTERNS)


def test_pattern_ids_are_unique():
    """Test that no two rows share an id."""
    ids = [p.id for p in EMBEDDED_PATTERNS]
    assert len(ids) == len(set(ids))


def test_major_categories_covered():
    """Test that the table covers the main query categories."""
    categories = {p.category for p in EMBEDDED_PATTERNS}

    for expected in ["research", "academic", "people", "projects", "aggregation", "comparison", "temporal"]:
        assert expected in categories

    assert len(categories) > 15


def test_pattern_fields_are_valid():
    """Test confidence range, frequency labels and examples on every row."""
    for pattern in EMBEDDED_PATTERNS:
        assert 0.5 < pattern.confidence <= 1.0
        assert pattern.frequency is None or pattern.frequency in FREQUENCY_LABELS
        assert len(pattern.examples) > 0
        assert pattern.id and pattern.category


def test_patterns_compile_and_match_their_examples():
    """Test that each regex compiles and matches its own examples case-insensitively."""
    for pattern in EMBEDDED_PATTERNS:
        compiled = re.compile(pattern.pattern, re.IGNORECASE)
        for example in pattern.examples:
            assert compiled.search(example), f"{pattern.id} does not match {example!r}"


def test_template_placeholders_reference_capture_groups():
    """Test that ${N} placeholders never exceed the regex group count."""
    for pattern in EMBEDDED_PATTERNS:
        groups = re.compile(pattern.pattern).groups
        for index in _placeholders(pattern.template):
            assert 1 <= index <= groups, f"{pattern.id} uses ${{{index}}} with {groups} groups"


def test_table_order_matches_json(tmp_path):
    """Test that the loaded order is the file order."""
    rows = [_row("b"), _row("a"), _row("c")]
    path = tmp_path / "patterns.json"
    path.write_text(json.dumps(rows))

    table = load_pattern_table(path)

    assert [p.id for p in table] == ["b", "a", "c"]


def test_duplicate_id_rejected():
    """Test that a duplicate id fails the load."""
    with pytest.raises(ValueError, match="Duplicate pattern id"):
        build_pattern_table([_row("same"), _row("same")])


def test_invalid_rows_rejected():
    """Test field validation on load."""
    with pytest.raises(ValueError, match="confidence"):
        build_pattern_table([_row(confidence=1.5)])

    with pytest.raises(ValueError, match="frequency"):
        build_pattern_table([_row(frequency="sometimes")])

    incomplete = _row()
    del incomplete["pattern"]
    with pytest.raises(ValueError, match="missing fields"):
        build_pattern_table([incomplete])

    with pytest.raises(ValueError, match="examples must be a list of strings"):
        build_pattern_table([_row(examples="documents from 2020")])

    with pytest.raises(ValueError, match="examples must be a list of strings"):
        build_pattern_table([_row(examples=["ok", 42])])

    for name in ["id", "category", "pattern"]:
        with pytest.raises(ValueError, match=f"field {name} must be a string"):
            build_pattern_table([_row(**{name: 7})])


def test_optional_fields_default_to_none():
    """Test that domain and frequency are optional."""
    record = build_pattern_table([_row()])[0]

    assert record.domain is None
    assert record.frequency is None


def test_templates_are_read_only():
    """Test that templates cannot be mutated through the table."""
    pattern = get_pattern("items_from_year")

    with pytest.raises(TypeError):
        pattern.template["like"] = "changed"

    with pytest.raises(TypeError):
        pattern.template["where"]["year"] = "1999"


def test_template_copy_is_mutable_and_detached():
    """Test that template_copy returns plain, independent structures."""
    pattern = get_pattern("items_between_years")
    copy = pattern.template_copy()

    assert copy == {"like": "${1}", "where": {"year": {"between": ["${2}", "${3}"]}}}

    copy["where"]["year"]["between"].append("x")
    assert pattern.template_copy()["where"]["year"]["between"] == ["${2}", "${3}"]


def test_get_pattern():
    """Test lookup by id."""
    pattern = get_pattern("papers_about_topic")

    assert pattern is not None
    assert pattern.category == "academic"
    assert pattern.domain == "academic"
    assert pattern.frequency == "very_high"
    assert get_pattern("does_not_exist") is None


def test_to_dict_round_trips_through_parser():
    """Test that to_dict output loads back into an equal record."""
    for pattern in EMBEDDED_PATTERNS[:10]:
        assert build_pattern_table([pattern.to_dict()])[0] == pattern
