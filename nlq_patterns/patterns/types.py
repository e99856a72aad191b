"""
Pattern table record types.
Records are immutable; templates are frozen into read-only mappings and tuples.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

FREQUENCY_LABELS = ("low", "medium", "high", "very_high")


def freeze_template(value: Any) -> Any:
    """Recursively convert dicts to read-only mappings and lists to tuples."""
    if isinstance(value, dict):
        return MappingProxyType({k: freeze_template(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze_template(v) for v in value)
    return value


def thaw_template(value: Any) -> Any:
    """Inverse of freeze_template: plain dicts and lists, safe to mutate."""
    if isinstance(value, Mapping):
        return {k: thaw_template(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [thaw_template(v) for v in value]
    return value


@dataclass(frozen=True)
class PatternRecord:
    """One recognized natural-language query shape."""

    id: str
    """Unique, stable identifier; key into the embedding store"""

    category: str
    """Coarse grouping, e.g. "aggregation" or "temporal" """

    examples: Tuple[str, ...]
    """Example inputs (documentation only)"""

    pattern: str
    """Regular-expression source compiled by the matching engine"""

    template: Mapping[str, Any] = field(hash=False)
    """Query template; string leaves carry ${N} placeholders"""

    confidence: float
    """Static ranking weight in [0, 1]"""

    domain: Optional[str] = None
    """Fine-grained subject area, e.g. "medical" """

    frequency: Optional[str] = None
    """Static ranking hint, one of FREQUENCY_LABELS"""

    def template_copy(self) -> Dict[str, Any]:
        """Mutable deep copy of the template for substitution."""
        return thaw_template(self.template)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "category": self.category,
            "examples": list(self.examples),
            "pattern": self.pattern,
            "template": self.template_copy(),
            "confidence": self.confidence,
        }
        if self.domain is not None:
            data["domain"] = self.domain
        if self.frequency is not None:
            data["frequency"] = self.frequency
        return data
