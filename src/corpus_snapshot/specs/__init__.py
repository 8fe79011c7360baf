"""Repository specification resolution."""

from corpus_snapshot.specs.resolver import (
    SpecAccumulator,
    parse_spec,
    resolve_specs,
    sanitize_name,
)

__all__ = ["SpecAccumulator", "parse_spec", "resolve_specs", "sanitize_name"]
