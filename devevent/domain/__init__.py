from devevent.domain.normalization import (
    generate_slug,
    normalize_date,
    normalize_event_fields,
    normalize_time,
    requires_event_check,
)

__all__ = [
    "generate_slug",
    "normalize_date",
    "normalize_time",
    "normalize_event_fields",
    "requires_event_check",
]
