"""Record access and per-entity field profiles."""

from recordquery.core.profiles import (
    APPLICANTS,
    COMPLAINTS,
    DRIVERS,
    PROFILES,
    EntityProfile,
    FieldKind,
    FieldSpec,
    get_profile,
    join_fields,
)
from recordquery.core.records import (
    MISSING,
    Record,
    field_names,
    get_field,
    parse_datetime,
    to_text,
    validate_records,
)

__all__ = [
    "APPLICANTS",
    "COMPLAINTS",
    "DRIVERS",
    "MISSING",
    "PROFILES",
    "EntityProfile",
    "FieldKind",
    "FieldSpec",
    "Record",
    "field_names",
    "get_field",
    "get_profile",
    "join_fields",
    "parse_datetime",
    "to_text",
    "validate_records",
]
