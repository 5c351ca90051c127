"""Per-entity field mapping tables.

A profile tells the engine, for one kind of record, which fields are
searchable, sortable and filterable, how they are labelled on export, which
ones hold timestamps, and which ones are computed from other fields (such as
a full name assembled from name parts).
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from recordquery.core.records import MISSING, Record, get_field, parse_datetime
from recordquery.exceptions import ProfileNotFoundError


class FieldKind(str, Enum):
    """Value families the engine treats differently."""

    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    CHOICE = "choice"


@dataclass(frozen=True)
class FieldSpec:
    """Description of one record field."""

    name: str
    label: str
    kind: FieldKind = FieldKind.TEXT
    searchable: bool = False
    sortable: bool = True
    filterable: bool = False
    compute: Callable[[Record], Any] | None = None

    @property
    def is_temporal(self) -> bool:
        return self.kind == FieldKind.DATE


@dataclass(frozen=True)
class EntityProfile:
    """Field mapping for one entity type (one dashboard screen)."""

    name: str
    fields: tuple[FieldSpec, ...]
    description: str = ""
    _by_name: dict[str, FieldSpec] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self):
        """Index fields by name."""
        self._by_name.update({spec.name: spec for spec in self.fields})

    def get(self, name: str) -> FieldSpec | None:
        """Get a field spec by name."""
        return self._by_name.get(name)

    def searchable_fields(self) -> list[str]:
        return [spec.name for spec in self.fields if spec.searchable]

    def sortable_fields(self) -> list[str]:
        return [spec.name for spec in self.fields if spec.sortable]

    def filterable_fields(self) -> list[str]:
        return [spec.name for spec in self.fields if spec.filterable]

    def temporal_fields(self) -> list[str]:
        return [spec.name for spec in self.fields if spec.is_temporal]

    def is_temporal(self, name: str) -> bool:
        spec = self.get(name)
        return spec is not None and spec.is_temporal

    def label(self, name: str) -> str:
        spec = self.get(name)
        return spec.label if spec else name

    def export_columns(self) -> list[tuple[str, str]]:
        """Get ``(field, label)`` pairs for every field, in profile order."""
        return [(spec.name, spec.label) for spec in self.fields]

    def resolve(self, record: Record, name: str) -> Any:
        """Get a field value, evaluating computed fields.

        Returns:
            The value, or ``MISSING`` when neither a computed nor a stored
            field of that name exists.
        """
        spec = self.get(name)
        if spec is not None and spec.compute is not None:
            return spec.compute(record)
        return get_field(record, name)

    def coerce(self, record: Mapping[str, Any]) -> dict[str, Any]:
        """Copy a decoded record, parsing ISO strings in temporal fields.

        Values that do not parse are left untouched so the filter stage can
        exclude them later.
        """
        result = dict(record)
        for name in self.temporal_fields():
            value = result.get(name)
            if isinstance(value, str):
                parsed = parse_datetime(value)
                if parsed is not None:
                    result[name] = parsed
        return result


def join_fields(*names: str) -> Callable[[Record], Any]:
    """Build a computed field joining other text fields with spaces."""

    def compute(record: Record) -> Any:
        parts = []
        for name in names:
            value = get_field(record, name)
            if value is MISSING:
                return MISSING
            if value:
                parts.append(str(value))
        return " ".join(parts)

    return compute


DRIVERS = EntityProfile(
    name="drivers",
    description="Active delivery drivers",
    fields=(
        FieldSpec("id", "ID", searchable=False),
        FieldSpec(
            "full_name",
            "Full name",
            searchable=True,
            compute=join_fields("first_name", "paternal_surname", "maternal_surname"),
        ),
        FieldSpec("curp", "CURP", searchable=True),
        FieldSpec("email", "Email", searchable=True),
        FieldSpec("phone", "Phone", searchable=True),
        FieldSpec("state", "State", kind=FieldKind.CHOICE, filterable=True),
        FieldSpec("status", "Driver status", kind=FieldKind.CHOICE, filterable=True),
        FieldSpec("last_store", "Last order store", kind=FieldKind.CHOICE, filterable=True),
        FieldSpec("last_order_at", "Last order date", kind=FieldKind.DATE, filterable=True),
    ),
)

APPLICANTS = EntityProfile(
    name="applicants",
    description="Driver applicants going through onboarding",
    fields=(
        FieldSpec("id", "ID", searchable=True),
        FieldSpec(
            "full_name",
            "Full name",
            searchable=True,
            compute=join_fields("first_name", "paternal_surname", "maternal_surname"),
        ),
        FieldSpec("phone", "Phone", searchable=True),
        FieldSpec("email", "Email", searchable=True),
        FieldSpec("location", "Location", kind=FieldKind.CHOICE, filterable=True),
        FieldSpec("applied_at", "Application date", kind=FieldKind.DATE, filterable=True),
        FieldSpec(
            "application_status",
            "Application status",
            kind=FieldKind.CHOICE,
            filterable=True,
        ),
        FieldSpec(
            "document_status",
            "Documentation status",
            kind=FieldKind.CHOICE,
            filterable=True,
        ),
    ),
)

COMPLAINTS = EntityProfile(
    name="complaints",
    description="Driver complaints, clarifications and comments",
    fields=(
        FieldSpec("id", "ID", filterable=True),
        FieldSpec("driver_id", "Driver ID", sortable=False),
        FieldSpec("driver_name", "Driver", searchable=True),
        FieldSpec("driver_rfc", "RFC", searchable=True),
        FieldSpec("driver_email", "Driver email", sortable=False),
        FieldSpec("type", "Type", kind=FieldKind.CHOICE, filterable=True),
        FieldSpec("received_at", "Received", kind=FieldKind.DATE),
        FieldSpec("updated_at", "Last update", kind=FieldKind.DATE, filterable=True),
        FieldSpec("status", "Status", kind=FieldKind.CHOICE, filterable=True),
    ),
)

PROFILES: dict[str, EntityProfile] = {
    profile.name: profile for profile in (DRIVERS, APPLICANTS, COMPLAINTS)
}


def get_profile(name: str) -> EntityProfile:
    """Look up a built-in profile.

    Raises:
        ProfileNotFoundError: If no profile has that name
    """
    try:
        return PROFILES[name]
    except KeyError:
        raise ProfileNotFoundError(name) from None
