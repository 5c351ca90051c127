"""Exception classes for recordquery.

Only the boundaries raise: configuration loading, record loading and profile
lookup. The query stages themselves degrade to no-ops instead.
"""


class RecordQueryError(Exception):
    """Base exception for recordquery errors."""

    pass


class ConfigError(RecordQueryError, ValueError):
    """Raised when configuration cannot be read or is invalid."""

    pass


class SchemaError(RecordQueryError, ValueError):
    """Raised when a record collection is not homogeneous."""

    def __init__(self, index: int, missing: set[str], extra: set[str]):
        """Initialize with the offending record position and field drift."""
        self.index = index
        self.missing = missing
        self.extra = extra
        details = []
        if missing:
            details.append(f"missing {', '.join(sorted(missing))}")
        if extra:
            details.append(f"unexpected {', '.join(sorted(extra))}")
        super().__init__(f"Record {index} does not match schema: {'; '.join(details)}")


class RecordLoadError(RecordQueryError):
    """Raised when a record file cannot be loaded."""

    pass


class ProfileNotFoundError(RecordQueryError, KeyError):
    """Raised when an entity profile is not registered."""

    def __init__(self, name: str):
        """Initialize with profile name."""
        self.name = name
        super().__init__(f"Profile not found: {name}")

    def __str__(self) -> str:
        return self.args[0]
