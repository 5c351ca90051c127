"""Record query engine for tabular dashboard data.

Filters, fuzzy-searches, sorts, paginates and exports in-memory record
collections described by an immutable query descriptor.
"""

__version__ = "0.1.0"
