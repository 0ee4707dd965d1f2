"""
Declarative schema manifest for the budget tracker database.

The manifest is plain immutable data: the collections that must exist and
the indexes each of them needs. `initialize()` reconciles it against a live
store; nothing here talks to MongoDB.
"""
from dataclasses import dataclass, field
from typing import Tuple

from pymongo import ASCENDING, DESCENDING

from errors import InvalidManifest

DIRECTIONS = {ASCENDING: "asc", DESCENDING: "desc"}


def index_name(keys):
    """Default MongoDB index name, e.g. user_id_1_start_date_-1."""
    return "_".join(f"{f}_{d}" for f, d in keys)


@dataclass(frozen=True)
class CollectionSpec:
    name: str

    def describe(self):
        return f"collection {self.name}"


@dataclass(frozen=True)
class IndexSpec:
    collection: str
    keys: Tuple[Tuple[str, int], ...]
    unique: bool = False

    def __post_init__(self):
        # accept lists from callers but store a hashable tuple
        object.__setattr__(self, "keys", tuple((f, d) for f, d in self.keys))

    @property
    def name(self):
        return index_name(self.keys)

    def describe(self):
        keys = ", ".join(f"{f} {DIRECTIONS.get(d, d)}" for f, d in self.keys)
        kind = "unique index" if self.unique else "index"
        return f"{kind} {self.collection}({keys})"


@dataclass(frozen=True)
class SchemaManifest:
    collections: Tuple[CollectionSpec, ...] = field(default_factory=tuple)
    indexes: Tuple[IndexSpec, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "collections", tuple(self.collections))
        object.__setattr__(self, "indexes", tuple(self.indexes))

    @property
    def entries(self):
        """Collections first, then indexes, each in declared order."""
        return self.collections + self.indexes


def validate_manifest(manifest):
    """Raise InvalidManifest on the first structural problem found."""
    declared = set()
    for spec in manifest.collections:
        if not spec.name:
            raise InvalidManifest("Collection name must not be empty", entry=spec)
        if spec.name in declared:
            raise InvalidManifest(f"Duplicate {spec.describe()}", entry=spec)
        declared.add(spec.name)

    seen = {}
    for spec in manifest.indexes:
        if spec.collection not in declared:
            raise InvalidManifest(
                f"{spec.describe()} references undeclared collection '{spec.collection}'",
                entry=spec,
            )
        if not spec.keys:
            raise InvalidManifest(f"Index on '{spec.collection}' has no keys", entry=spec)
        fields = [f for f, _ in spec.keys]
        if len(set(fields)) != len(fields):
            raise InvalidManifest(f"{spec.describe()} repeats a field", entry=spec)
        for f, d in spec.keys:
            if not f or d not in DIRECTIONS:
                raise InvalidManifest(
                    f"{spec.describe()} has invalid key ({f!r}, {d!r})", entry=spec
                )
        ident = (spec.collection, spec.keys)
        if ident in seen:
            raise InvalidManifest(f"Duplicate {spec.describe()}", entry=spec)
        seen[ident] = spec


BUDGET_TRACKER_MANIFEST = SchemaManifest(
    collections=(
        CollectionSpec("users"),
        CollectionSpec("budgets"),
        CollectionSpec("expenses"),
        CollectionSpec("alerts"),
        CollectionSpec("alert_notifications"),
    ),
    indexes=(
        IndexSpec("users", [("email", ASCENDING)], unique=True),
        IndexSpec("users", [("reset_token", ASCENDING)]),

        IndexSpec("budgets", [("user_id", ASCENDING), ("start_date", DESCENDING)]),
        IndexSpec("budgets", [("is_active", ASCENDING), ("end_date", ASCENDING)]),

        IndexSpec("expenses", [("budget_id", ASCENDING), ("date", DESCENDING)]),
        IndexSpec("expenses", [("user_id", ASCENDING), ("date", DESCENDING)]),

        IndexSpec("alerts", [("user_id", ASCENDING)]),
        IndexSpec("alerts", [("budget_id", ASCENDING)]),
        IndexSpec("alerts", [("is_enabled", ASCENDING)]),

        IndexSpec("alert_notifications", [("user_id", ASCENDING), ("sent_at", DESCENDING)]),
    ),
)
