from dataclasses import dataclass, field
from typing import List

from store import MongoSchemaStore


@dataclass
class SchemaStatus:
    missing_collections: List[str] = field(default_factory=list)
    missing_indexes: List[str] = field(default_factory=list)
    conflicting_indexes: List[str] = field(default_factory=list)

    @property
    def in_sync(self):
        return not (self.missing_collections or self.missing_indexes or self.conflicting_indexes)

    def to_dict(self):
        return {
            "in_sync": self.in_sync,
            "missing_collections": self.missing_collections,
            "missing_indexes": self.missing_indexes,
            "conflicting_indexes": self.conflicting_indexes,
        }


def inspect_schema(database, manifest):
    """Read-only diff between the manifest and the live database."""
    store = MongoSchemaStore(database)
    status = SchemaStatus()

    present = set(database.list_collection_names())
    for spec in manifest.collections:
        if spec.name not in present:
            status.missing_collections.append(spec.name)

    for spec in manifest.indexes:
        label = f"{spec.collection}.{spec.name}"
        if spec.collection not in present:
            status.missing_indexes.append(label)
            continue
        found, conflict = store.find_conflict(spec.collection, spec.keys, spec.unique)
        if conflict:
            status.conflicting_indexes.append(f"{label}: {conflict}")
        elif not found:
            status.missing_indexes.append(label)
    return status
