import logging
from enum import Enum

from pymongo.errors import CollectionInvalid, DuplicateKeyError, OperationFailure, PyMongoError

from errors import CollectionCreationFailed, IndexCreationFailed, InitTimeout
from manifest import index_name

NAMESPACE_EXISTS = 48

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    CREATED = "created"
    ALREADY_PRESENT = "already-present"


def _norm_keys(raw):
    # server may hand back 1.0 / -1.0 for directions
    out = []
    for f, d in (raw.items() if isinstance(raw, dict) else raw):
        out.append((f, int(d) if isinstance(d, (int, float)) else d))
    return tuple(out)


def _timeout_or(exc, fallback_cls, message):
    if exc.timeout:
        return InitTimeout(f"Timed out: {message}: {exc}")
    return fallback_cls(f"{message}: {exc}")


class MongoSchemaStore:
    """
    Collection/index capability over a pymongo Database.
    Every call is create-if-absent so concurrent initializers converge.
    """

    def __init__(self, database):
        self.db = database

    def ensure_collection(self, name):
        try:
            if name in self.db.list_collection_names():
                return Outcome.ALREADY_PRESENT
            try:
                self.db.create_collection(name)
            except CollectionInvalid:
                logger.debug("Collection %s appeared concurrently", name)
                return Outcome.ALREADY_PRESENT
            except OperationFailure as e:
                # another replica won the create between our check and the command
                if e.code != NAMESPACE_EXISTS:
                    raise
                logger.debug("Collection %s appeared concurrently", name)
                return Outcome.ALREADY_PRESENT
            return Outcome.CREATED
        except PyMongoError as e:
            raise _timeout_or(e, CollectionCreationFailed, f"Could not create collection '{name}'")

    def existing_indexes(self, collection):
        """{name: (keys, unique)} for every index on the collection."""
        info = self.db[collection].index_information()
        return {
            name: (_norm_keys(spec["key"]), bool(spec.get("unique", False)))
            for name, spec in info.items()
        }

    def find_conflict(self, collection, keys, unique):
        """
        Compare a wanted index with what is already there.
        Returns (Outcome.ALREADY_PRESENT, None), (None, reason) or (None, None).
        """
        keys = tuple(keys)
        name = index_name(keys)
        existing = self.existing_indexes(collection)
        for other_name, (other_keys, other_unique) in existing.items():
            if other_keys == keys:
                if other_unique == unique:
                    return Outcome.ALREADY_PRESENT, None
                return None, (
                    f"index '{other_name}' on {collection} has the same keys "
                    f"but unique={other_unique}"
                )
        if name in existing:
            return None, (
                f"index '{name}' on {collection} already exists with keys {list(existing[name][0])}"
            )
        return None, None

    def ensure_index(self, collection, keys, unique=False):
        keys = tuple(keys)
        name = index_name(keys)
        label = f"index {collection}.{name}"
        try:
            present, conflict = self.find_conflict(collection, keys, unique)
            if present:
                return present
            if conflict:
                raise IndexCreationFailed(f"Conflicting definition for {label}: {conflict}")
            self.db[collection].create_index(list(keys), unique=unique, name=name)
            return Outcome.CREATED
        except DuplicateKeyError as e:
            raise IndexCreationFailed(
                f"Existing documents in '{collection}' violate unique {label}: {e}"
            )
        except PyMongoError as e:
            raise _timeout_or(e, IndexCreationFailed, f"Could not create {label}")
