import pytest
from pymongo import ASCENDING, DESCENDING

from errors import InvalidManifest
from initializer import initialize
from manifest import (
    BUDGET_TRACKER_MANIFEST,
    CollectionSpec,
    IndexSpec,
    SchemaManifest,
    validate_manifest,
)


def test_budget_tracker_manifest_is_valid():
    validate_manifest(BUDGET_TRACKER_MANIFEST)
    names = [c.name for c in BUDGET_TRACKER_MANIFEST.collections]
    assert names == ["users", "budgets", "expenses", "alerts", "alert_notifications"]
    assert len(BUDGET_TRACKER_MANIFEST.indexes) == 10


def test_only_email_index_is_unique():
    unique = [i for i in BUDGET_TRACKER_MANIFEST.indexes if i.unique]
    assert unique == [IndexSpec("users", [("email", ASCENDING)], unique=True)]


def test_index_names_follow_mongo_defaults():
    spec = IndexSpec("budgets", [("user_id", ASCENDING), ("start_date", DESCENDING)])
    assert spec.name == "user_id_1_start_date_-1"
    assert spec.describe() == "index budgets(user_id asc, start_date desc)"


def test_specs_are_immutable_and_hashable():
    spec = IndexSpec("users", [("email", ASCENDING)], unique=True)
    with pytest.raises(AttributeError):
        spec.unique = False
    assert spec in {IndexSpec("users", (("email", ASCENDING),), unique=True)}


def test_undeclared_collection_fails_before_any_mutation(fake_store):
    manifest = SchemaManifest(
        collections=[CollectionSpec("users")],
        indexes=[
            IndexSpec("users", [("email", ASCENDING)], unique=True),
            IndexSpec("orders", [("user_id", ASCENDING)]),
        ],
    )
    with pytest.raises(InvalidManifest) as exc:
        initialize(fake_store, manifest)

    assert "orders" in str(exc.value)
    assert exc.value.entry == IndexSpec("orders", [("user_id", ASCENDING)])
    assert len(exc.value.report) == 0
    assert fake_store.calls == []


def test_duplicate_index_rejected():
    manifest = SchemaManifest(
        collections=[CollectionSpec("alerts")],
        indexes=[
            IndexSpec("alerts", [("user_id", ASCENDING)]),
            IndexSpec("alerts", [("user_id", ASCENDING)], unique=True),
        ],
    )
    with pytest.raises(InvalidManifest, match="Duplicate"):
        validate_manifest(manifest)


def test_same_fields_different_order_is_not_a_duplicate():
    manifest = SchemaManifest(
        collections=[CollectionSpec("expenses")],
        indexes=[
            IndexSpec("expenses", [("user_id", ASCENDING), ("date", DESCENDING)]),
            IndexSpec("expenses", [("date", DESCENDING), ("user_id", ASCENDING)]),
        ],
    )
    validate_manifest(manifest)


def test_duplicate_collection_rejected():
    manifest = SchemaManifest(collections=[CollectionSpec("users"), CollectionSpec("users")])
    with pytest.raises(InvalidManifest, match="Duplicate collection users"):
        validate_manifest(manifest)


@pytest.mark.parametrize("keys", [
    [],
    [("email", 2)],
    [("", ASCENDING)],
    [("email", ASCENDING), ("email", DESCENDING)],
])
def test_malformed_index_keys_rejected(keys):
    manifest = SchemaManifest(
        collections=[CollectionSpec("users")],
        indexes=[IndexSpec("users", keys)],
    )
    with pytest.raises(InvalidManifest):
        validate_manifest(manifest)
