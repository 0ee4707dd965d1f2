"""
Schema initializer: reconcile a SchemaManifest against a store.

One linear pass. Collections first, then indexes, each in manifest order.
Every step is create-if-absent, so a run can be repeated or resumed after a
failure without undoing anything.
"""
import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional, Union

import pymongo

from errors import InitError, InitTimeout
from manifest import CollectionSpec, IndexSpec, SchemaManifest, validate_manifest
from store import Outcome

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportEntry:
    spec: Union[CollectionSpec, IndexSpec]
    outcome: Outcome

    def to_dict(self):
        d = {"outcome": self.outcome.value}
        if isinstance(self.spec, CollectionSpec):
            d.update(kind="collection", collection=self.spec.name)
        else:
            d.update(
                kind="index",
                collection=self.spec.collection,
                name=self.spec.name,
                keys=[list(k) for k in self.spec.keys],
                unique=self.spec.unique,
            )
        return d


@dataclass
class InitReport:
    entries: List[ReportEntry] = field(default_factory=list)

    def add(self, spec, outcome):
        self.entries.append(ReportEntry(spec, outcome))

    @property
    def created(self):
        return [e.spec for e in self.entries if e.outcome is Outcome.CREATED]

    @property
    def already_present(self):
        return [e.spec for e in self.entries if e.outcome is Outcome.ALREADY_PRESENT]

    def __len__(self):
        return len(self.entries)

    def to_dict(self):
        return {
            "created": len(self.created),
            "already_present": len(self.already_present),
            "entries": [e.to_dict() for e in self.entries],
        }


class _Deadline:
    def __init__(self, seconds):
        self.expires = None if seconds is None else time.monotonic() + seconds

    def remaining(self, spec):
        if self.expires is None:
            return None
        left = self.expires - time.monotonic()
        if left <= 0:
            raise InitTimeout(f"Deadline exceeded before {spec.describe()}", entry=spec)
        return left


def _apply(store, spec):
    if isinstance(spec, CollectionSpec):
        return store.ensure_collection(spec.name)
    return store.ensure_index(spec.collection, spec.keys, spec.unique)


def initialize(store, manifest: SchemaManifest, deadline: Optional[float] = None) -> InitReport:
    """
    Ensure every collection and index in `manifest` exists in `store`.

    `deadline` is a budget in seconds for the whole run; each store call
    runs under pymongo.timeout() with whatever is left of it.

    Returns the InitReport. On failure raises an InitError whose `report`
    holds the steps completed so far and whose `entry` is the failing spec.
    Nothing is rolled back.
    """
    report = InitReport()
    try:
        validate_manifest(manifest)
    except InitError as e:
        e.report = report
        raise

    clock = _Deadline(deadline)
    for spec in manifest.entries:
        try:
            with pymongo.timeout(clock.remaining(spec)):
                outcome = _apply(store, spec)
        except InitError as e:
            if e.entry is None:
                e.entry = spec
            e.report = report
            logger.error("Schema initialization failed at %s: %s", spec.describe(), e)
            raise
        report.add(spec, outcome)
        if outcome is Outcome.CREATED:
            logger.info("Created %s", spec.describe())
        else:
            logger.debug("%s already present", spec.describe())

    logger.info(
        "Schema initialized: %d created, %d already present",
        len(report.created), len(report.already_present),
    )
    return report
