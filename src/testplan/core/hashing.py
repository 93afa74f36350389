"""Worker affinity hashing."""

import hashlib
from collections.abc import Mapping
from typing import Sequence

from testplan.core.fixtures import FixtureScope, Registration, UnknownFixtureError


def compute_worker_hash(fixtures: Sequence[str], registrations: Mapping[str, Registration]) -> str:
    """Hash the locations of the worker-scoped fixtures a test uses.

    Two tests hash equally iff their worker fixtures come from the same
    definitions, in the same order. Fixture values do not take part.

    Raises:
        UnknownFixtureError: If a fixture has no registration
    """
    digest = hashlib.sha1()
    for name in fixtures:
        if name not in registrations:
            raise UnknownFixtureError(name, getattr(registrations, "file", ""))
        registration = registrations[name]
        if registration.scope != FixtureScope.WORKER:
            continue
        digest.update(registration.location.encode("utf-8"))
    return digest.hexdigest()


def worker_key(affinity_hash: str, configuration_string: str) -> str:
    return f"{affinity_hash}@{configuration_string}"
