"""Test plan generation: from declarations to runs."""

import logging
from typing import Any, Callable, Iterator, Sequence

from testplan.config import PlanConfig
from testplan.core.declarations import SuiteDeclaration, TestDeclaration, TestRun
from testplan.core.filters import Pruned, filter_only, matches_grep, parse_grep
from testplan.core.fixtures import FileRegistrations, FixtureRegistry, fixtures_for_callback
from testplan.core.hashing import compute_worker_hash, worker_key
from testplan.core.matrix import expand_configurations, repeat_suffix, serialize_configuration

logger = logging.getLogger(__name__)

Resolver = Callable[[Callable[..., Any]], list[str]]


def generate_tests(
    suites: Sequence[SuiteDeclaration],
    config: PlanConfig,
    registry: FixtureRegistry,
    resolve: Resolver = fixtures_for_callback,
) -> SuiteDeclaration:
    """Expand declared suites into a tree of tests with their runs.

    The input declarations are not modified: every pass works on fresh
    copies and produces fresh runs.

    Args:
        suites: One top-level suite per declaring file
        config: Grep pattern and repeat count
        registry: Fixture registrations, scoped per file
        resolve: Returns the fixture names a test callback needs

    Returns:
        An untitled root suite holding the surviving file suites

    Raises:
        UnknownFixtureError: If a test depends on an unregistered fixture
    """
    root = SuiteDeclaration("")
    grep = parse_grep(config.grep)

    ordinal = 0
    for declared in suites:
        suite = declared.clone()
        ordinal = suite.renumber(ordinal)
        registrations = registry.for_file(suite.file)

        for test in suite.all_tests():
            if not matches_grep(grep, test.full_title()):
                continue
            _materialize_runs(test, registrations, config.repeat_each, resolve)

        root.add_suite(suite)

    result = filter_only(root)
    if isinstance(result, Pruned):
        root.entries = result.entries

    logger.debug(
        "Generated %d runs for %d tests",
        sum(len(t.runs) for t in root.all_tests()),
        sum(1 for _ in root.all_tests()),
    )
    return root


def _materialize_runs(
    test: TestDeclaration,
    registrations: FileRegistrations,
    repeat_each: int,
    resolve: Resolver,
) -> None:
    fixtures: list[str] = []
    try:
        fixtures = resolve(test.fn)
    except Exception as e:
        # The worker reports the test as failing; the rest of the file still runs.
        logger.debug("Could not resolve fixtures for %r: %s", test.full_title(), e)

    registrations_hash = compute_worker_hash(fixtures, registrations)

    for configuration in expand_configurations(fixtures, registrations.domain):
        for index in range(repeat_each):
            configuration_string = serialize_configuration(configuration) + repeat_suffix(index)
            test.runs.append(
                TestRun(
                    test=test,
                    configuration=configuration,
                    configuration_string=configuration_string,
                    worker_hash=worker_key(registrations_hash, configuration_string),
                )
            )


def iter_runs(root: SuiteDeclaration) -> Iterator[TestRun]:
    """Iterate over every generated run in declaration order."""
    for test in root.all_tests():
        yield from test.runs


def group_by_worker(root: SuiteDeclaration) -> dict[str, list[TestRun]]:
    """Group generated runs by the worker key they require."""
    groups: dict[str, list[TestRun]] = {}
    for run in iter_runs(root):
        groups.setdefault(run.worker_hash, []).append(run)
    return groups
