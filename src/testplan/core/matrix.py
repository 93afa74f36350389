"""Expansion of generator fixtures into run configurations."""

from typing import Any, Callable, Optional, Sequence

from testplan.core.declarations import Configuration, ConfigurationEntry


def expand_configurations(
    fixtures: Sequence[str],
    domain: Callable[[str], Optional[Sequence[Any]]],
) -> list[Configuration]:
    """Build the cartesian product of every generator fixture's values.

    Args:
        fixtures: Fixture names in the order the test declares them
        domain: Lookup returning a fixture's values, or None for a plain fixture

    Returns:
        Configurations in encounter order; a single empty configuration
        when no fixture has values
    """
    configurations: list[Configuration] = [[]]
    for name in fixtures:
        values = domain(name)
        if values is None:
            continue
        configurations = [
            [*partial, ConfigurationEntry(name, value)]
            for partial in configurations
            for value in values
        ]
    return configurations


def serialize_configuration(configuration: Configuration) -> str:
    """Render a configuration as ``name=value`` pairs."""
    return ", ".join(f"{entry.name}={entry.value}" for entry in configuration)


def repeat_suffix(index: int) -> str:
    return f"#repeat-{index}#"
