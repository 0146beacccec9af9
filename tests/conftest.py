"""Global pytest configuration for simpdb.

Tests under `tests/contract/`, `tests/integration/` and `tests/functional/`
are marked with the name of their suite directory unless they already carry
that mark, so suites can be selected with ``-m``.
"""

from pathlib import Path

import pytest

# pylint: disable=unused-argument

TESTS_ROOT = Path(__file__).parent.resolve()
SUITE_MARKERS = ("contract", "integration", "functional")

pytest_plugins = ["tests.fixtures.records"]


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Add the suite mark matching the item's top-level test directory."""
    for item in items:
        path = item.path.resolve()
        for marker_name in SUITE_MARKERS:
            if TESTS_ROOT / marker_name not in path.parents:
                continue
            if not any(marker.name == marker_name for marker in item.iter_markers()):
                item.add_marker(getattr(pytest.mark, marker_name))
