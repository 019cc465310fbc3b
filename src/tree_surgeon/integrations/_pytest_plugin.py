"""pytest plugin for tree-surgeon.

Auto-discovered by pytest via the pytest11 entry point declared in pyproject.toml.
When the package is installed (even in editable mode), pytest discovers this plugin
automatically -- no conftest.py changes are needed.

Source: https://docs.pytest.org/en/stable/how-to/writing_plugins.html
"""

from __future__ import annotations

from typing import Any

import pytest

from tree_surgeon import DecomposeConfig, compose, decompose


@pytest.fixture(scope="session")
def assert_round_trip() -> Any:
    """Fixture that returns a callable round-trip asserter.

    The fixture is session-scoped because the returned callable is stateless
    (each call decomposes into a fresh RelationalModel).

    Usage in tests::

        def test_fixture_document(assert_round_trip):
            assert_round_trip({"user": {"name": "Ann"}, "tags": ["a", "b"]})

        def test_single_element_list_collapses(assert_round_trip):
            with pytest.raises(AssertionError, match=r"round trip"):
                assert_round_trip({"items": [{"a": 1}]})

    Returns:
        A callable ``_assert(tree, config=None) -> None`` that raises
        ``AssertionError`` when ``compose(decompose(tree))`` differs from
        ``tree``.
    """

    def _assert(tree: dict[str, Any], config: DecomposeConfig | None = None) -> None:
        """Assert that ``tree`` survives decompose followed by compose.

        Args:
            tree:   The document to check.
            config: Optional DecomposeConfig for the decomposition.

        Raises:
            AssertionError: When the composed document differs, with both
                documents in the message.
        """
        model = decompose(tree, config=config)
        composed = compose(model)
        if composed != tree:
            raise AssertionError(
                f"Document does not survive the round trip:\n"
                f"  original: {tree}\n"
                f"  composed: {composed}\n"
                f"  nodes: {len(model.nodes)}  relations: {len(model.relations)}"
            )

    return _assert
