"""Behavior tests for the public API logging decorator."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from packages.stash_shared.errors import ConflictError
from packages.stash_shared.logging import get_context, public_api_logged
from packages.stash_shared.logging.config import ContextFilter

_LOGGER = logging.getLogger("stash.tests.public_api")


@pytest.fixture
def captured(caplog: pytest.LogCaptureFixture) -> Iterator[pytest.LogCaptureFixture]:
    """Capture decorator records with their bound context attached."""
    context_filter = ContextFilter()
    caplog.handler.addFilter(context_filter)
    with caplog.at_level(logging.DEBUG, logger=_LOGGER.name):
        yield caplog
    caplog.handler.removeFilter(context_filter)


def _completion(records: list[logging.LogRecord]) -> logging.LogRecord:
    matches = [r for r in records if r.getMessage() == "Public API completion"]
    assert len(matches) == 1
    return matches[0]


def test_success_logs_invocation_and_completion(captured) -> None:
    """Completion should report success and the selected keyword ids."""

    @public_api_logged(
        logger=_LOGGER,
        component_id="service_test",
        id_fields=("virtual_path", "missing"),
    )
    def resolve(*, virtual_path: str) -> str:
        return virtual_path.upper()

    assert resolve(virtual_path="a/skin.png") == "A/SKIN.PNG"

    invocation = captured.records[0]
    assert invocation.getMessage() == "Public API invocation"
    assert invocation.levelno == logging.DEBUG
    assert invocation.context["event"] == "public_api_invocation"
    completion = _completion(captured.records)
    assert completion.levelno == logging.INFO
    assert completion.context["component_id"] == "service_test"
    assert completion.context["api_name"] == "resolve"
    assert completion.context["virtual_path"] == "a/skin.png"
    assert completion.context["success"] == "True"
    assert "missing" not in completion.context
    assert "errors" not in completion.context


def test_ids_are_bound_while_the_method_runs(captured) -> None:
    """Log lines emitted inside the method carry the invocation ids."""
    seen: dict[str, str] = {}

    @public_api_logged(
        logger=_LOGGER, component_id="service_test", id_fields=("virtual_path",)
    )
    def delete_reference(*, virtual_path: str) -> bool:
        seen.update(get_context())
        return True

    delete_reference(virtual_path="b/skin.png")

    assert seen["virtual_path"] == "b/skin.png"
    assert seen["api_name"] == "delete_reference"
    assert "virtual_path" not in get_context()


def test_failure_is_logged_and_reraised(captured) -> None:
    """Exceptions should produce a warning completion and still propagate."""

    @public_api_logged(logger=_LOGGER, component_id="service_test")
    def register() -> None:
        raise ConflictError("taken")

    with pytest.raises(ConflictError):
        register()

    completion = _completion(captured.records)
    assert completion.levelno == logging.WARNING
    assert completion.context["success"] == "False"
    assert completion.context["error_category"] == "conflict"
    assert completion.context["errors"] == "ConflictError: taken"


def test_unclassified_failure_is_internal(captured) -> None:
    @public_api_logged(logger=_LOGGER, component_id="service_test", api_name="scan")
    def broken() -> None:
        raise KeyError("x")

    with pytest.raises(KeyError):
        broken()

    completion = _completion(captured.records)
    assert completion.context["api_name"] == "scan"
    assert completion.context["error_category"] == "internal"
