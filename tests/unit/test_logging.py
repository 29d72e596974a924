from __future__ import annotations

import logging

import pytest
from assessment_platform.core.logging import add_service_name, resolve_level


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("debug", logging.DEBUG),
        (" WARNING ", logging.WARNING),
        ("not-a-level", logging.INFO),
        (logging.ERROR, logging.ERROR),
    ],
)
def test_resolve_level(raw: int | str, expected: int) -> None:
    assert resolve_level(raw) == expected


def test_service_name_added_to_events() -> None:
    processor = add_service_name("Auth Service")

    event = processor(None, "info", {"event": "login_success"})

    assert event == {"event": "login_success", "service": "Auth Service"}


def test_service_name_does_not_override_call_site() -> None:
    processor = add_service_name("Auth Service")

    event = processor(None, "debug", {"event": "health_check", "service": "custom"})

    assert event["service"] == "custom"
