import logging

import pytest

from app.logging_config import configure_logging, level_number


@pytest.mark.parametrize(
    "name, expected",
    [
        ("debug", logging.DEBUG),
        ("WARNING", logging.WARNING),
        (" error ", logging.ERROR),
        ("verbose", logging.INFO),
        ("", logging.INFO),
    ],
)
def test_level_number(name, expected):
    assert level_number(name) == expected


def test_configure_logging_accepts_unknown_level():
    try:
        configure_logging(level="verbose")
    finally:
        configure_logging()
