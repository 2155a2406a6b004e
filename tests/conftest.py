# Headless Qt for widget tests; painters and models need no QApplication.

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from chartkit.design import reduced_motion as rm  # noqa: E402


@pytest.fixture(autouse=True)
def _restore_reduced_motion():
    prev = rm.is_reduced_motion()
    yield
    rm.set_reduced_motion(prev)


@pytest.fixture
def no_motion():
    """Widgets jump straight to their final frame."""
    with rm.temporarily_reduced_motion(True):
        yield
