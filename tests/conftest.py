# Headless Qt for the proxy model tests; PyQt6 is optional (``orderkit[qt]``)
# so the fixture skips instead of erroring when it is not installed.

import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(scope="session")
def qapp():
    QtWidgets = pytest.importorskip("PyQt6.QtWidgets")
    return QtWidgets.QApplication.instance() or QtWidgets.QApplication(sys.argv)
