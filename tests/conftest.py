"""pytest configuration and fixtures for pyqt-formstate tests."""

import pytest
from PyQt6.QtCore import QCoreApplication

from pyqt_formstate.protocols import set_form_config


@pytest.fixture(scope="session")
def qapp():
    """Create QCoreApplication instance for tests."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app
    # Don't quit - may cause issues with other tests


@pytest.fixture(autouse=True)
def default_config():
    """Every test starts and ends with the default configuration."""
    set_form_config(None)
    yield
    set_form_config(None)
