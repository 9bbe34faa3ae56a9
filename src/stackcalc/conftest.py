import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_structlog():
    """Drop logging configuration installed by CLI invocations."""
    yield
    structlog.reset_defaults()
