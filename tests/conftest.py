import io
import logging

import pytest

from releaseflow.config import MilestoneOptions, Options, SemVerOptions


@pytest.fixture
def capture_logs():
    """Fixture to capture log output during tests."""
    log_stream = io.StringIO()
    handler = logging.StreamHandler(log_stream)
    logger = logging.getLogger("releaseflow")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    yield log_stream  # Yield the stream to the test function

    # Cleanup after the test
    logger.removeHandler(handler)
    log_stream.close()


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers the CLI attached to streams that no longer exist."""
    logger = logging.getLogger("releaseflow")
    handlers = list(logger.handlers)
    level = logger.level

    yield

    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
    logger.setLevel(level)


@pytest.fixture
def milestone_options():
    return Options(strategy=MilestoneOptions(prefix="R", base_number=0))


@pytest.fixture
def semver_options():
    return Options(strategy=SemVerOptions(base_number="0.0"))
