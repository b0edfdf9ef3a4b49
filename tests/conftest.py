import logging

import pytest


@pytest.fixture(autouse=True)
def reset_package_logger():
    """The CLI attaches handlers bound to the captured stderr; drop them after each test."""
    yield
    logger = logging.getLogger("softraster")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
