import logging

from claudius.log import configure_logging


def test_configure_logging_is_idempotent():
    logger = logging.getLogger("claudius")
    before = list(logger.handlers)
    try:
        configure_logging()
        configure_logging(verbose=True)
        added = [h for h in logger.handlers if h not in before]
        assert len(added) == 1
        assert logger.level == logging.DEBUG
        configure_logging()
        assert logger.level == logging.INFO
    finally:
        for handler in logger.handlers[:]:
            if handler not in before:
                logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
