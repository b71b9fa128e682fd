# (c) Copyright IBM Corp. 2025

import logging

logger = None


def get_standard_logger() -> logging.Logger:
    """
    Retrieves and configures a standard logger for the porthound package

    @return: Logger
    """
    standard_logger = logging.getLogger("porthound")

    if not standard_logger.handlers:
        ch = logging.StreamHandler()
        f = logging.Formatter(
            "%(asctime)s: %(process)d %(levelname)s %(name)s: %(message)s"
        )
        ch.setFormatter(f)
        standard_logger.addHandler(ch)
    standard_logger.setLevel(logging.WARN)
    return standard_logger


def update_log_level(log_level: int) -> None:
    """Uses <log_level> to update the package logger"""
    if log_level not in [logging.DEBUG, logging.INFO, logging.WARN, logging.ERROR]:
        logger.warning("update_log_level: Unknown log level set")
        return

    logger.setLevel(log_level)


logger = get_standard_logger()
