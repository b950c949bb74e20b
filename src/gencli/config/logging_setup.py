"""ログ設定の適用"""

import logging

from gencli.config.models import LoggingConfig

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(config: LoggingConfig | None) -> None:
    """Configure logging based on config.

    Installs a stderr handler on first use, then applies the level, the
    format, and per-logger levels.

    Args:
        config: Logging configuration. If None, uses defaults.
    """
    if config is None:
        config = LoggingConfig()

    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(format=config.format, datefmt=DATE_FORMAT)

    level = getattr(logging, config.level.upper(), logging.WARNING)
    root_logger.setLevel(level)

    formatter = logging.Formatter(config.format, datefmt=DATE_FORMAT)
    for handler in root_logger.handlers:
        handler.setFormatter(formatter)

    if config.loggers:
        for logger_name, logger_level in config.loggers.items():
            individual_logger = logging.getLogger(logger_name)
            individual_level = getattr(
                logging, str(logger_level).upper(), logging.WARNING
            )
            individual_logger.setLevel(individual_level)
            logger.debug(
                "Set logger '%s' to level %s", logger_name, str(logger_level).upper()
            )
