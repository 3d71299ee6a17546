import logging

package_logger = logging.getLogger("netstatus")

# Loggers of the HTTP stack that drown out poll-cycle messages at DEBUG
NOISY_LOGGERS = ("urllib3", "requests")


def setup_logging(log_level: str, logger: logging.Logger) -> None:
    """Set up logging for the netstatus CLI at the given level."""
    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {log_level}")

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logger.setLevel(numeric_level)
    package_logger.setLevel(numeric_level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))
    logger.debug(f"Logging initialized at level {log_level.upper()}")


def make_logger(name: str) -> logging.Logger:
    """Create a logger with the specified name."""
    return logging.getLogger(name)
