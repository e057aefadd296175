import logging
import sys

CLIENT_LOGGERS = ("httpx", "httpcore")


class Log:
    """Centralized logging with structured format."""

    _logger: logging.Logger = logging.getLogger("dashboard")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Configure the logger with the specified level and stdout handler.

        HTTP client request lines are only shown at DEBUG level.
        """
        level = logging.getLevelName(log_level.upper())
        cls._logger.setLevel(level)
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            cls._logger.addHandler(handler)
        client_level = logging.DEBUG if level == logging.DEBUG else logging.WARNING
        for name in CLIENT_LOGGERS:
            logging.getLogger(name).setLevel(client_level)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        """Log an info message."""
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        """Log an error message."""
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        """Log a warning message."""
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        """Log a debug message."""
        cls._logger.debug(message, extra=kwargs)
