import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Configure the root logger for the application.

    :param level: Name of the log level, e.g. ``"INFO"`` or ``"DEBUG"``.
    """
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
