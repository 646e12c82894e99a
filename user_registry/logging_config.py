import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(threadName)s %(name)s - %(message)s"


def setup_logging(level: str = "INFO") -> None:
    level = (level or "INFO").upper()
    if not isinstance(logging.getLevelName(level), int):
        level = "INFO"
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # werkzeug logs every request at INFO; our own access log covers that at DEBUG
    if level != "DEBUG":
        logging.getLogger("werkzeug").setLevel(logging.WARNING)
