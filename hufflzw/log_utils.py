import logging

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def setup_logging(name: str = "hufflzw", level=logging.WARNING, logfile=None) -> logging.Logger:
    if isinstance(level, str):
        level = getattr(logging, level.upper())
    if not logging.getLogger().handlers:
        handlers = [logging.StreamHandler()]
        if logfile:
            handlers.append(logging.FileHandler(logfile))
        logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers)
    logging.getLogger("hufflzw").setLevel(level)
    return logging.getLogger(name)
