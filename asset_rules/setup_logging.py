import logging, sys

# Libraries that are chatty at INFO; keep them at WARNING unless asked for
QUIET_LOGGERS = ("sqlalchemy.engine", "httpx")

def setup_logging(level: str = "INFO"):
    """Send every record to stdout once; handlers trace through child loggers."""
    logger = logging.getLogger()
    if logger.handlers:  # don’t double add during reload
        return
    lvl = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(lvl)
    h = logging.StreamHandler(sys.stdout)
    h.setFormatter(logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s :: %(message)s"
    ))
    logger.addHandler(h)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(lvl, logging.WARNING))
