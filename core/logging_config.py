import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def configure_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once for the process.
    Modules log through logging.getLogger(__name__).
    """
    global _configured

    root = logging.getLogger()
    root.setLevel(level.upper())
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    # uvicorn access lines duplicate our request logs
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    _configured = True
