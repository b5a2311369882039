import logging
import sys


class _NoiseFilter(logging.Filter):
    """Keep service logs, let third-party libraries through only at WARNING+."""

    _OWN = ("main", "database", "seed", "uvicorn")

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "root" or record.name.split(".")[0] in self._OWN:
            return True
        return record.levelno >= logging.WARNING


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger once, before the app starts serving."""
    root = logging.getLogger()
    root.setLevel(level)

    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    handler.addFilter(_NoiseFilter())
    root.addHandler(handler)

    logging.captureWarnings(True)
