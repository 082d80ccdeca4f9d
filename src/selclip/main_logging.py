"""Logging configuration for selclip diagnostics."""
import logging


def configure_logging(verbose: bool) -> None:
    """Route selclip log records to stderr.

    Args:
        verbose: If True, emit DEBUG records; otherwise WARNING and above.

    Abnormal binding statuses are only logged at DEBUG level, so they reach
    stderr only when verbose. Loggers outside the selclip package are left
    alone.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger = logging.getLogger("selclip")
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
