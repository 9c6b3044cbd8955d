import logging


def configure_logging(level: str) -> None:
    """Configure process-wide logging format once."""

    logging.basicConfig(
        level=getattr(logging, (level or "INFO").upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
