import logging
from .config import settings

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s - %(message)s"

def setup_logging(level: str = None) -> None:
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
    )
    # uvicorn already logs every request line
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
