import logging

from config import settings

logger = logging.getLogger("bmpcodec")
logger.setLevel(settings.log_level.upper())
if not logger.handlers:
    _handler = logging.StreamHandler()
    _formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    _handler.setFormatter(_formatter)
    logger.addHandler(_handler)
