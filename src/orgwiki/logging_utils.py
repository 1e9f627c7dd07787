import logging

logger = logging.getLogger("orgwiki")
logger.setLevel(logging.INFO)

handler = logging.StreamHandler()
handler.setFormatter(
    logging.Formatter("%(asctime)s %(name)s %(levelname)s: %(message)s")
)
logger.addHandler(handler)
logger.propagate = False
