
import logging
def get_logger(name:str="e20-sim", level=None):
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger
