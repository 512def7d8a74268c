import logging
import sys

ROOT_LOGGER = "shop_manager"


def get_logger(name=ROOT_LOGGER, level=logging.INFO):
    logger = logging.getLogger(name)
    if not logger.handlers:
        ch = logging.StreamHandler()
        ch.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
        logger.addHandler(ch)
    else:
        # stderr may have been swapped since the handler was made (e.g. CliRunner)
        for h in logger.handlers:
            if type(h) is logging.StreamHandler and h.stream is not sys.stderr:
                h.setStream(sys.stderr)
    logger.setLevel(level)
    return logger
