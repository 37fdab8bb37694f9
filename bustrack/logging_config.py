import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

def configure_logging(level: str = "INFO"):
    """Install a single stream handler on the bustrack logger"""
    logger = logging.getLogger("bustrack")
    logger.setLevel(level.upper())
    
    if not any(getattr(h, "_bustrack", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._bustrack = True
        logger.addHandler(handler)
    
    return logger
