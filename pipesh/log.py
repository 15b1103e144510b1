import logging
import sys

LOGGER_NAME = "pipesh"
LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(threadName)s] %(name)s: %(message)s"


def configure_logging(debug: bool = False) -> logging.Logger:
    """
    Configura el logger raiz de la shell.

    Por defecto solo se muestran WARNING o superiores en stderr, de modo que
    la salida normal de la shell no cambia. Con PIPESH_DEBUG=1 se activan
    las trazas de depuracion.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.propagate = False
    return logger
