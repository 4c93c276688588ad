import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    # force=True so uvicorn reloads and repeated create_app() calls don't stack handlers
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, force=True)
