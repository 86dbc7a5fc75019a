import logging

logger = logging.getLogger("otcelb")

def log_request(prefix: str, correlation_id: str, dump: bytes):
    logger.info("%s request sent [%s]: %s", prefix, correlation_id, _text(dump))

def log_response(prefix: str, correlation_id: str, dump: bytes):
    logger.info("%s request received [%s]: %s", prefix, correlation_id, _text(dump))

def log_dump_error(what: str, exc: BaseException):
    logger.warning("Error occurred while dumping %s: %s", what, exc)

def _text(dump: bytes) -> str:
    return dump.decode("utf-8", errors="replace")
