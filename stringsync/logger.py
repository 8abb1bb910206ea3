import logging
from pathlib import Path

LOG_DIR = Path(__file__).parent.parent / "logs"
LOG_FILE = LOG_DIR / "stringsync.log"

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_MODES = ('off', 'info', 'debug')

# Cache for log mode to avoid repeated config reads
_log_mode_cache = None
_log_to_file = False


def _get_log_mode():
    """Get log mode from configuration."""
    global _log_mode_cache
    if _log_mode_cache is not None:
        return _log_mode_cache

    try:
        from stringsync.config import load_config
        log_mode = load_config().get('log_mode', 'info')
    except Exception:
        # Config not importable yet (or unreadable); retry on the next logger
        return 'info'

    if log_mode not in LOG_MODES:
        log_mode = 'info'
    _log_mode_cache = log_mode
    return log_mode


def _level_for(log_mode: str) -> int:
    if log_mode == 'debug':
        return logging.DEBUG
    if log_mode == 'off':
        # Higher than CRITICAL disables everything
        return logging.CRITICAL + 1
    return logging.INFO


def _file_handler() -> logging.FileHandler:
    LOG_DIR.mkdir(exist_ok=True)
    f_handler = logging.FileHandler(LOG_FILE)
    f_handler.setLevel(logging.DEBUG)
    f_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return f_handler


def _apply_log_mode(logger: logging.Logger, log_mode: str, log_to_file: bool) -> None:
    level = _level_for(log_mode)
    logger.setLevel(level)

    has_file_handler = any(isinstance(h, logging.FileHandler) for h in logger.handlers)
    if log_to_file and log_mode != 'off' and not has_file_handler:
        logger.addHandler(_file_handler())
    elif (log_mode == 'off' or not log_to_file) and has_file_handler:
        for handler in [h for h in logger.handlers if isinstance(h, logging.FileHandler)]:
            handler.close()
            logger.removeHandler(handler)

    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
            handler.setLevel(level)


def set_log_mode(log_mode: str, log_to_file: bool = False) -> None:
    """
    Switch the log mode of every logger created through get_logger.

    Args:
        log_mode: One of 'off', 'info', 'debug'
        log_to_file: Also write to logs/stringsync.log when not 'off'
    """
    global _log_mode_cache, _log_to_file
    if log_mode not in LOG_MODES:
        raise ValueError(f"Unknown log mode '{log_mode}', expected one of {', '.join(LOG_MODES)}")
    _log_mode_cache = log_mode
    _log_to_file = log_to_file

    # Only loggers that have handlers were created by get_logger
    for logger_name in list(logging.Logger.manager.loggerDict.keys()):
        logger = logging.getLogger(logger_name)
        if logger.handlers and logger_name.startswith('stringsync'):
            _apply_log_mode(logger, log_mode, log_to_file)


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    log_mode = _get_log_mode()

    # Prevent duplicate handlers if logger already configured
    if logger.handlers:
        _apply_log_mode(logger, log_mode, _log_to_file)
        return logger

    c_handler = logging.StreamHandler()
    c_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(c_handler)
    _apply_log_mode(logger, log_mode, _log_to_file)

    return logger
