import logging
from pathlib import Path

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE_NAME = "pots.log"

# Cache for log settings to avoid repeated environment reads
_log_settings_cache = None


def _get_log_settings():
    """Get (log_mode, log_dir) from configuration."""
    global _log_settings_cache
    if _log_settings_cache is not None:
        return _log_settings_cache

    try:
        from potstranslate.config import load_config
        settings = load_config()
        _log_settings_cache = (settings.log_mode, settings.log_dir)
        return _log_settings_cache
    except Exception:
        # If config loading fails, default to console-only info logging
        return ('info', None)


def _level_for(log_mode: str) -> int:
    if log_mode == 'debug':
        return logging.DEBUG
    if log_mode == 'off':
        # Higher than CRITICAL disables everything
        return logging.CRITICAL + 1
    return logging.INFO


def _configure(logger: logging.Logger, log_mode: str, log_dir) -> None:
    """Bring level and handlers of a logger in line with log_mode."""
    level = _level_for(log_mode)
    logger.setLevel(level)
    log_format = logging.Formatter(LOG_FORMAT)

    file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
    console_handlers = [
        h for h in logger.handlers
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
    ]

    if log_mode == 'off':
        for handler in file_handlers + console_handlers:
            handler.close()
            logger.removeHandler(handler)
        return

    if not console_handlers:
        c_handler = logging.StreamHandler()
        c_handler.setFormatter(log_format)
        logger.addHandler(c_handler)
        console_handlers = [c_handler]
    for handler in console_handlers:
        handler.setLevel(level)

    if log_dir is not None and not file_handlers:
        try:
            Path(log_dir).mkdir(parents=True, exist_ok=True)
            f_handler = logging.FileHandler(Path(log_dir) / LOG_FILE_NAME, encoding='utf-8')
        except OSError:
            # Console logging still works without a writable log dir
            return
        f_handler.setLevel(logging.DEBUG)
        f_handler.setFormatter(log_format)
        logger.addHandler(f_handler)


def _clear_log_mode_cache():
    """Clear the cached log settings and reconfigure every package logger."""
    global _log_settings_cache
    _log_settings_cache = None

    log_mode, log_dir = _get_log_settings()
    for logger_name, logger in list(logging.Logger.manager.loggerDict.items()):
        # Placeholders are parents nobody asked for; leave them alone
        if logger_name.startswith('potstranslate') and isinstance(logger, logging.Logger):
            _configure(logger, log_mode, log_dir)


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    log_mode, log_dir = _get_log_settings()
    _configure(logger, log_mode, log_dir)
    return logger
