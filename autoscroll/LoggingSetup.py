# autoscroll/LoggingSetup.py
import io
import sys
import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler

LOG_FILE_NAME = "autoscroll.log"
LOG_FORMAT = '[%(asctime)s] [%(levelname)s] %(message)s'

# Frame-level chatter from the WebSocket library is only useful when debugging
_NOISY_LOGGERS = ("websockets", "asyncio")


def _utf8_console() -> None:
    """Rewrap stdout/stderr so lyrics with accents never raise UnicodeEncodeError."""
    if hasattr(sys.stdout, 'buffer'):
        sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8', errors='replace', line_buffering=True)
        sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8', errors='replace', line_buffering=True)


def _file_handler(log_path: Path) -> RotatingFileHandler:
    # 10MB per file, 5 backups
    return RotatingFileHandler(log_path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding='utf-8')


def setup_logging(logs_dir: Path, verbose: bool = False, is_frozen: bool = False) -> None:
    """
    Configure the root logger for a follower session.

    Every record goes to logs_dir/autoscroll.log. When running from a
    terminal (not frozen), records are echoed to stdout as well.

    Args:
        logs_dir: Directory to store log files, created if missing
        verbose: DEBUG level with per-fragment match details; otherwise INFO
        is_frozen: Frozen GUI build without a console, file output only
    """
    if not is_frozen:
        _utf8_console()

    logs_dir.mkdir(parents=True, exist_ok=True)

    level = logging.DEBUG if verbose else logging.INFO
    formatter = logging.Formatter(LOG_FORMAT)

    handlers: list[logging.Handler] = [_file_handler(logs_dir / LOG_FILE_NAME)]
    if not is_frozen:
        handlers.append(logging.StreamHandler(sys.stdout))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)

    logging.info(f"Logging initialized: level={logging.getLevelName(level)}, frozen={is_frozen}")
