import logging
import os
import tempfile
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_DIR_NAME = "planview"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def resolve_logs_dir(log_dir_name: str = LOG_DIR_NAME) -> Path:
    """
    Resolve the directory to store viewer logs.

    Strategy:
    - Use PLANVIEW_LOG_DIR as-is if set.
    - Fall back to XDG state/cache locations, then `cwd/logs/<log_dir_name>`.
    - Final fallback: tempdir/<log_dir_name>.
    """
    candidates = []

    env_override = os.environ.get("PLANVIEW_LOG_DIR")
    if env_override:
        candidates.append(Path(env_override).expanduser())

    state_home = Path(os.environ.get("XDG_STATE_HOME", Path.home() / ".local" / "state"))
    cache_home = Path(os.environ.get("XDG_CACHE_HOME", Path.home() / ".cache"))
    candidates.append(state_home / "planview" / "logs" / log_dir_name)
    candidates.append(cache_home / "planview" / "logs" / log_dir_name)
    candidates.append(Path.cwd() / "logs" / log_dir_name)

    for target in candidates:
        try:
            target.mkdir(parents=True, exist_ok=True)
            return target
        except OSError:
            continue

    temp_fallback = Path(tempfile.gettempdir()) / log_dir_name
    temp_fallback.mkdir(parents=True, exist_ok=True)
    return temp_fallback


def build_rotating_file_handler(
    log_dir: Path,
    filename: str,
    *,
    retention: int = 5,
    max_bytes: int = 512 * 1024,
    formatter: Optional[logging.Formatter] = None,
) -> logging.Handler:
    """Construct a rotating file handler with sane defaults."""
    retention = max(1, retention)
    backup_count = max(0, retention - 1)
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_dir / filename,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    if formatter is not None:
        handler.setFormatter(formatter)
    return handler


def resolve_log_level(debug_enabled: bool) -> int:
    return logging.DEBUG if debug_enabled else logging.INFO


def configure_logging(
    debug_enabled: bool = False,
    retention: int = 5,
    log_dir: Optional[Path] = None,
) -> logging.Logger:
    """Attach console and rotating file handlers to the planview logger."""
    logger = logging.getLogger("planview")
    logger.setLevel(resolve_log_level(debug_enabled))
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    formatter = logging.Formatter(LOG_FORMAT)
    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)
    try:
        file_handler = build_rotating_file_handler(
            log_dir or resolve_logs_dir(),
            "planview.log",
            retention=retention,
            formatter=formatter,
        )
    except OSError as e:
        logger.warning("File logging disabled: %s", e)
    else:
        logger.addHandler(file_handler)
    logger.propagate = False
    return logger
