"""Logging setup for the metrics engine and its command line."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

# Chatty third-party loggers reached through the CSV download helper
NOISY_LIBRARY_LOGGERS = ('urllib3', 'requests')


def setup_logging(
    log_dir: Optional[Path] = None,
    level: int = logging.INFO,
    log_to_file: bool = True,
    log_to_console: bool = True,
    run_name: str = 'essencia',
) -> logging.Logger:
    """
    Attach handlers to the 'essencia' logger.

    Every engine module logs through a child of 'essencia', so one call here
    routes team mismatches, CSV warnings and download failures alike.
    Calling it again replaces the previous handlers.

    Args:
        log_dir: Directory for run logs (default: ./logs)
        level: Level for the engine logger and its handlers
        log_to_file: Write a timestamped log file per run
        log_to_console: Echo messages to stderr
        run_name: Prefix of the log file name

    Returns:
        The configured 'essencia' logger

    Example:
        from essencia.logging_config import setup_logging
        logger = setup_logging(level=logging.DEBUG, log_to_file=False)
        logger.debug("Tracing goal sources")
    """
    logger = logging.getLogger('essencia')
    logger.setLevel(level)
    logger.handlers = []

    if log_to_file:
        log_dir = Path(log_dir) if log_dir is not None else Path('logs')
        log_dir.mkdir(parents=True, exist_ok=True)

        stamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        file_handler = logging.FileHandler(log_dir / f'{run_name}_{stamp}.log', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S',
            )
        )
        logger.addHandler(file_handler)

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter('%(levelname)s [%(name)s]: %(message)s'))
        logger.addHandler(console_handler)

    # HTTP connection chatter only matters when tracing
    library_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)

    return logger


def get_logger(name: str = 'essencia') -> logging.Logger:
    """Return an engine logger; names outside 'essencia' are nested under it."""
    if name != 'essencia' and not name.startswith('essencia.'):
        name = f'essencia.{name}'
    return logging.getLogger(name)
