"""
CHIP-8 Emulator — Logging Setup

One logger tree rooted at "chip8_emulator". The console gets a rich
handler (WARNING+ by default) so unsupported opcodes and faults stand
out; an optional log file captures everything down to the per-opcode
DEBUG trace.

Log files use:
  2026-01-01 12:00:00 | DEBUG   | chip8_emulator.emu | step:123 | $200: 6A02 LD_BYTE
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "chip8_emulator"

FILE_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def default_log_file(log_dir: Union[str, Path]) -> Path:
    """Timestamped log path: <log_dir>/chip8_YYYYMMDD_HHMMSS.log"""
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    return Path(log_dir) / f"chip8_{ts}.log"


def setup_logging(
    name: str = LOGGER_NAME,
    level: int = logging.DEBUG,
    console_level: int = logging.WARNING,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """Configure and return the emulator logger.

    Calling it again for an already-configured logger returns it as-is.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    # Without a file there is nobody to read the DEBUG trace
    logger.setLevel(level if log_file is not None else console_level)

    # ── Console handler ──
    ch = RichHandler(
        level=console_level,
        console=Console(stderr=True),
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    logger.addHandler(ch)

    # ── File handler: everything at `level` and above ──
    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(path), encoding="utf-8")
        fh.setLevel(level)
        fh.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(fh)
        logger.info("Log file: %s", path)

    return logger
