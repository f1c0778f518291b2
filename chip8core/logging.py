"""Console logging for the CHIP-8 core.

``ConsoleLogger`` prints levelled, optionally coloured lines with a running
timestamp. ``MachineLogger`` adds the events a host usually wants to see:
program loads, resets, key waits, faults and an optional instruction trace.
``progress_bar`` wraps long ``Machine.run`` loops in a tqdm bar.
"""

import sys
import time
from typing import Optional, TextIO

from tqdm import tqdm

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConsoleLogger:
    """Console logger with level filtering and ANSI colours."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(
        self,
        name: str = "chip8core",
        log_level: str = "WARNING",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream: Optional[TextIO] = None,
    ):
        if log_level.upper() not in LEVELS:
            raise ValueError(f"Unknown log level '{log_level}'. Expected one of {LEVELS}")
        self.name = name
        self.log_level = log_level.upper()
        self.stream = stream
        target = stream or sys.stdout
        self.use_colors = use_colors and hasattr(target, "isatty") and target.isatty()
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

    def is_enabled_for(self, level: str) -> bool:
        """Check if a message at ``level`` would be printed."""
        return LEVELS.index(level.upper()) >= LEVELS.index(self.log_level)

    def _format_message(self, level: str, message: str) -> str:
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        if self.use_colors:
            level_str = f"{self.COLORS[level]}{level_str}{self.RESET}"
        return f"{timestamp}{level_str}[{self.name}] {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        level = level.upper()
        if self.is_enabled_for(level):
            print(self._format_message(level, message), file=self.stream or sys.stdout, flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


class MachineLogger(ConsoleLogger):
    """Logger for machine lifecycle events."""

    def __init__(self, name: str = "Machine", trace: bool = False, **kwargs):
        super().__init__(name, **kwargs)
        self.trace = trace

    def log_program_loaded(self, size: int):
        self.info(f"Loaded {size}-byte program at 0x200")

    def log_reset(self):
        self.info("Machine reset")

    def log_instruction(self, address: int, instruction: int, mnemonic: str):
        """Trace one executed instruction (DEBUG, only with tracing on)."""
        if self.trace:
            self.debug(f"0x{address:03X}: {instruction:04X}  {mnemonic}")

    def log_key_wait(self, register: int):
        self.debug(f"Waiting for key press into V{register:X}")

    def log_key_resolved(self, register: int, key: int):
        self.debug(f"Key 0x{key:X} pressed, stored in V{register:X}")

    def log_fault(self, error: Exception, address: int):
        self.error(f"{type(error).__name__} at PC=0x{address:03X}: {error}")


def progress_bar(total: int, desc: Optional[str] = None, **kwargs) -> tqdm:
    """Build a tqdm bar counting executed steps."""
    for kwarg in ("total", "unit"):
        kwargs.pop(kwarg, None)
    return tqdm(total=total, desc=desc or f"Running ({total:,} steps)", unit="step", **kwargs)
