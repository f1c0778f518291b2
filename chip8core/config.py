"""Machine configuration."""

from typing import Optional

from chex import dataclass

from chip8core.logging import LEVELS


@dataclass(frozen=True)
class MachineConfig:
    """Options for building a ``Machine``.

    Attributes:
        seed: Seed for the ``CXNN`` random source. ``None`` draws one from the OS.
        log_level: Minimum level printed by the machine logger.
        trace: Log every executed instruction at DEBUG level.
        use_colors: Colour log levels when writing to a terminal.
    """
    seed: Optional[int] = None
    log_level: str = "WARNING"
    trace: bool = False
    use_colors: bool = True

    def validate(self) -> "MachineConfig":
        """Raise ``ValueError`` on inconsistent options, else return self."""
        if self.seed is not None and not 0 <= self.seed < 2**32:
            raise ValueError(f"seed must be in [0, 2**32), got {self.seed}")
        if self.log_level.upper() not in LEVELS:
            raise ValueError(f"Unknown log level '{self.log_level}'. Expected one of {LEVELS}")
        return self
