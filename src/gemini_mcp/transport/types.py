"""Transport layer types and configuration."""

from dataclasses import dataclass
from enum import Enum


class FramingMode(Enum):
    """Byte-level scheme delimiting one message from the next."""

    LINE = "line"
    """Newline-delimited JSON (primary)."""

    CONTENT_LENGTH = "content-length"
    """``Content-Length`` header block followed by the body (legacy)."""

    @classmethod
    def parse(cls, value: str) -> "FramingMode":
        """Resolve a configuration string, accepting a few aliases."""
        normalized = value.strip().lower()
        aliases = {
            "ndjson": cls.LINE,
            "newline": cls.LINE,
            "length-prefixed": cls.CONTENT_LENGTH,
            "legacy": cls.CONTENT_LENGTH,
        }
        if normalized in aliases:
            return aliases[normalized]
        try:
            return cls(normalized)
        except ValueError:
            choices = [m.value for m in cls] + sorted(aliases)
            raise ValueError(f"Unknown framing {value!r}; expected one of {choices}")


@dataclass
class TransportConfig:
    """Configuration for the stdio transport."""

    framing: FramingMode = FramingMode.LINE
    """Framing used in both directions for the lifetime of the transport."""

    read_chunk_size: int = 64 * 1024
    """Maximum bytes requested from the input stream per read."""

    def __post_init__(self) -> None:
        """Validate configuration."""
        if isinstance(self.framing, str):
            self.framing = FramingMode.parse(self.framing)
        if self.read_chunk_size < 1:
            raise ValueError("read_chunk_size must be positive")
