# ipns/config.py
from dataclasses import dataclass
from typing import Any

from ipns.record.model import MAX_RECORD_SIZE


@dataclass(frozen=True)
class RecordConfig:
    """Defaults applied when building and validating IPNS records."""

    # Advisory cache lifetime written into new records, in nanoseconds
    default_ttl_ns: int = 60 * 60 * 1_000_000_000  # 1 hour

    # Emit signatureV1 alongside signatureV2 for older consumers
    v1_compatible: bool = True

    # Records larger than this are rejected before decoding
    max_record_size: int = MAX_RECORD_SIZE

    def __post_init__(self) -> None:
        if self.default_ttl_ns < 0:
            raise ValueError("default_ttl_ns must not be negative")
        if self.max_record_size <= 0:
            raise ValueError("max_record_size must be positive")

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> "RecordConfig":
        """Create RecordConfig from dictionary, ignoring unknown keys."""
        return cls(**{k: v for k, v in config.items() if k in cls.__annotations__})

    def to_dict(self) -> dict[str, Any]:
        return {
            "default_ttl_ns": self.default_ttl_ns,
            "v1_compatible": self.v1_compatible,
            "max_record_size": self.max_record_size,
        }


DEFAULT_RECORD_CONFIG = RecordConfig()
