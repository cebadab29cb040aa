"""Configuration for irregularity detection and review orchestration.

Thresholds default to the values the dashboard has always used; each can be
overridden through ``CERTSCAN_*`` environment variables (the CLI loads a
``.env`` file first).
"""

import os
from dataclasses import dataclass

# Detection defaults
SIMILARITY_THRESHOLD = 0.8  # strictly-greater-than bound for "similar" names
MAX_TYPE_NAME_DISTANCE = 3  # edit distance for duplicate catalog entries
DEFAULT_FUNCTION = "Não especificado"  # written when the target type has no function

# Orchestration defaults
REFRESH_DEBOUNCE_SECONDS = 1.0
SOURCE_RETRY_ATTEMPTS = 3


def _env_float(key: str, default: float) -> float:
    raw = os.getenv(key)
    return float(raw) if raw else default


def _env_int(key: str, default: int) -> int:
    raw = os.getenv(key)
    return int(raw) if raw else default


@dataclass(frozen=True)
class DetectionConfig:
    """Configuration for the duplicate classifier and planners.

    Attributes:
        similarity_threshold: Names are "similar" when their similarity is
            strictly above this value and below 1.0.
        max_type_name_distance: Maximum edit distance between the full names
            of two catalog types on the same platform to flag them.
        default_function: Function written by standardization when the
            target type has none.
    """

    similarity_threshold: float = SIMILARITY_THRESHOLD
    max_type_name_distance: int = MAX_TYPE_NAME_DISTANCE
    default_function: str = DEFAULT_FUNCTION

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not 0.0 <= self.similarity_threshold < 1.0:
            msg = "similarity_threshold must be in [0, 1)"
            raise ValueError(msg)
        if self.max_type_name_distance < 0:
            msg = "max_type_name_distance must be non-negative"
            raise ValueError(msg)

    @classmethod
    def from_env(cls) -> "DetectionConfig":
        """Create configuration from ``CERTSCAN_*`` environment variables.

        Returns:
            Configuration with environment overrides applied.
        """
        return cls(
            similarity_threshold=_env_float("CERTSCAN_SIMILARITY_THRESHOLD", SIMILARITY_THRESHOLD),
            max_type_name_distance=_env_int(
                "CERTSCAN_MAX_TYPE_NAME_DISTANCE", MAX_TYPE_NAME_DISTANCE
            ),
            default_function=os.getenv("CERTSCAN_DEFAULT_FUNCTION", DEFAULT_FUNCTION),
        )


@dataclass(frozen=True)
class RefreshConfig:
    """Configuration for the review session's refresh behaviour.

    Attributes:
        debounce_seconds: Quiet period that coalesces refresh triggers.
        source_retry_attempts: Attempts for transient source read failures.
    """

    debounce_seconds: float = REFRESH_DEBOUNCE_SECONDS
    source_retry_attempts: int = SOURCE_RETRY_ATTEMPTS

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.debounce_seconds < 0:
            msg = "debounce_seconds must be non-negative"
            raise ValueError(msg)
        if self.source_retry_attempts < 1:
            msg = "source_retry_attempts must be at least 1"
            raise ValueError(msg)

    @classmethod
    def from_env(cls) -> "RefreshConfig":
        """Create configuration from ``CERTSCAN_*`` environment variables.

        Returns:
            Configuration with environment overrides applied.
        """
        return cls(
            debounce_seconds=_env_float("CERTSCAN_REFRESH_DEBOUNCE", REFRESH_DEBOUNCE_SECONDS),
            source_retry_attempts=_env_int("CERTSCAN_SOURCE_RETRIES", SOURCE_RETRY_ATTEMPTS),
        )
