"""
Configuration management for the reseed counter registry.

Settings control which digest feeds the entropy pool, how counter
arithmetic behaves at the 32-bit boundary, and how many identifier draws a
creation may spend on collisions. Values can come from keyword arguments, a
JSON file, or ``RESEED_*`` environment variables.
"""

import json
import os
from dataclasses import dataclass, asdict
from typing import Optional

from .crypto.hashing import DEFAULT_ALGORITHM, supported_algorithms

OVERFLOW_WRAP = "wrap"
OVERFLOW_CHECKED = "checked"
OVERFLOW_POLICIES = (OVERFLOW_WRAP, OVERFLOW_CHECKED)

ENV_PREFIX = "RESEED_"


class ConfigError(Exception):
    """Raised when configuration values are invalid or cannot be loaded."""
    pass


@dataclass(frozen=True)
class RegistryConfig:
    """
    Registry settings.

    Attributes:
        hash_algorithm: Digest used to seed and reseed the entropy pool
        overflow: ``"wrap"`` for two's complement wraparound, ``"checked"``
            to reject updates that leave the signed 32-bit range
        max_id_attempts: Identifier draws allowed per creation before giving up
    """

    hash_algorithm: str = DEFAULT_ALGORITHM
    overflow: str = OVERFLOW_WRAP
    max_id_attempts: int = 4

    def __post_init__(self):
        if self.hash_algorithm not in supported_algorithms():
            raise ConfigError(
                f"Unknown hash algorithm {self.hash_algorithm!r}, "
                f"expected one of {', '.join(supported_algorithms())}"
            )
        if self.overflow not in OVERFLOW_POLICIES:
            raise ConfigError(
                f"Unknown overflow policy {self.overflow!r}, "
                f"expected one of {', '.join(OVERFLOW_POLICIES)}"
            )
        if isinstance(self.max_id_attempts, bool) or not isinstance(self.max_id_attempts, int):
            raise ConfigError("max_id_attempts must be an integer")
        if self.max_id_attempts < 1:
            raise ConfigError("max_id_attempts must be at least 1")

    @classmethod
    def load(cls, path: str) -> 'RegistryConfig':
        """
        Load settings from a JSON file.

        Args:
            path: Path to a JSON object with any of the config fields

        Returns:
            RegistryConfig

        Raises:
            ConfigError: If the file is missing, malformed, or has bad values
        """
        if not os.path.exists(path):
            raise ConfigError(f"Config file not found: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigError(f"Failed to read config file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a JSON object")

        unknown = set(data) - set(cls.__dataclass_fields__)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")

        return cls(**data)

    @classmethod
    def from_env(cls, environ: Optional[dict] = None, prefix: str = ENV_PREFIX) -> 'RegistryConfig':
        """
        Build settings from environment variables.

        Reads ``<prefix>HASH_ALGORITHM``, ``<prefix>OVERFLOW`` and
        ``<prefix>MAX_ID_ATTEMPTS``; unset variables keep their defaults.

        Args:
            environ: Mapping to read instead of ``os.environ``
            prefix: Variable name prefix

        Returns:
            RegistryConfig
        """
        if environ is None:
            environ = os.environ

        kwargs = {}
        if f"{prefix}HASH_ALGORITHM" in environ:
            kwargs['hash_algorithm'] = environ[f"{prefix}HASH_ALGORITHM"].strip().lower()
        if f"{prefix}OVERFLOW" in environ:
            kwargs['overflow'] = environ[f"{prefix}OVERFLOW"].strip().lower()
        if f"{prefix}MAX_ID_ATTEMPTS" in environ:
            raw = environ[f"{prefix}MAX_ID_ATTEMPTS"]
            try:
                kwargs['max_id_attempts'] = int(raw)
            except ValueError as e:
                raise ConfigError(f"{prefix}MAX_ID_ATTEMPTS must be an integer, got {raw!r}") from e

        return cls(**kwargs)

    def to_dict(self) -> dict:
        """Settings as a plain dictionary."""
        return asdict(self)
