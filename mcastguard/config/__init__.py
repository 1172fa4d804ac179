"""Configuration types for mcastguard."""

from mcastguard.config.guard_config import MulticastGuardConfig

__all__ = ["MulticastGuardConfig"]
