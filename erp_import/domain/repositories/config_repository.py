"""
Configuration Repository Interface.
Read access to the key-value app_configurations table.
"""

from typing import Optional, Protocol


class ConfigRepository(Protocol):
    """Interface for configuration lookups."""

    def get(self, key: str) -> Optional[str]:
        """Raw value for a key, or None when the key is not set."""
        ...

    def get_bool(self, key: str) -> bool:
        """True only when the stored value is the string 'true'."""
        ...
