"""
fragmint configuration
"""

from fragmint.config.vault import VaultConfig

__all__ = ["VaultConfig"]
