"""
Hash algorithm strategies and registry.

Used to compute package checksums and source-tree content hashes.
"""

from .registry import HashAlgorithmRegistry
from .strategies import BLAKE3, DEFAULT_STRATEGIES, HashStrategy, hashlib_strategy

__all__ = [
    "BLAKE3",
    "DEFAULT_STRATEGIES",
    "HashAlgorithmRegistry",
    "HashStrategy",
    "hashlib_strategy",
]
