"""
Hash algorithm registry.

Maps algorithm names to strategies and computes file and directory-tree
digests for package descriptors.
"""

from pathlib import Path

from .strategies import DEFAULT_STRATEGIES, Hasher, HashStrategy

CHUNK_SIZE = 1024 * 1024


class HashAlgorithmRegistry:
    """
    Registry for hash algorithm strategies.

    Example:
        registry = HashAlgorithmRegistry()
        digest = registry.hash_file("md5", Path("my-plugin-1.2.0.zip"))
    """

    def __init__(self, register_defaults: bool = True):
        self._strategies: dict[str, HashStrategy] = {}
        if register_defaults:
            for strategy in DEFAULT_STRATEGIES:
                self.register(strategy)

    def register(self, strategy: HashStrategy) -> None:
        self._strategies[strategy.name] = strategy

    def get(self, algorithm: str) -> HashStrategy | None:
        return self._strategies.get(algorithm)

    def create_hasher(self, algorithm: str) -> Hasher:
        """
        Create a hasher for the given algorithm.

        Raises:
            ValueError: If algorithm not registered
        """
        strategy = self.get(algorithm)
        if strategy is None:
            raise ValueError(f"Unknown hash algorithm: {algorithm}")
        return strategy.create_hasher()

    def hash_file(self, algorithm: str, path: Path) -> str:
        """Hex digest of a file's contents, read in chunks."""
        hasher = self.create_hasher(algorithm)
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
                hasher.update(chunk)
        return hasher.hexdigest()

    def hash_tree(self, algorithm: str, root: Path) -> str:
        """
        Deterministic digest of a directory tree.

        Covers every regular file's relative POSIX path and contents, in
        sorted path order, so the digest is independent of filesystem
        iteration order and of the tree's absolute location.
        """
        hasher = self.create_hasher(algorithm)
        files = sorted(p for p in root.rglob("*") if p.is_file())
        for path in files:
            rel = path.relative_to(root).as_posix().encode()
            hasher.update(len(rel).to_bytes(4, "big"))
            hasher.update(rel)
            hasher.update(self.hash_file(algorithm, path).encode())
        return hasher.hexdigest()

    @property
    def available_algorithms(self) -> list[str]:
        return sorted(self._strategies)

    def __contains__(self, algorithm: str) -> bool:
        return algorithm in self._strategies
