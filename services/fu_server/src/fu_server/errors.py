from __future__ import annotations


class ConfigError(RuntimeError):
    """Invalid address, unreachable catalog or unusable upload directory."""


class StorageError(RuntimeError):
    pass


class DuplicateName(StorageError):
    """Generated name is already taken, either in the catalog or on disk."""

    def __init__(self, name: str):
        super().__init__(f"name already in use: {name}")
        self.name = name


class BlobWriteError(StorageError):
    pass


class BlobReadError(StorageError):
    pass


class BlobDeleteError(StorageError):
    pass


class CatalogError(StorageError):
    pass


class CommitError(CatalogError):
    pass
