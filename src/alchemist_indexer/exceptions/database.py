import pathlib

from alchemist_indexer.exceptions.base import IndexerError


class BackupExists(IndexerError):
    """
    Raised by `alchemist-indexer database backup` if a file exists at the target path.
    """

    def __init__(self, path: pathlib.Path) -> None:
        self.path = path
        super().__init__(message=f"A backup at {path} already exists.")
