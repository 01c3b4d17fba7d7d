import logging
import os
import pathlib
import stat
from typing import Collection

from mygit.errors import StoreError
from mygit.models.hashing import to_raw
from mygit.models.objects import EntryMode, TreeEntry, encode_blob, encode_tree
from mygit.models.store import ObjectStore

__all__ = ["TreeBuilder"]

logger = logging.getLogger(__name__)


class TreeBuilder:
    """Write a directory hierarchy into the store as blobs and trees."""

    def __init__(
        self, store: ObjectStore, *, ignore_patterns: Collection[str] = (".git",)
    ):
        self.store = store
        self.ignore_patterns = frozenset(ignore_patterns)

    def build(self, directory: os.PathLike | str) -> str:
        """Store `directory` recursively and return the root tree hash.

        Regular files become blobs (mode 100755 when owner-executable,
        100644 otherwise), symlinks become blobs holding their target path,
        and subdirectories become nested trees. Entries are sorted by the
        bytes of their name, so the result depends only on the contents of
        the directory and never on listing order.
        """
        dir_path = pathlib.Path(directory)
        try:
            children = list(dir_path.iterdir())
        except OSError as e:
            raise StoreError(f"Failed to list {dir_path}: {e}") from e

        entries = []
        for child in children:
            if child.name in self.ignore_patterns:
                continue
            entry = self._create_entry(child)
            if entry is not None:
                entries.append(entry)

        entries.sort(key=lambda entry: entry.file_name)
        return self.store.write_encoded(encode_tree(entries))

    def _create_entry(self, path: pathlib.Path) -> TreeEntry | None:
        try:
            st = path.lstat()
            if stat.S_ISLNK(st.st_mode):
                mode = EntryMode.SYMLINK
                hash_value = self._write_symlink(path)
            elif stat.S_ISREG(st.st_mode):
                if st.st_mode & stat.S_IXUSR:
                    mode = EntryMode.EXECUTABLE_FILE
                else:
                    mode = EntryMode.REGULAR_FILE
                hash_value = self.store.write_encoded(encode_blob(path.read_bytes()))
            elif stat.S_ISDIR(st.st_mode):
                mode = EntryMode.DIRECTORY
                hash_value = self.build(path)
            else:
                logger.debug("Skipping %s: not a file, symlink or directory", path)
                return None
        except OSError as e:
            raise StoreError(f"Failed to read {path}: {e}") from e

        return TreeEntry(
            mode=mode, file_name=os.fsencode(path.name), raw_hash=to_raw(hash_value)
        )

    @staticmethod
    def _symlink_target(path: pathlib.Path) -> bytes:
        # Targets are always stored with POSIX separators.
        target = os.readlink(path)
        if os.sep != "/":
            target = target.replace(os.sep, "/")
        return os.fsencode(target)

    def _write_symlink(self, path: pathlib.Path) -> str:
        return self.store.write_encoded(encode_blob(self._symlink_target(path)))
