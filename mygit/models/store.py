import contextlib
import logging
import os
import pathlib
import tempfile

from mygit.errors import (
    CodecError,
    CorruptObjectError,
    ObjectNotFoundError,
    StoreError,
    WrongObjectTypeError,
)
from mygit.models.codec import compress, decompress
from mygit.models.hashing import create_hash, is_valid_hash
from mygit.models.objects import (
    GitObject,
    ObjectType,
    TreeEntry,
    decode_object,
    encode_object,
    parse_tree,
)

__all__ = ["ObjectStore"]

logger = logging.getLogger(__name__)

# Loose objects are read-only once written.
OBJECT_FILE_MODE = 0o444


class ObjectStore:
    """Loose object database: one zlib-compressed file per object.

    An object with hash ``ab12...`` lives at ``<objects_folder>/ab/12...``.
    """

    def __init__(self, objects_folder: os.PathLike | str):
        self.objects_folder = pathlib.Path(objects_folder)

    def path_for(self, hash_value: str) -> pathlib.Path:
        if not is_valid_hash(hash_value):
            raise ValueError(f"Invalid object hash: {hash_value!r}")
        return self.objects_folder / hash_value[:2] / hash_value[2:]

    def exists(self, hash_value: str) -> bool:
        return self.path_for(hash_value).is_file()

    def put(self, hash_value: str, data: bytes) -> pathlib.Path:
        path = self.path_for(hash_value)
        if path.is_file():
            logger.debug("Object %s already in store, skipped", hash_value)
            return path

        compressed_data = compress(data)
        try:
            path.parent.mkdir(exist_ok=True)
            f = tempfile.NamedTemporaryFile(
                dir=path.parent, prefix="tmp_obj_", delete=False
            )
            try:
                with f:
                    f.write(compressed_data)
                os.chmod(f.name, OBJECT_FILE_MODE)
                os.replace(f.name, path)
            except BaseException:
                with contextlib.suppress(FileNotFoundError):
                    os.unlink(f.name)
                raise
        except OSError as e:
            raise StoreError(f"Failed to write object {hash_value}: {e}") from e

        logger.debug("Stored object %s (%d bytes)", hash_value, len(data))
        return path

    def get(self, hash_value: str) -> bytes:
        """Return the compressed bytes stored for `hash_value`."""
        path = self.path_for(hash_value)
        try:
            with path.open("rb") as f:
                return f.read()
        except FileNotFoundError:
            raise ObjectNotFoundError(hash_value) from None
        except OSError as e:
            raise StoreError(f"Failed to read object {hash_value}: {e}") from e

    def write_object(self, object_type: ObjectType, body: bytes) -> str:
        return self.write_encoded(encode_object(object_type, body))

    def write_encoded(self, data: bytes) -> str:
        hash_value = create_hash(data)
        self.put(hash_value, data)
        return hash_value

    def read_object(self, hash_value: str) -> GitObject:
        compressed_data = self.get(hash_value)
        try:
            data = decompress(compressed_data)
        except CodecError as e:
            raise CorruptObjectError(f"Object {hash_value} is corrupt: {e}") from e
        return decode_object(data)

    def read_tree(self, hash_value: str) -> list[TreeEntry]:
        git_object = self.read_object(hash_value)
        if git_object.type != ObjectType.TREE:
            raise WrongObjectTypeError(hash_value, ObjectType.TREE, git_object.type)
        return parse_tree(git_object.body)
