import errno
import os
import stat
import tempfile
import zlib

import pytest

from mygit.errors import (
    CorruptObjectError,
    ObjectNotFoundError,
    StoreError,
    WrongObjectTypeError,
)
from mygit.models.hashing import create_hash, to_raw
from mygit.models.objects import (
    EntryMode,
    GitObject,
    ObjectType,
    TreeEntry,
    encode_blob,
    encode_tree,
)
from mygit.models.store import ObjectStore

HELLO_HASH = "ce013625030ba8dba906f756967f9e9ca394464a"


@pytest.fixture
def store(tmp_path):
    objects_folder = tmp_path / "objects"
    objects_folder.mkdir()
    return ObjectStore(objects_folder)


def test_path_for(store, tmp_path):
    path = store.path_for(HELLO_HASH)
    assert path == tmp_path / "objects" / "ce" / "013625030ba8dba906f756967f9e9ca394464a"


def test_path_for_rejects_invalid_hash(store):
    with pytest.raises(ValueError):
        store.path_for("../../etc/passwd")


def test_put_writes_compressed_encoding(store):
    data = encode_blob(b"hello\n")
    path = store.put(HELLO_HASH, data)
    assert path == store.path_for(HELLO_HASH)
    assert path.parent.name == "ce"
    assert len(path.name) == 38
    assert zlib.decompress(path.read_bytes()) == data
    assert store.exists(HELLO_HASH)
    assert list(path.parent.iterdir()) == [path]


def test_put_is_idempotent(store):
    data = encode_blob(b"hello\n")
    first = store.put(HELLO_HASH, data)
    stored = first.read_bytes()
    second = store.put(HELLO_HASH, data)
    assert first == second
    assert second.read_bytes() == stored


def test_get_returns_stored_bytes(store):
    path = store.put(HELLO_HASH, encode_blob(b"hello\n"))
    assert store.get(HELLO_HASH) == path.read_bytes()


def test_get_missing(store):
    assert not store.exists(HELLO_HASH)
    with pytest.raises(ObjectNotFoundError) as exc_info:
        store.get(HELLO_HASH)
    assert exc_info.value.hash_value == HELLO_HASH
    assert isinstance(exc_info.value, StoreError)


def test_write_and_read_blob(store):
    hash_value = store.write_object(ObjectType.BLOB, b"hello\n")
    assert hash_value == HELLO_HASH
    assert store.read_object(hash_value) == GitObject(
        type=ObjectType.BLOB, body=b"hello\n"
    )


def test_identical_content_is_stored_once(store):
    first = store.write_encoded(encode_blob(b"same"))
    second = store.write_encoded(encode_blob(b"same"))
    assert first == second
    assert sum(1 for path in store.objects_folder.rglob("*") if path.is_file()) == 1


def test_read_tree(store):
    blob_hash = store.write_object(ObjectType.BLOB, b"hello\n")
    entries = [
        TreeEntry(
            mode=EntryMode.REGULAR_FILE, file_name=b"a.txt", raw_hash=to_raw(blob_hash)
        )
    ]
    tree_hash = store.write_encoded(encode_tree(entries))
    assert store.read_tree(tree_hash) == entries


def test_read_tree_on_blob(store):
    blob_hash = store.write_object(ObjectType.BLOB, b"hello\n")
    with pytest.raises(WrongObjectTypeError):
        store.read_tree(blob_hash)


def test_read_truncated_object(store):
    path = store.put(HELLO_HASH, encode_blob(b"hello\n" * 100))
    path.write_bytes(path.read_bytes()[:10])
    with pytest.raises(CorruptObjectError):
        store.read_object(HELLO_HASH)


def test_read_garbage_object(store):
    path = store.path_for(HELLO_HASH)
    path.parent.mkdir(parents=True)
    path.write_bytes(b"definitely not zlib")
    with pytest.raises(CorruptObjectError):
        store.read_object(HELLO_HASH)


def test_read_object_with_bad_length(store):
    data = b"blob 10\x00hello\n"
    hash_value = create_hash(data)
    store.put(hash_value, data)
    with pytest.raises(CorruptObjectError, match="length mismatch"):
        store.read_object(hash_value)


def test_put_reports_filesystem_errors(tmp_path):
    blocker = tmp_path / "objects"
    blocker.write_text("not a directory")
    store = ObjectStore(blocker)
    with pytest.raises(StoreError):
        store.put(HELLO_HASH, encode_blob(b"hello\n"))


def test_put_cleans_up_after_failed_write(store, monkeypatch):
    real_named_temporary_file = tempfile.NamedTemporaryFile

    def failing_named_temporary_file(*args, **kwargs):
        f = real_named_temporary_file(*args, **kwargs)

        def write(data):
            raise OSError(errno.ENOSPC, "No space left on device")

        f.write = write
        return f

    monkeypatch.setattr(tempfile, "NamedTemporaryFile", failing_named_temporary_file)
    with pytest.raises(StoreError, match="No space left"):
        store.put(HELLO_HASH, encode_blob(b"hello\n"))
    assert [path for path in store.objects_folder.rglob("*") if path.is_file()] == []
    assert not store.exists(HELLO_HASH)


def test_put_cleans_up_after_failed_rename(store, monkeypatch):
    def failing_replace(src, dst):
        raise OSError(errno.EACCES, "Permission denied")

    monkeypatch.setattr(os, "replace", failing_replace)
    with pytest.raises(StoreError):
        store.put(HELLO_HASH, encode_blob(b"hello\n"))
    assert [path for path in store.objects_folder.rglob("*") if path.is_file()] == []


@pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
def test_put_writes_read_only_objects(store):
    path = store.put(HELLO_HASH, encode_blob(b"hello\n"))
    assert stat.S_IMODE(path.stat().st_mode) == 0o444
