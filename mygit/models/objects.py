import os
import re
from dataclasses import dataclass
from enum import StrEnum, auto
from typing import Iterable

from mygit.errors import CorruptObjectError
from mygit.models.hashing import HASH_SIZE, to_hex

__all__ = [
    "ObjectType",
    "EntryMode",
    "TreeEntry",
    "GitObject",
    "encode_object",
    "encode_blob",
    "encode_tree",
    "decode_object",
    "parse_tree",
]

NULL_BYTE = b"\x00"
SPACE = b" "

HEADER_REGEX = re.compile(rb"(?P<type>[a-z]+) (?P<size>0|[1-9][0-9]*)")


class ObjectType(StrEnum):
    BLOB = auto()
    TREE = auto()


class EntryMode(StrEnum):
    REGULAR_FILE = "100644"
    EXECUTABLE_FILE = "100755"
    SYMLINK = "120000"
    DIRECTORY = "40000"

    @property
    def object_type(self) -> ObjectType:
        match self:
            case EntryMode.DIRECTORY:
                return ObjectType.TREE
            case _:
                return ObjectType.BLOB


@dataclass(frozen=True, kw_only=True)
class TreeEntry:
    mode: EntryMode
    file_name: bytes
    raw_hash: bytes

    def __post_init__(self):
        if not self.file_name or b"/" in self.file_name or NULL_BYTE in self.file_name:
            raise ValueError(f"Invalid tree entry name: {self.file_name!r}")
        if len(self.raw_hash) != HASH_SIZE:
            raise ValueError(f"Tree entry hash must be {HASH_SIZE} bytes")

    @property
    def hash(self) -> str:
        return to_hex(self.raw_hash)

    @property
    def name(self) -> str:
        return os.fsdecode(self.file_name)

    @property
    def object_type(self) -> ObjectType:
        return self.mode.object_type

    def to_bytes(self) -> bytes:
        return self.mode.encode() + SPACE + self.file_name + NULL_BYTE + self.raw_hash


@dataclass(frozen=True, kw_only=True)
class GitObject:
    type: ObjectType
    body: bytes

    @property
    def header(self) -> bytes:
        return f"{self.type} {len(self.body)}".encode()

    @property
    def size(self) -> int:
        return len(self.body)

    def encode(self) -> bytes:
        return self.header + NULL_BYTE + self.body


def encode_object(object_type: ObjectType, body: bytes) -> bytes:
    return GitObject(type=object_type, body=body).encode()


def encode_blob(content: bytes) -> bytes:
    return encode_object(ObjectType.BLOB, content)


def encode_tree(entries: Iterable[TreeEntry]) -> bytes:
    """Encode already sorted, de-duplicated entries as a tree object.

    Sorting is left to the caller; entries out of byte order or sharing a
    name raise ``ValueError`` instead of being reordered.
    """
    entries = list(entries)
    for previous, current in zip(entries, entries[1:]):
        if previous.file_name >= current.file_name:
            raise ValueError(
                f"Tree entries must be sorted and unique: "
                f"{previous.file_name!r} before {current.file_name!r}"
            )
    body = b"".join(entry.to_bytes() for entry in entries)
    return encode_object(ObjectType.TREE, body)


def decode_object(data: bytes) -> GitObject:
    header, null_byte, body = data.partition(NULL_BYTE)
    if not null_byte:
        raise CorruptObjectError("Object header is not terminated")
    match = HEADER_REGEX.fullmatch(header)
    if match is None:
        raise CorruptObjectError(f"Malformed object header: {header!r}")
    try:
        object_type = ObjectType(match["type"].decode())
    except ValueError:
        raise CorruptObjectError(f"Unknown object type: {match['type']!r}") from None
    size = int(match["size"])
    if size != len(body):
        raise CorruptObjectError(
            f"Object length mismatch: header declares {size}, body has {len(body)}"
        )
    return GitObject(type=object_type, body=body)


def parse_tree(body: bytes) -> list[TreeEntry]:
    """Decode a tree payload into its entries, in stored order.

    Each record is read as mode up to the first space, then name up to the
    first NUL, then exactly 20 raw hash bytes.
    """
    entries = []
    offset = 0
    while offset < len(body):
        space = body.find(SPACE, offset)
        if space == -1:
            raise CorruptObjectError(f"Truncated tree entry at offset {offset}: no mode")
        null = body.find(NULL_BYTE, space + 1)
        if null == -1:
            raise CorruptObjectError(f"Truncated tree entry at offset {offset}: no name")
        hash_end = null + 1 + HASH_SIZE
        if hash_end > len(body):
            raise CorruptObjectError(f"Truncated tree entry at offset {offset}: short hash")

        raw_mode = body[offset:space]
        try:
            mode = EntryMode(raw_mode.decode("ascii"))
        except (UnicodeDecodeError, ValueError):
            raise CorruptObjectError(f"Unknown tree entry mode: {raw_mode!r}") from None
        try:
            entry = TreeEntry(
                mode=mode,
                file_name=body[space + 1 : null],
                raw_hash=body[null + 1 : hash_end],
            )
        except ValueError as e:
            raise CorruptObjectError(str(e)) from e
        entries.append(entry)
        offset = hash_end
    return entries
