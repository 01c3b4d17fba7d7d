import binascii
import hashlib
import re

__all__ = ["create_hash", "create_raw_hash", "to_raw", "to_hex", "is_valid_hash"]

HASH_SIZE = 20
HEX_HASH_SIZE = HASH_SIZE * 2

HEX_HASH_REGEX = re.compile(rb"[0-9a-f]{%d}" % HEX_HASH_SIZE)


def create_raw_hash(data: str | bytes, *, hasher=hashlib.sha1) -> bytes:
    if isinstance(data, str):
        data = data.encode()
    return hasher(data).digest()


def create_hash(data: str | bytes, *, hasher=hashlib.sha1) -> str:
    if isinstance(data, str):
        data = data.encode()
    return hasher(data).hexdigest()


def is_valid_hash(hash_value: str) -> bool:
    return HEX_HASH_REGEX.fullmatch(hash_value.encode()) is not None


def to_raw(hash_value: str) -> bytes:
    if not is_valid_hash(hash_value):
        raise ValueError(f"Invalid object hash: {hash_value!r}")
    return binascii.unhexlify(hash_value)


def to_hex(raw_hash: bytes) -> str:
    if len(raw_hash) != HASH_SIZE:
        raise ValueError(f"Raw hash must be {HASH_SIZE} bytes, got {len(raw_hash)}")
    return binascii.hexlify(raw_hash).decode()
