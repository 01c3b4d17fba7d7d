import zlib

from mygit.errors import CodecError

__all__ = ["compress", "decompress"]

MIN_BUFFER_SIZE = 64

# deflate cannot expand data by more than ~1032:1
MAX_EXPANSION_RATIO = 1032
MAX_EXPANSION_SLACK = 1024


def compress(data: bytes, *, level: int = zlib.Z_DEFAULT_COMPRESSION) -> bytes:
    try:
        return zlib.compress(data, level)
    except zlib.error as e:
        raise CodecError(f"Failed to compress data: {e}") from e


def decompress(data: bytes, size_hint: int | None = None) -> bytes:
    """Inflate a zlib stream whose uncompressed size is not known up front.

    Decompression starts with a buffer at least as large as the input (or
    ``size_hint`` when bigger). When the buffer fills before the stream ends
    it is doubled and decompression restarts, up to the worst-case deflate
    expansion of the input. Anything past that bound, a stream that ends
    early, or bytes zlib rejects raise :class:`CodecError`.
    """
    limit = len(data) * MAX_EXPANSION_RATIO + MAX_EXPANSION_SLACK
    buffer_size = min(max(size_hint or 0, len(data), MIN_BUFFER_SIZE), limit)

    while True:
        decompressor = zlib.decompressobj()
        try:
            result = decompressor.decompress(data, buffer_size)
        except zlib.error as e:
            raise CodecError(f"Failed to uncompress data: {e}") from e

        if decompressor.eof:
            if decompressor.unused_data:
                raise CodecError(
                    f"{len(decompressor.unused_data)} bytes of trailing data "
                    "after compressed stream"
                )
            return result
        if len(result) < buffer_size:
            raise CodecError("Compressed stream ended unexpectedly")
        if buffer_size >= limit:
            raise CodecError(
                f"Uncompressed size exceeds {limit} bytes for "
                f"{len(data)} bytes of input"
            )
        buffer_size = min(buffer_size * 2, limit)
