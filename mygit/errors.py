__all__ = [
    "GitError",
    "StoreError",
    "ObjectNotFoundError",
    "CodecError",
    "CorruptObjectError",
    "WrongObjectTypeError",
    "RepositoryExistsError",
]


class GitError(Exception):
    """Base class for every error raised by mygit."""


class StoreError(GitError):
    """A filesystem read or write failed while storing or reading objects."""


class ObjectNotFoundError(StoreError):
    def __init__(self, hash_value: str):
        super().__init__(f"Not a valid object name {hash_value}")
        self.hash_value = hash_value


class CodecError(GitError):
    pass


class CorruptObjectError(GitError):
    pass


class WrongObjectTypeError(GitError):
    def __init__(self, hash_value: str, expected: str, actual: str):
        super().__init__(f"{hash_value} is a {actual}, not a {expected}")
        self.hash_value = hash_value
        self.expected = expected
        self.actual = actual


class RepositoryExistsError(GitError):
    pass
