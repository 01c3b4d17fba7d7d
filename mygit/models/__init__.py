from mygit.models.git import Git
from mygit.models.objects import (
    EntryMode,
    GitObject,
    ObjectType,
    TreeEntry,
    decode_object,
    encode_blob,
    encode_tree,
    parse_tree,
)
from mygit.models.store import ObjectStore
from mygit.models.tree import TreeBuilder

__all__ = [
    "Git",
    "EntryMode",
    "GitObject",
    "ObjectType",
    "TreeEntry",
    "decode_object",
    "encode_blob",
    "encode_tree",
    "parse_tree",
    "ObjectStore",
    "TreeBuilder",
]
