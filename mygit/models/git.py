import logging
import pathlib
import sys
from os import PathLike

from mygit.errors import RepositoryExistsError, StoreError, WrongObjectTypeError
from mygit.models.hashing import create_hash
from mygit.models.objects import GitObject, ObjectType, TreeEntry, encode_blob
from mygit.models.store import ObjectStore
from mygit.models.tree import TreeBuilder

__all__ = ["Git"]

logger = logging.getLogger(__name__)


class Git:
    git_folder_name = ".git"
    default_branch = "main"
    ignore_patterns = frozenset({".git"})

    def __init__(
        self, work_dir: PathLike | str = ".", *, git_dir: PathLike | str | None = None
    ):
        self.work_dir = pathlib.Path(work_dir)
        if git_dir is None:
            self.git_folder = self.work_dir / self.git_folder_name
        else:
            self.git_folder = pathlib.Path(git_dir)
        self.objects_folder = self.git_folder / "objects"
        self.refs_folder = self.git_folder / "refs"
        self.store = ObjectStore(self.objects_folder)

    def init_repo(self, *, branch: str | None = None, pretty_print: bool = True):
        if self.git_folder.exists():
            raise RepositoryExistsError(
                f"Repository already exists at {self.git_folder.absolute()}"
            )
        branch = branch or self.default_branch
        try:
            folders = [self.git_folder, self.objects_folder, self.refs_folder / "heads"]
            for path in folders:
                path.mkdir(exist_ok=False, parents=True)
            with (self.git_folder / "HEAD").open("w") as f:
                f.write(f"ref: refs/heads/{branch}\n")
        except OSError as e:
            raise StoreError(f"Failed to initialize repository: {e}") from e

        logger.debug("Initialized %s with default branch %s", self.git_folder, branch)
        if pretty_print:
            sys.stdout.write(
                f"Initialized empty Git repository in {self.git_folder.absolute()}\n"
            )

    def cat_file(
        self,
        hash_value: str,
        *,
        pretty_print: bool = False,
        show_type: bool = False,
        show_size: bool = False,
    ) -> GitObject:
        git_object = self.store.read_object(hash_value)
        if show_type:
            sys.stdout.write(f"{git_object.type}\n")
        elif show_size:
            sys.stdout.write(f"{git_object.size}\n")
        elif pretty_print:
            if git_object.type != ObjectType.BLOB:
                raise WrongObjectTypeError(hash_value, ObjectType.BLOB, git_object.type)
            sys.stdout.flush()
            sys.stdout.buffer.write(git_object.body)
            sys.stdout.buffer.flush()
        return git_object

    def hash_object(
        self, path: PathLike | str, *, write: bool = False, pretty_print: bool = True
    ) -> str:
        path = pathlib.Path(path)
        try:
            content = path.read_bytes()
        except OSError as e:
            raise StoreError(f"Failed to read {path}: {e}") from e

        data = encode_blob(content)
        if write:
            hash_value = self.store.write_encoded(data)
        else:
            hash_value = create_hash(data)
        if pretty_print:
            sys.stdout.write(f"{hash_value}\n")
        return hash_value

    def ls_tree(
        self, hash_value: str, *, name_only: bool = False, pretty_print: bool = True
    ) -> list[TreeEntry]:
        entries = self.store.read_tree(hash_value)
        entries.sort(key=lambda entry: entry.file_name)
        if pretty_print:
            # Names are written as stored; they need not be valid UTF-8.
            sys.stdout.flush()
            for entry in entries:
                if name_only:
                    line = entry.file_name
                else:
                    prefix = f"{entry.mode:0>6} {entry.object_type} {entry.hash}\t"
                    line = prefix.encode() + entry.file_name
                sys.stdout.buffer.write(line + b"\n")
            sys.stdout.buffer.flush()
        return entries

    def write_tree(self, *, pretty_print: bool = True) -> str:
        ignore_patterns = set(self.ignore_patterns)
        if self.git_folder.resolve().parent == self.work_dir.resolve():
            ignore_patterns.add(self.git_folder.name)
        builder = TreeBuilder(self.store, ignore_patterns=ignore_patterns)
        hash_value = builder.build(self.work_dir)
        if pretty_print:
            sys.stdout.write(f"{hash_value}\n")
        return hash_value
