import contextlib
import os
import pathlib
from argparse import ArgumentParser


def get_parser():
    parser = ArgumentParser(prog="mygit")
    parser.add_argument(
        "-C",
        dest="directory",
        type=pathlib.Path,
        help="run as if started in this directory",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="log debug output to stderr"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # init
    init_parser = subparsers.add_parser("init")
    init_parser.add_argument("-b", "--initial-branch", dest="branch")

    # cat-file
    cat_file_parser = subparsers.add_parser("cat-file")
    cat_file_mode = cat_file_parser.add_mutually_exclusive_group(required=True)
    cat_file_mode.add_argument(
        "-p", "--pretty-print", action="store_true", help="pretty print"
    )
    cat_file_mode.add_argument(
        "-t", dest="show_type", action="store_true", help="show object type"
    )
    cat_file_mode.add_argument(
        "-s", dest="show_size", action="store_true", help="show object size"
    )
    cat_file_parser.add_argument(
        "hash",
    )

    # hash_object
    hash_object_parser = subparsers.add_parser("hash-object")
    hash_object_parser.add_argument("path", type=pathlib.Path)
    hash_object_parser.add_argument("-w", "--write", action="store_true")

    # ls-tree
    ls_tree_parser = subparsers.add_parser("ls-tree")
    ls_tree_parser.add_argument("--name-only", action="store_true")
    ls_tree_parser.add_argument("hash_value")

    # write-tree
    _write_tree_parser = subparsers.add_parser("write-tree")

    return parser


@contextlib.contextmanager
def chdir(path):
    if path is None:
        yield
        return
    old_path = os.getcwd()
    os.chdir(path)
    try:
        yield
    finally:
        os.chdir(old_path)
