import logging
import os
import sys

from mygit.errors import GitError
from mygit.models import Git
from mygit.utils import chdir, get_parser

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def dispatch(git: Git, args):
    match args.command:
        case "init":
            return git.init_repo(branch=args.branch)
        case "cat-file":
            return git.cat_file(
                args.hash,
                pretty_print=args.pretty_print,
                show_type=args.show_type,
                show_size=args.show_size,
            )
        case "hash-object":
            return git.hash_object(args.path, write=args.write)
        case "ls-tree":
            return git.ls_tree(args.hash_value, name_only=args.name_only)
        case "write-tree":
            return git.write_tree()
        case _:
            raise RuntimeError(f"Unknown command #{args.command}")


def main(argv=None) -> int:
    parser = get_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
    try:
        with chdir(args.directory):
            git = Git(git_dir=os.environ.get("GIT_DIR"))
            dispatch(git, args)
    except (GitError, OSError, ValueError) as e:
        sys.stdout.flush()
        sys.stderr.write(f"fatal: {e}\n")
        return 1
    return 0


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
