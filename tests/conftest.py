import contextlib

import pytest

from mygit.models import Git


@pytest.fixture
def change_to_tmp_dir(tmp_path):
    with contextlib.chdir(tmp_path):
        yield tmp_path


@pytest.fixture
def git(change_to_tmp_dir):
    git = Git()
    git.init_repo(pretty_print=False)
    return git
