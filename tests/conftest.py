import os

import pytest


GIT_IDENTITY = {
    "GIT_AUTHOR_NAME": "Changelog Tests",
    "GIT_AUTHOR_EMAIL": "tests@example.com",
    "GIT_COMMITTER_NAME": "Changelog Tests",
    "GIT_COMMITTER_EMAIL": "tests@example.com",
    "GIT_CONFIG_NOSYSTEM": "1",
}


@pytest.fixture(scope="session", autouse=True)
def isolate_git_environment(tmp_path_factory):
    """Give git a throwaway identity and global config for the test session.

    Tests that create real repositories must not depend on, or write to,
    the user's own git configuration. The previous values are restored
    afterwards.
    """
    overrides = dict(GIT_IDENTITY)
    overrides["GIT_CONFIG_GLOBAL"] = str(tmp_path_factory.mktemp("git-home") / "gitconfig")
    saved = {name: os.environ.get(name) for name in overrides}
    os.environ.update(overrides)
    try:
        yield
    finally:
        for name, value in saved.items():
            if value is None:
                os.environ.pop(name, None)
            else:
                os.environ[name] = value


@pytest.fixture(autouse=True)
def isolate_working_directory(tmp_path, monkeypatch):
    """Run each test from an empty directory so no gen-changelog.toml is picked up."""
    monkeypatch.chdir(tmp_path)
