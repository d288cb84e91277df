"""
Pytest configuration and fixtures for test isolation.
"""
import os
import shutil
import sys
from typing import Iterator, List, Optional

import pytest

from bro.records import FileRecord
from bro.settings import EnvironmentVariables


class FakeBundler:
    """Scripted bundler session.

    Each call to ``bundle()`` yields the next entry of ``runs`` (the last one
    repeats), then raises ``error`` if one is set.
    """

    def __init__(self, entries, basedir=None, runs=None, error=None):
        self.entries = entries
        self.basedir = basedir
        self.runs: List[List[bytes]] = runs or [[]]
        self.error = error
        self.bundle_calls = 0

    def dependencies(self) -> List[str]:
        return [self.entries] if isinstance(self.entries, str) else []

    def bundle(self) -> Iterator[bytes]:
        chunks = self.runs[min(self.bundle_calls, len(self.runs) - 1)]
        self.bundle_calls += 1
        for chunk in chunks:
            yield chunk
        if self.error is not None:
            raise self.error


class FakeBundlerClass:
    """Callable standing in for a bundler class; remembers every session it builds."""

    def __init__(self, chunks: Optional[List[bytes]] = None, runs=None, error=None):
        self.runs = runs or [list(chunks or [])]
        self.error = error
        self.sessions: List[FakeBundler] = []

    def __call__(self, entries, basedir=None) -> FakeBundler:
        session = FakeBundler(entries, basedir, runs=self.runs, error=self.error)
        self.sessions.append(session)
        return session


@pytest.fixture
def fake_bundler_class():
    """The FakeBundlerClass type, to be instantiated with a script."""
    return FakeBundlerClass


@pytest.fixture
def null_record():
    """A record referencing /src/a.js without contents."""
    return FileRecord(path="/src/a.js", base="/src", contents=None)


@pytest.fixture
def content_record():
    """A record whose source is held in memory."""
    return FileRecord(path="/src/main.js", base="/src", contents=b"import x from './x'")


INLINE_BUNDLER = r"""
import os, re, sys
args = sys.argv[1:]
entry = args[-1]
if entry == '-':
    src, root = sys.stdin.read(), os.getcwd()
else:
    src, root = open(entry).read(), os.path.dirname(os.path.abspath(entry))
pattern = r"require\('\./([^']+)'\)"
if '--list' in args:
    files = [] if entry == '-' else [os.path.abspath(entry)]
    files += [os.path.join(root, name) for name in re.findall(pattern, src)]
    sys.stdout.write('\n'.join(files))
else:
    inline = lambda match: open(os.path.join(root, match.group(1))).read()
    sys.stdout.write('/*bundled*/' + re.sub(pattern, inline, src))
"""


@pytest.fixture
def inline_command():
    """A tiny bundler that inlines ``require('./name')`` calls."""
    return [sys.executable, "-c", INLINE_BUNDLER]


@pytest.fixture
def inline_list_command(inline_command):
    """The same bundler in ``--list`` mode, printing the files a bundle reads."""
    return inline_command + ["--list"]


@pytest.fixture(autouse=True)
def isolate_tests(tmp_path, monkeypatch):
    """
    Automatically isolate each test by:
    1. Using a temporary directory for outputs
    2. Removing BRO_* variables inherited from the shell
    """
    test_output = tmp_path / "test_output"
    test_output.mkdir(exist_ok=True)
    monkeypatch.setenv("TEST_OUTPUT_DIR", str(test_output))

    for env_var in EnvironmentVariables.mapping():
        monkeypatch.delenv(env_var, raising=False)

    yield

    if test_output.exists():
        shutil.rmtree(test_output, ignore_errors=True)


@pytest.fixture(autouse=True, scope="function")
def reset_environment():
    """Reset environment variables between tests."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)
