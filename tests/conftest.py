import logging
import os
import sys

import pytest

MiB = 1024 * 1024
KiB = 1024


@pytest.fixture(scope="session", autouse=True)
def deep_tmp_cleanup():
    # pytest removes old temp dirs at exit with a recursive rmtree; the
    # deeper-than-recursion-limit scanner test would overflow it otherwise.
    yield
    sys.setrecursionlimit(max(sys.getrecursionlimit(), 20000))


@pytest.fixture(autouse=True)
def no_renice(monkeypatch):
    monkeypatch.setattr("spacehog.app.lower_priority", lambda: True)


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    log = logging.getLogger("spacehog")
    for h in list(log.handlers):
        log.removeHandler(h)
    log.setLevel(logging.NOTSET)


@pytest.fixture
def make_file():
    def _make(path, size, mtime=None):
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as f:
            f.truncate(size)
        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return path
    return _make
