"""Shared pytest fixtures for all tests."""

import os
import socket

import pytest
from fastapi.testclient import TestClient

from explorer.dependencies import get_path_resolver
from explorer.main import app
from explorer.paths import PathResolver


@pytest.fixture
def explorer_root(tmp_path):
    """
    Create a small directory tree to browse.

    Layout:
        root/
            A/inner.txt
            a.txt
            b.txt
            docs/report.pdf
            docs/sub dir/
            empty/

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to the root directory
    """
    root = tmp_path / 'root'
    root.mkdir()

    (root / 'A').mkdir()
    (root / 'A' / 'inner.txt').write_text('inside A')
    (root / 'a.txt').write_text('alpha')
    (root / 'b.txt').write_text('bravo')

    docs = root / 'docs'
    docs.mkdir()
    (docs / 'report.pdf').write_bytes(b'%PDF-1.4\n' + bytes(range(256)) * 64)
    (docs / 'sub dir').mkdir()

    (root / 'empty').mkdir()
    return root


@pytest.fixture
def outside_dir(tmp_path):
    """
    Create a directory next to the root that must never be reachable.
    """
    outside = tmp_path / 'outside'
    outside.mkdir()
    (outside / 'secret.txt').write_text('top secret')
    return outside


@pytest.fixture
def resolver(explorer_root):
    return PathResolver(str(explorer_root))


@pytest.fixture
def client(explorer_root):
    """
    Create FastAPI test client serving the explorer_root tree.
    """
    app.dependency_overrides[get_path_resolver] = lambda: PathResolver(str(explorer_root))
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def special_files(explorer_root, monkeypatch):
    """
    Add a named pipe and a bound Unix socket to the explorer_root tree.

    Yields:
        Tuple of (pipe name, socket name)
    """
    if not hasattr(os, 'mkfifo') or not hasattr(socket, 'AF_UNIX'):
        pytest.skip('named pipes and Unix sockets are not supported here')

    os.mkfifo(explorer_root / 'pipe')

    # Bind by relative name to stay under the Unix socket path length limit.
    monkeypatch.chdir(explorer_root)
    server = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    server.bind('sock')
    try:
        yield 'pipe', 'sock'
    finally:
        server.close()
