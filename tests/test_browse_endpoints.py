"""Tests for the browsing HTTP endpoints."""

from fastapi.testclient import TestClient

from explorer.dependencies import get_path_resolver
from explorer.main import app
from explorer.paths import PathResolver


def test_root_listing(client):
    response = client.get('/')

    assert response.status_code == 200
    assert response.headers['content-type'].startswith('text/html')
    assert 'href="a.txt"' in response.text
    assert 'href="docs/"' in response.text
    assert 'href="../"' not in response.text
    assert 'X-Request-ID' in response.headers


def test_nested_listing_has_parent_link_and_breadcrumbs(client):
    response = client.get('/docs/sub%20dir/')

    assert response.status_code == 200
    assert 'href="../"' in response.text
    assert '<a href="/docs/">docs</a>' in response.text
    assert '<a href="/docs/sub%20dir/">sub dir</a>' in response.text
    assert 'This directory is empty.' not in response.text


def test_empty_root_shows_empty_state(tmp_path):
    root = tmp_path / 'bare'
    root.mkdir()
    app.dependency_overrides[get_path_resolver] = lambda: PathResolver(str(root))
    try:
        response = TestClient(app).get('/')
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert 'This directory is empty.' in response.text


def test_file_download_inline(client):
    response = client.get('/a.txt')

    assert response.status_code == 200
    assert response.content == b'alpha'
    assert response.headers['content-type'] == 'text/plain; charset=utf-8'
    assert response.headers['content-length'] == '5'
    assert 'last-modified' in response.headers
    assert 'content-disposition' not in response.headers


def test_file_download_attachment(client):
    response = client.get('/a.txt?download=1')

    assert response.status_code == 200
    assert response.headers['content-disposition'] == 'attachment; filename="a.txt"'


def test_legacy_download_matches_direct_download(client, explorer_root):
    direct = client.get('/docs/report.pdf?download=1')
    legacy = client.get('/download?path=docs/report.pdf')

    assert direct.status_code == legacy.status_code == 200
    assert direct.content == legacy.content == (explorer_root / 'docs' / 'report.pdf').read_bytes()
    assert direct.headers['content-disposition'] == legacy.headers['content-disposition']
    assert legacy.headers['content-disposition'] == 'attachment; filename="report.pdf"'
    assert legacy.headers['content-type'] == 'application/pdf'


def test_legacy_download_requires_path(client):
    missing = client.get('/download')
    empty = client.get('/download?path=')

    assert missing.status_code == 400
    assert empty.status_code == 400
    assert 'Missing path parameter' in missing.text


def test_legacy_download_of_directory_is_not_found(client):
    response = client.get('/download?path=docs')

    assert response.status_code == 404


def test_legacy_listing_query(client):
    legacy = client.get('/?path=docs')
    direct = client.get('/docs/')

    assert legacy.status_code == 200
    assert 'href="report.pdf"' in legacy.text
    assert legacy.text == direct.text


def test_directory_without_slash_redirects(client):
    response = client.get('/docs', follow_redirects=False)

    assert response.status_code == 301
    assert response.headers['location'] == '/docs/'


def test_redirect_keeps_query_and_encodes_name(client):
    response = client.get('/docs/sub%20dir?sort=name', follow_redirects=False)

    assert response.status_code == 301
    assert response.headers['location'] == '/docs/sub%20dir/?sort=name'


def test_file_requested_as_directory_is_not_found(client):
    response = client.get('/a.txt/')

    assert response.status_code == 404
    assert '404 Not Found' in response.text


def test_missing_path_is_single_not_found_page(client, explorer_root):
    response = client.get('/no/such/file.txt')

    assert response.status_code == 404
    assert response.text.count('<h1>404 Not Found</h1>') == 1
    assert str(explorer_root) not in response.text


def test_encoded_traversal_stays_in_root(client, outside_dir):
    response = client.get('/%2e%2e/outside/secret.txt')

    assert response.status_code == 404
    assert 'top secret' not in response.text


def test_symlink_escape_is_bad_request(client, explorer_root, outside_dir):
    (explorer_root / 'escape').symlink_to(outside_dir, target_is_directory=True)

    response = client.get('/escape/secret.txt')

    assert response.status_code == 400
    assert 'top secret' not in response.text
    assert str(outside_dir) not in response.text


def test_non_get_method_not_allowed(client):
    response = client.post('/a.txt')

    assert response.status_code == 405
    assert response.headers['allow'] == 'GET'
    assert '405 Method Not Allowed' in response.text


def test_non_get_on_legacy_download_not_allowed(client):
    response = client.delete('/download?path=a.txt')

    assert response.status_code == 405


def test_invalid_utf8_path_is_bad_request(client):
    response = client.get('/%FF')

    assert response.status_code == 400
    assert '400 Bad Request' in response.text


def test_invalid_utf8_legacy_query_is_bad_request(client):
    assert client.get('/?path=%C3').status_code == 400
    assert client.get('/download?path=docs%2F%FF').status_code == 400


def test_special_files_are_not_found(client, special_files):
    pipe, sock = special_files

    for name in (pipe, sock):
        assert client.get(f'/{name}').status_code == 404
        assert client.get(f'/download?path={name}').status_code == 404


def test_legacy_query_name_is_decoded(client):
    response = client.get('/?pa%74h=docs')

    assert response.status_code == 200
    assert 'href="report.pdf"' in response.text
