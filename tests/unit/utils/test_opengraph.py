from unittest.mock import MagicMock

import httpx
import pytest
from pytest import MonkeyPatch

from kvshortener.constants import Preview
from kvshortener.exceptions import UpstreamFetchError
from kvshortener.models import PreviewMetadata
from kvshortener.utils import opengraph
from kvshortener.utils.opengraph import extract_preview, fetch_document, merge_preview, resolve_preview


ARTICLE = """
<html>
  <head>
    <title> Plain title </title>
    <meta property="og:title" content="OG title" />
    <meta property="og:description" content="OG description" />
    <meta property="og:image" content="https://example.com/cover.png" />
  </head>
  <body>hello</body>
</html>
"""


@pytest.fixture
def mock_transport(monkeypatch: MonkeyPatch):
    """Route every httpx.Client created by fetch_document through a MockTransport"""
    real_client = httpx.Client

    def install(handler):
        monkeypatch.setattr(opengraph.httpx, 'Client', lambda **kwargs: real_client(transport=httpx.MockTransport(handler), **kwargs))

    return install


def test_extract_preview() -> None:
    assert extract_preview(ARTICLE) == {
        'og_title': 'OG title',
        'og_description': 'OG description',
        'og_image': 'https://example.com/cover.png',
        'title': 'Plain title',
    }


def test_extract_preview_accepts_name_attribute_and_skips_blank_values() -> None:
    document = '<meta name="og:title" content="Named"><meta property="og:description" content="   ">'
    assert extract_preview(document) == {'og_title': 'Named'}


def test_extract_preview_from_garbage() -> None:
    assert extract_preview('not html at all') == {}


def test_resolve_preview_uses_og_tags() -> None:
    assert resolve_preview('https://example.com', fetch=lambda url: ARTICLE) == PreviewMetadata(
        title='OG title',
        description='OG description',
        image_url='https://example.com/cover.png',
    )


def test_resolve_preview_falls_back_per_field() -> None:
    document = '<title>Only a title</title><meta property="og:image" content="/relative.png">'

    preview = resolve_preview('https://example.com', fetch=lambda url: document)

    assert preview.title == 'Only a title'
    assert preview.description == Preview.DEFAULT_DESCRIPTION
    assert preview.image_url == Preview.DEFAULT_IMAGE_URL


def test_resolve_preview_on_unreachable_target() -> None:
    fetch = MagicMock(side_effect=UpstreamFetchError('Failed to fetch https://unreachable.invalid: ConnectError'))

    preview = resolve_preview('https://unreachable.invalid', fetch=fetch)

    fetch.assert_called_once_with('https://unreachable.invalid')
    assert preview == PreviewMetadata(
        title='Untitled',
        description='No description available',
        image_url='https://via.placeholder.com/1200x630?text=No+Image',
    )
    assert preview.escaped() == preview


def test_fetch_document_returns_text(mock_transport) -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text=ARTICLE)

    mock_transport(handler)

    assert fetch_document('https://example.com/article') == ARTICLE
    assert seen[0].headers['User-Agent'] == Preview.USER_AGENT


def test_fetch_document_follows_redirects(mock_transport) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == '/old':
            return httpx.Response(301, headers={'Location': 'https://example.com/new'})
        return httpx.Response(200, text='moved here')

    mock_transport(handler)

    assert fetch_document('https://example.com/old') == 'moved here'


def test_fetch_document_non_success_status(mock_transport) -> None:
    mock_transport(lambda request: httpx.Response(404, text='nope'))

    with pytest.raises(UpstreamFetchError, match='HTTP 404'):
        fetch_document('https://example.com/missing')


def test_fetch_document_network_error(mock_transport) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError('connection refused', request=request)

    mock_transport(handler)

    with pytest.raises(UpstreamFetchError, match='ConnectError'):
        fetch_document('https://example.com')


def test_merge_preview_skips_resolver_when_complete() -> None:
    resolver = MagicMock()

    preview = merge_preview('T', 'D', 'https://example.com/i.png', resolver=resolver)

    assert preview == PreviewMetadata(title='T', description='D', image_url='https://example.com/i.png')
    resolver.assert_not_called()


def test_merge_preview_fills_missing_fields() -> None:
    resolver = MagicMock(return_value=PreviewMetadata(title='RT', description='RD', image_url='https://example.com/r.png'))

    preview = merge_preview('T', None, None, resolver=resolver)

    assert preview == PreviewMetadata(title='T', description='RD', image_url='https://example.com/r.png')
    resolver.assert_called_once_with()
