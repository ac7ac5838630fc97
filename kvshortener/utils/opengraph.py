"""OpenGraph preview metadata resolution

Fetch a target document and derive the PreviewMetadata shown by link-preview
crawlers. Resolution never fails: every field falls back to a default when it
is missing, invalid, or the document can't be fetched.

Functions:
    fetch_document(url, timeout) -> str
        GET the document, raising UpstreamFetchError on any failure.
    extract_preview(document) -> dict[str, str]
        Pull og:title, og:description, og:image and <title> out of HTML.
    resolve_preview(url, fetch=fetch_document) -> PreviewMetadata
        Fetch + extract + per-field fallback.
    merge_preview(title, description, image_url, resolver) -> PreviewMetadata
        Combine caller-supplied fields with resolved ones.

Example:
    >>> resolve_preview('https://unreachable.invalid')
    PreviewMetadata(title='Untitled', description='No description available', image_url='https://via.placeholder.com/1200x630?text=No+Image')
"""

import logging
from collections.abc import Callable
from typing import Optional

import httpx
from bs4 import BeautifulSoup

from kvshortener.constants import Preview
from kvshortener.exceptions import UpstreamFetchError
from kvshortener.models import PreviewMetadata
from kvshortener.utils.validators import is_absolute_url


logger = logging.getLogger(__name__)

OG_PROPERTIES = {
    'og:title': 'og_title',
    'og:description': 'og_description',
    'og:image': 'og_image',
}


def fetch_document(url: str, timeout: float = Preview.FETCH_TIMEOUT) -> str:
    """Fetch a remote document as text

    Raises:
        UpstreamFetchError:
            On network errors, timeouts, too many redirects or non-2xx responses.
    """
    try:
        with httpx.Client(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
            max_redirects=5,
            headers={'User-Agent': Preview.USER_AGENT},
        ) as client:
            response = client.get(url)
    except httpx.HTTPError as e:
        raise UpstreamFetchError(f'Failed to fetch {url}: {e.__class__.__name__}') from e

    if not response.is_success:
        raise UpstreamFetchError(f'Failed to fetch {url}: HTTP {response.status_code}')
    return response.text


def extract_preview(document: str) -> dict[str, str]:
    """Extract OpenGraph tags and the <title> text from an HTML document

    Returns:
        dict[str, str]: any of 'og_title', 'og_description', 'og_image', 'title'.
                        Missing or blank values are omitted.
    """
    soup = BeautifulSoup(document, 'html.parser')
    found = {}

    for meta in soup.find_all('meta'):
        prop = meta.get('property') or meta.get('name')
        field = OG_PROPERTIES.get(prop.strip().lower()) if isinstance(prop, str) else None
        content = (meta.get('content') or '').strip()
        if field and content and field not in found:
            found[field] = content

    if soup.title is not None:
        title = soup.title.get_text(strip=True)
        if title:
            found['title'] = title

    return found


def resolve_preview(url: str, fetch: Callable[[str], str] = fetch_document) -> PreviewMetadata:
    """Resolve preview metadata for url, applying per-field fallbacks

    Fallbacks:
        title       -> og:title, else <title> text, else 'Untitled'
        description -> og:description, else a fixed placeholder sentence
        image_url   -> og:image if it is an absolute http(s) URL, else a placeholder image
    """
    try:
        found = extract_preview(fetch(url))
    except UpstreamFetchError as e:
        logger.warning('Falling back to default preview metadata.', extra={'url': url, 'reason': str(e)})
        found = {}

    image_url = found.get('og_image', '')
    return PreviewMetadata(
        title=found.get('og_title') or found.get('title') or Preview.DEFAULT_TITLE,
        description=found.get('og_description') or Preview.DEFAULT_DESCRIPTION,
        image_url=image_url if is_absolute_url(image_url) else Preview.DEFAULT_IMAGE_URL,
    )


def merge_preview(
    title: Optional[str],
    description: Optional[str],
    image_url: Optional[str],
    resolver: Callable[[], PreviewMetadata],
) -> PreviewMetadata:
    """Use caller-supplied preview fields, resolving the rest only if something is missing

    The resolver is not called when all three fields are supplied.
    """
    if title and description and image_url:
        return PreviewMetadata(title=title, description=description, image_url=image_url)

    resolved = resolver()
    return PreviewMetadata(
        title=title or resolved.title,
        description=description or resolved.description,
        image_url=image_url or resolved.image_url,
    )
