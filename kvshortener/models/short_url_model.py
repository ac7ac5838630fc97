import html
from dataclasses import dataclass, replace
from datetime import datetime, UTC
from typing import Optional


@dataclass(frozen=True)
class PreviewMetadata:
    """Rich link-preview (OpenGraph) metadata for a target URL.

    Values are stored raw. Use `escaped()` before embedding them in markup.

    Attributes:
        title (str):
            Page title shown by link-preview crawlers.
        description (str):
            Short page description.
        image_url (str):
            Absolute URL of the preview image.

    Example:
        >>> preview = PreviewMetadata(title='<b>Hi</b>', description='x', image_url='https://example.com/a.png')
        >>> preview.escaped().title
        '&lt;b&gt;Hi&lt;/b&gt;'
    """

    title: str
    description: str
    image_url: str

    def escaped(self) -> 'PreviewMetadata':
        """Return a copy with every field HTML/attribute-escaped."""
        return PreviewMetadata(
            title=html.escape(self.title, quote=True),
            description=html.escape(self.description, quote=True),
            image_url=html.escape(self.image_url, quote=True),
        )

    def to_dict(self) -> dict[str, str]:
        return {
            'title': self.title,
            'description': self.description,
            'image_url': self.image_url,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'PreviewMetadata':
        return cls(
            title=str(data['title']),
            description=str(data['description']),
            image_url=str(data['image_url']),
        )


@dataclass(frozen=True)
class ShortURLModel:
    """Represent a shortened URL mapping.

    Attributes:
        target (str):
            The original long URL that the short code redirects to.
        shortcode (str):
            The unique short identifier representing the shortened URL.
        expires_at (Optional[datetime]):
            Moment after which the mapping is logically dead, even if it is
            still physically stored. None means the mapping never expires.
        preview (Optional[PreviewMetadata]):
            Rich-preview metadata served to social crawlers.

    Example:
        >>> from datetime import datetime, timedelta, UTC
        >>> url = ShortURLModel(
        ...     target="https://example.com/article/123",
        ...     shortcode="abc123",
        ...     expires_at=datetime.now(UTC) + timedelta(days=1),
        ... )
        >>> url.is_expired()
        False
    """

    target: str
    shortcode: str
    expires_at: Optional[datetime] = None
    preview: Optional[PreviewMetadata] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        now = now or datetime.now(UTC)
        return now > self.expires_at

    def with_target(self, target: str) -> 'ShortURLModel':
        return replace(self, target=target)
