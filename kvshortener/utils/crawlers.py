"""Link-preview crawler detection

The redirect path asks one question: "does this request come from a bot
that renders link previews instead of following redirects?". The answer is
a pluggable predicate so the policy can change without touching the
redirect handler.

Example:
    >>> looks_like_preview_crawler('facebookexternalhit/1.1 (+http://www.facebook.com/externalhit_uatext.php)')
    True
    >>> looks_like_preview_crawler('Mozilla/5.0 (X11; Linux x86_64) Firefox/128.0')
    False
"""

from collections.abc import Callable, Iterable

from kvshortener.constants import Preview


type CrawlerPredicate = Callable[[str], bool]


def signature_predicate(signatures: Iterable[str]) -> CrawlerPredicate:
    """Build a predicate matching any of the given user-agent fragments (case-insensitive)"""
    lowered = tuple(signature.lower() for signature in signatures)

    def predicate(user_agent: str) -> bool:
        agent = (user_agent or '').lower()
        return any(signature in agent for signature in lowered)

    return predicate


looks_like_preview_crawler: CrawlerPredicate = signature_predicate(Preview.CRAWLER_SIGNATURES)
