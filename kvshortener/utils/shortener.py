"""Shortcode generation utility

Functions:
    generate_shortcode(length=8, alphabet=Shortcode.ALPHABET):
        Draw a random, fixed-length, URL-safe short code.

Example:
    >>> from kvshortener.utils import generate_shortcode
    >>> generate_shortcode()
    'V1StGXR8'

NOTE:
    - Codes are random, not derived from a counter, so no global counter key
      is needed in the data store. Uniqueness is checked (and the draw retried)
      by the DAO at allocation time.
    - With 64 symbols and 8 characters the code space is 2^48.
"""

import secrets

from kvshortener.constants import Shortcode


def generate_shortcode(length: int = Shortcode.LENGTH, alphabet: str = Shortcode.ALPHABET) -> str:
    """Generate a random URL-safe short code.

    Args:
        length (int, optional):
            Number of characters. Defaults to 8.
        alphabet (str, optional):
            Symbols to draw from. Defaults to [A-Za-z0-9_-].

    Returns:
        str: The random short code.

    Raises:
        ValueError: If length is not positive or the alphabet is empty.
    """
    if length <= 0:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')
    if not alphabet:
        raise ValueError('Alphabet must be a non-empty string.')

    return ''.join(secrets.choice(alphabet) for _ in range(length))
