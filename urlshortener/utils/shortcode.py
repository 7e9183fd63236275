"""Shortcode derivation utility

This module derives deterministic shortcode candidates from a target URL.
The URL's SHA-256 digest is encoded in Base62, and the retry ladder uses
increasingly long prefixes of that encoding.

Functions:
    encode_digest(target) -> str:
        Base62-encode the SHA-256 digest of a target URL.
    candidate_shortcodes(target, lengths=ShortCode.LENGTHS) -> list[str]:
        Return the shortcode candidates of a target URL, shortest first.

Example:
    >>> from urlshortener.utils import candidate_shortcodes
    >>> [len(code) for code in candidate_shortcodes('https://example.com/a')]
    [7, 8, 9, 10]
"""

import hashlib
import string
from collections.abc import Iterable

from urlshortener.constants import ShortCode


ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
BASE = len(ALPHABET)  # 26 lowercase + 26 uppercase + 10 digits


def encode_digest(target: str) -> str:
    """Encode the SHA-256 digest of a target URL as a fixed-length Base62 string.

    The URL is hashed as its UTF-8 bytes without any normalization, so
    the same string always produces the same encoding.

    Args:
        target (str):
            The original URL.

    Returns:
        str: 43 Base62 characters, most significant digit first.

    NOTE:
        - 62**43 > 2**256, so the encoding is injective over digests.
        - Small digests are left-padded with ALPHABET[0] ('a').
    """
    if not isinstance(target, str):
        raise TypeError(f'Target URL must be of type string (given type: {type(target)}).')

    digest = int.from_bytes(hashlib.sha256(target.encode('utf-8')).digest(), 'big')

    # Custom base62 encoding algorithm:
    # 1- Encode the digest into base62 (least significant digit first)
    # 2- Reverse order to put the most significant digit first (reversed())
    # 3- Join characters into a single string (''.join())
    digits = []
    for _ in range(ShortCode.ENCODED_DIGEST_LENGTH):
        digest, remainder = divmod(digest, BASE)
        digits.append(ALPHABET[remainder])
    return ''.join(reversed(digits))


def candidate_shortcodes(target: str, lengths: Iterable[int] = ShortCode.LENGTHS) -> list[str]:
    """Return the retry ladder of shortcode candidates for a target URL.

    Every candidate is a prefix of the same digest encoding, so a longer
    candidate always extends the shorter ones.

    Args:
        target (str):
            The original URL.
        lengths (Iterable[int], optional):
            Candidate lengths in the order they should be tried.
            Defaults to 7, 8, 9, 10.

    Returns:
        list[str]: one candidate per length.

    Raises:
        ValueError: If a length is not between 1 and the encoded digest length.
    """
    encoded = encode_digest(target)

    candidates = []
    for length in lengths:
        if not 0 < length <= ShortCode.ENCODED_DIGEST_LENGTH:
            raise ValueError(f'Shortcode length must be between 1 and {ShortCode.ENCODED_DIGEST_LENGTH} (given value: {length}).')
        candidates.append(encoded[:length])
    return candidates
