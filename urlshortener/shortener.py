"""URL shortening service

Turns target URLs into stable shortcodes and resolves shortcodes back.
Shortcodes are derived from the SHA-256 digest of the target URL (see
urlshortener.utils.shortcode), so no central counter is needed and the same
URL always maps onto the same candidates.

Shorten procedure:
    - Step 1: Return the existing shortcode if the URL was already shortened
    - Step 2: Derive the candidate shortcodes (7, 8, 9, 10 characters)
    - Step 3: Try to insert each candidate, widening on collisions
    - Step 4: Re-check the URL once more before declaring the ladder exhausted

Classes:
    URLShortener:
        Stateless service on top of any URLMappingBaseDAO.

Example:
    >>> from urlshortener import URLShortener
    >>> from urlshortener.dao.memory import URLMappingMemoryDAO
    >>> shortener = URLShortener(URLMappingMemoryDAO())
    >>> shortcode = shortener.shorten('https://example.com/a')
    >>> shortener.shorten('https://example.com/a') == shortcode
    True
    >>> shortener.resolve(shortcode)
    'https://example.com/a'
"""

import logging
from collections.abc import Iterable

from beartype import beartype

from urlshortener.constants import ShortCode
from urlshortener.models import URLMappingModel
from urlshortener.exceptions import GenerationExhaustedError
from urlshortener.dao.base import URLMappingBaseDAO
from urlshortener.dao.exceptions import ShortCodeCollisionError, ShortURLNotFoundError, TargetConflictError
from urlshortener.utils.shortcode import candidate_shortcodes


logger = logging.getLogger(__name__)


class URLShortener:
    """Get-or-create shortcodes for target URLs

    The service holds no mutable state; all mapping state is owned by the DAO.
    A single instance can be shared by any number of concurrent callers.

    Attributes:
        dao (URLMappingBaseDAO):
            Data store for the shortcode <-> target URL mappings.
        lengths (tuple[int, ...]):
            Candidate shortcode lengths, tried in order.

    Methods:
        shorten(target: str) -> str:
            Return the shortcode of target, creating the mapping if needed.
            Raises GenerationExhaustedError if every candidate collided.
            Raises TargetConflictError if a concurrent writer bound target to a
            different shortcode which then disappeared.
            Raises DataStoreError on data store failures (never retried).

        resolve(shortcode: str) -> str:
            Return the target URL of shortcode.
            Raises ShortURLNotFoundError if the shortcode doesn't exist.
            Raises DataStoreError on data store failures.
    """

    def __init__(self, dao: URLMappingBaseDAO, lengths: Iterable[int] = ShortCode.LENGTHS):
        self.dao = dao
        self.lengths = tuple(lengths)
        if not self.lengths:
            raise ValueError('At least one shortcode length is required.')
        if not all(1 <= length <= ShortCode.ENCODED_DIGEST_LENGTH for length in self.lengths):
            raise ValueError(f'Shortcode lengths must be between 1 and {ShortCode.ENCODED_DIGEST_LENGTH}, got {list(self.lengths)}.')

    @beartype
    def shorten(self, target: str) -> str:
        # 1- Idempotence fast path: no hashing, no write
        try:
            existing = self.dao.get_by_target(target)
        except ShortURLNotFoundError:
            pass
        else:
            logger.debug('Target URL already shortened.', extra={'shortcode': existing.shortcode})
            return existing.shortcode

        # 2- Derive candidates from the target URL's digest
        candidates = candidate_shortcodes(target, self.lengths)

        # 3- Walk the retry ladder; DataStoreError aborts it immediately
        for shortcode in candidates:
            try:
                self.dao.insert(URLMappingModel(target=target, shortcode=shortcode), retire_stale=False)
            except ShortCodeCollisionError as e:
                logger.info(
                    'Shortcode collision with length %d, trying longer.',
                    len(shortcode),
                    extra={'shortcode': shortcode, 'existingTarget': e.existing_target},
                )
                continue
            except TargetConflictError as e:
                # A concurrent writer committed this target first: its shortcode wins
                return self._committed_shortcode(target, conflict=e)
            else:
                logger.info('Created short URL.', extra={'shortcode': shortcode})
                return shortcode

        # 4- A concurrent writer may have committed this target while we collided
        try:
            existing = self.dao.get_by_target(target)
        except ShortURLNotFoundError:
            logger.error(
                'Failed to generate a unique shortcode.',
                extra={'candidates': candidates},
            )
            raise GenerationExhaustedError(
                f'Failed to generate unique short code for {target!r} after {len(candidates)} attempts.'
            ) from None
        else:
            logger.warning(
                'Shortcode ladder exhausted, but target URL was shortened concurrently.',
                extra={'shortcode': existing.shortcode},
            )
            return existing.shortcode

    @beartype
    def resolve(self, shortcode: str) -> str:
        return self.dao.get(shortcode).target

    def _committed_shortcode(self, target: str, conflict: TargetConflictError) -> str:
        try:
            return self.dao.get_by_target(target).shortcode
        except ShortURLNotFoundError:
            raise conflict from None
