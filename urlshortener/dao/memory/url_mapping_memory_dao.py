"""Process-local Data Access Object (DAO) for URL mappings

Keeps both directions of the mapping in plain dictionaries guarded by a single
lock. Every operation holds the lock only for its own check-and-write, so
concurrent callers working on different URLs are serialized no longer than
a couple of dictionary operations.

Classes:
    URLMappingMemoryDAO:
        DAO for storing and retrieving URLMappingModel in process memory.

Example:
    >>> dao = URLMappingMemoryDAO()
    >>> dao.insert(URLMappingModel(target='https://example.com', shortcode='abc1234'))
    <URLMappingMemoryDAO>
    >>> dao.get('abc1234').target
    'https://example.com'
"""

import logging
import threading

from beartype import beartype

from urlshortener.models import URLMappingModel
from urlshortener.dao.base import URLMappingBaseDAO
from urlshortener.dao.exceptions import ShortCodeCollisionError, ShortURLNotFoundError, TargetConflictError


logger = logging.getLogger(__name__)


class URLMappingMemoryDAO(URLMappingBaseDAO):
    """In-memory implementation of URLMappingBaseDAO

    NOTE: state lives only as long as the process. Two DAO instances never
          share mappings.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._targets: dict[str, str] = {}  # shortcode -> target
        self._shortcodes: dict[str, str] = {}  # target -> shortcode

    @beartype
    def insert(self, mapping: URLMappingModel, retire_stale: bool = True, **kwargs) -> 'URLMappingMemoryDAO':
        shortcode, target = mapping.shortcode, mapping.target

        with self._lock:
            existing_target = self._targets.get(shortcode)
            if existing_target is not None:
                if existing_target != target:
                    raise ShortCodeCollisionError(shortcode, existing_target=existing_target)
                return self

            stale_shortcode = self._shortcodes.get(target)
            if stale_shortcode is not None:
                if not retire_stale:
                    raise TargetConflictError(target, existing_shortcode=stale_shortcode)
                del self._targets[stale_shortcode]
                logger.info(
                    'Retiring stale shortcode for target URL.',
                    extra={'shortcode': stale_shortcode, 'newShortcode': shortcode},
                )

            self._targets[shortcode] = target
            self._shortcodes[target] = shortcode

        return self

    @beartype
    def get(self, shortcode: str, **kwargs) -> URLMappingModel:
        with self._lock:
            target = self._targets.get(shortcode)

        if target is None:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")
        return URLMappingModel(target=target, shortcode=shortcode)

    @beartype
    def get_by_target(self, target: str, **kwargs) -> URLMappingModel:
        with self._lock:
            shortcode = self._shortcodes.get(target)

        if shortcode is None:
            raise ShortURLNotFoundError(f"Short URL for '{target}' not found.")
        return URLMappingModel(target=target, shortcode=shortcode)

    def __len__(self) -> int:
        with self._lock:
            return len(self._targets)
