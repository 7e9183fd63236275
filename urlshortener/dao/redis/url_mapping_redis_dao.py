"""Data Access Object (DAO) implementation for managing URL mappings in Redis

This module provides a Redis-based implementation of URLMappingBaseDAO.

Responsibilities:
    - Atomically insert shortcode <-> target URL mappings into Redis;
    - Retrieve mappings by shortcode or by target URL;
    - Retire stale shortcodes of re-bound target URLs;
    - Provide defensive error handling and raise appropriate DAO exceptions.

Key layout (see RedisKeySchema):
    <prefix>:links:<shortcode>:url          -> target URL
    <prefix>:targets:<target>:shortcode     -> shortcode

Classes:
    URLMappingRedisDAO:
        DAO for storing and retrieving URLMappingModel in a Redis datastore.

Example:
    >>> from urlshortener.models import URLMappingModel
    >>> from urlshortener.dao.redis import URLMappingRedisDAO

    >>> dao = URLMappingRedisDAO(prefix="app:dev")

    >>> mapping = URLMappingModel(
    ...     target="https://example.com/page",
    ...     shortcode="abc1234"
    ... )
    >>> dao.insert(mapping)
    <URLMappingRedisDAO>

    >>> dao.get("abc1234").target
    'https://example.com/page'
    >>> dao.get_by_target("https://example.com/page").shortcode
    'abc1234'
"""

import logging

import redis
from beartype import beartype

from urlshortener.constants import Datastore
from urlshortener.models import URLMappingModel
from urlshortener.dao.base import URLMappingBaseDAO
from urlshortener.dao.redis.mixins import RedisClientMixin
from urlshortener.dao.redis.helpers import handle_redis_connection_error
from urlshortener.dao.exceptions import (
    DataStoreError,
    ShortCodeCollisionError,
    ShortURLNotFoundError,
    TargetConflictError,
)


logger = logging.getLogger(__name__)


class URLMappingRedisDAO(RedisClientMixin, URLMappingBaseDAO):
    """Redis-based Data Access Object (DAO) for managing URL mappings

    This class implements the URLMappingBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        insert(mapping: URLMappingModel, retire_stale: bool = True, **kwargs) -> URLMappingRedisDAO:
            Atomically insert a mapping (optimistic WATCH/MULTI/EXEC transaction).
            Raises ShortCodeCollisionError when the shortcode maps to a different URL.
            Raises TargetConflictError when the URL maps to a different shortcode and retire_stale is False.
            Raises DataStoreError on connectivity issues with Redis.

        get(shortcode: str, **kwargs) -> URLMappingModel:
            Retrieve a mapping by shortcode.
            Raises ShortURLNotFoundError when the shortcode doesn't exist.
            Raises DataStoreError on connectivity issues with Redis.

        get_by_target(target: str, **kwargs) -> URLMappingModel:
            Retrieve a mapping by target URL.
            Raises ShortURLNotFoundError when the URL hasn't been shortened.
            Raises DataStoreError on connectivity issues with Redis.

    NOTE:
        The DAO expects a client created with decode_responses=True (the default).
    """

    @handle_redis_connection_error
    @beartype
    def insert(self, mapping: URLMappingModel, retire_stale: bool = True, **kwargs) -> 'URLMappingRedisDAO':
        """Atomically insert a URL mapping into Redis

        Both keys of the mapping are WATCHed while their current values are
        checked. All writes (including deleting a retired shortcode) are queued
        in a single MULTI block, so a concurrent reader either sees the whole
        pair or none of it. If another client touches a watched key before
        EXEC, the transaction is aborted and the check is repeated.

        Args:
            mapping (URLMappingModel):
                The shortcode <-> target URL mapping to insert.
            retire_stale (bool):
                Replace an existing binding of the target URL to another shortcode.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            URLMappingRedisDAO: self (for method chaining)

        Raises:
            ShortCodeCollisionError:
                If the shortcode is already bound to a different target URL.
            TargetConflictError:
                If the target URL is bound to another shortcode and retire_stale is False.
            DataStoreError:
                If a Redis connection issue occurs, or the optimistic lock keeps
                failing under contention.
        """
        link_url_key = self.keys.link_url_key(mapping.shortcode)
        target_shortcode_key = self.keys.target_shortcode_key(mapping.target)

        with self.redis.pipeline(transaction=True) as pipe:
            for attempt in range(1, Datastore.REDIS_MAX_WATCH_RETRIES + 1):
                try:
                    pipe.watch(link_url_key, target_shortcode_key)

                    existing_target = pipe.get(link_url_key)
                    if existing_target is not None:
                        if existing_target != mapping.target:
                            raise ShortCodeCollisionError(mapping.shortcode, existing_target=existing_target)
                        return self

                    stale_shortcode = pipe.get(target_shortcode_key)
                    if stale_shortcode is not None and not retire_stale:
                        raise TargetConflictError(mapping.target, existing_shortcode=stale_shortcode)

                    pipe.multi()
                    if stale_shortcode is not None:
                        pipe.delete(self.keys.link_url_key(stale_shortcode))
                    pipe.set(link_url_key, mapping.target)
                    pipe.set(target_shortcode_key, mapping.shortcode)
                    pipe.execute()
                except redis.exceptions.WatchError:
                    logger.debug(
                        'Watched keys changed during insert, retrying.',
                        extra={'shortcode': mapping.shortcode, 'attempt': attempt},
                    )
                    continue
                else:
                    if stale_shortcode is not None:
                        logger.info(
                            'Retired stale shortcode for target URL.',
                            extra={'shortcode': stale_shortcode, 'newShortcode': mapping.shortcode},
                        )
                    return self

        raise DataStoreError(
            f"Failed to insert short URL with code '{mapping.shortcode}' after "
            f'{Datastore.REDIS_MAX_WATCH_RETRIES} contended attempts.'
        )

    @handle_redis_connection_error
    @beartype
    def get(self, shortcode: str, **kwargs) -> URLMappingModel:
        """Retrieve a stored URL mapping by shortcode

        Raises:
            ShortURLNotFoundError:
                If the shortcode does not exist in Redis.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.get('abc1234')
            URLMappingModel(target='https://example.com', shortcode='abc1234')
        """
        target = self.redis.get(self.keys.link_url_key(shortcode))
        if target is None:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")
        return URLMappingModel(target=target, shortcode=shortcode)

    @handle_redis_connection_error
    @beartype
    def get_by_target(self, target: str, **kwargs) -> URLMappingModel:
        """Retrieve a stored URL mapping by target URL

        Raises:
            ShortURLNotFoundError:
                If the target URL hasn't been shortened.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        shortcode = self.redis.get(self.keys.target_shortcode_key(target))
        if shortcode is None:
            raise ShortURLNotFoundError(f"Short URL for '{target}' not found.")
        return URLMappingModel(target=target, shortcode=shortcode)
