"""Abstract base class for URL mapping data access objects (DAOs).

This class establishes a consistent contract for all URL mapping DAO implementations,
regardless of the underlying storage mechanism (e.g., in-memory, Redis, PostgreSQL).

A DAO owns two coupled mappings, shortcode -> target and target -> shortcode,
and must never let a caller observe one of them updated without the other.

Responsibilities:
    - Provide an atomic insert-if-absent operation for URLMappingModel objects.
    - Provide lookups in both directions.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from urlshortener.models import URLMappingModel
        >>> from urlshortener.dao.memory import URLMappingMemoryDAO

        >>> dao = URLMappingMemoryDAO()

        >>> mapping = URLMappingModel(
        ...     target="https://example.com/blog/article-123",
        ...     shortcode="a1b2c3d",
        ... )
        >>> dao.insert(mapping)

        >>> dao.get("a1b2c3d").target
        'https://example.com/blog/article-123'

        >>> dao.get_by_target("https://example.com/blog/article-123").shortcode
        'a1b2c3d'

NOTE:
    The only removal a DAO performs is retiring the stale shortcode of a
    re-bound target URL (see insert with retire_stale=True).
"""

from abc import ABC, abstractmethod

from urlshortener.models import URLMappingModel


class URLMappingBaseDAO(ABC):
    """Interface for URL mapping data access objects (DAOs).

    Methods:
        insert(mapping: URLMappingModel, retire_stale: bool = True, **kwargs) -> URLMappingBaseDAO:
            Atomically bind a shortcode to a target URL.
            No-op if the exact pair is already stored.
            Raises ShortCodeCollisionError if the shortcode maps to a different URL.
            Raises TargetConflictError if the URL maps to a different shortcode and retire_stale is False.
            Raises DataStoreError on connection or write failure.

        get(shortcode: str, **kwargs) -> URLMappingModel:
            Retrieve a mapping by shortcode.
            Raises ShortURLNotFoundError if the entry does not exist.
            Raises DataStoreError on connection or read failure.

        get_by_target(target: str, **kwargs) -> URLMappingModel:
            Retrieve a mapping by target URL.
            Raises ShortURLNotFoundError if the entry does not exist.
            Raises DataStoreError on connection or read failure.

    Subclassing:
        Datastore-specific implementations (e.g., URLMappingRedisDAO or
        URLMappingSQLDAO) must extend this class and implement all
        abstract methods.
    """

    @abstractmethod
    def insert(self, mapping: URLMappingModel, retire_stale: bool = True, **kwargs) -> 'URLMappingBaseDAO':
        """Atomically insert a shortcode -> target URL mapping into the data store.

        Outcomes, depending on what is already stored:
            - the same (shortcode, target) pair: no-op, succeeds.
            - shortcode bound to a different target: ShortCodeCollisionError,
              the existing mapping is left intact.
            - target bound to a different shortcode: with retire_stale=True the
              stale shortcode is removed together with writing the new pair;
              with retire_stale=False TargetConflictError is raised.

        Args:
            mapping (URLMappingModel):
                The mapping to be inserted.

            retire_stale (bool):
                Whether to replace an existing binding of the target URL
                to a different shortcode. Defaults to True.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            URLMappingBaseDAO: self (for method chaining)

        Raises:
            ShortCodeCollisionError:
                If the shortcode is already bound to a different target URL.

            TargetConflictError:
                If the target URL is bound to a different shortcode and retire_stale is False.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, shortcode: str, **kwargs) -> URLMappingModel:
        """Retrieve a mapping from the data store by its shortcode.

        Args:
            shortcode (str):
                The shortcode of the mapping to be retrieved.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            URLMappingModel: The stored mapping.

        Raises:
            ShortURLNotFoundError:
                If no mapping with the given shortcode exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get_by_target(self, target: str, **kwargs) -> URLMappingModel:
        """Retrieve a mapping from the data store by its target URL.

        Args:
            target (str):
                The original URL of the mapping to be retrieved.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            URLMappingModel: The stored mapping.

        Raises:
            ShortURLNotFoundError:
                If the target URL hasn't been shortened.

            DataStoreError:
                If there is an error in the data store.
        """
        pass
