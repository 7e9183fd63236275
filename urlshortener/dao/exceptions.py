"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    ShortURLNotFoundError:
        Raised when a URL mapping is not found in the data store.

    ShortCodeCollisionError:
        Raised when a shortcode is already bound to a different target URL.

    TargetConflictError:
        Raised when a target URL is already bound to a different shortcode.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, OOM, etc.).

Example:
    >>> from urlshortener.dao.exceptions import ShortCodeCollisionError
    >>> raise ShortCodeCollisionError('abc1234', existing_target='https://example.com')
    Traceback (most recent call last):
        ...
    urlshortener.dao.exceptions.ShortCodeCollisionError: Short code 'abc1234' already maps to 'https://example.com'.
"""


class DAOError(Exception):
    """Generic base class for DAO-related exceptions."""

    pass


class ShortURLNotFoundError(DAOError):
    """Exception raised when a URL mapping is not found in the data store."""

    pass


class ShortCodeCollisionError(DAOError):
    """Exception raised when a shortcode is already bound to a different target URL.

    Attributes:
        shortcode (str):
            The shortcode that couldn't be inserted.
        existing_target (str | None):
            The target URL the shortcode is currently bound to, if known.
    """

    def __init__(self, shortcode: str, existing_target: str | None = None):
        self.shortcode = shortcode
        self.existing_target = existing_target
        if existing_target is None:
            message = f"Short code '{shortcode}' already maps to a different URL."
        else:
            message = f"Short code '{shortcode}' already maps to '{existing_target}'."
        super().__init__(message)


class TargetConflictError(DAOError):
    """Exception raised when a target URL is already bound to a different shortcode.

    Attributes:
        target (str):
            The target URL that couldn't be inserted.
        existing_shortcode (str | None):
            The shortcode the target URL is currently bound to, if known.
    """

    def __init__(self, target: str, existing_shortcode: str | None = None):
        self.target = target
        self.existing_shortcode = existing_shortcode
        if existing_shortcode is None:
            message = f"URL '{target}' is already shortened to a different code."
        else:
            message = f"URL '{target}' is already shortened to '{existing_shortcode}'."
        super().__init__(message)


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, OOM, etc.
    """

    pass
