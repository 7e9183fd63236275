import functools
from typing import TypeVar, Any
from collections.abc import Callable

from sqlalchemy.exc import SQLAlchemyError

from urlshortener.dao.exceptions import DataStoreError


__all__ = []

F = TypeVar('F', bound=Callable[..., Any])


def handle_sql_error[F](method: F) -> F:
    """Wrap SQL-interacting DAO methods to surface database errors as DataStoreError

    DAO exceptions raised by the wrapped method pass through untouched.

    Args:
        method (Callable[..., Any]):
            DAO method performing SQLAlchemy operations which may raise SQLAlchemyError.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on database failures.
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except SQLAlchemyError as e:
            database = self.engine.url.render_as_string(hide_password=True)
            raise DataStoreError(f'Database error at {database}: {e.__class__.__name__}.') from e

    return wrapper
