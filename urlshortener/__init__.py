from urlshortener.shortener import URLShortener
from urlshortener.models import URLMappingModel


__all__ = [
    'URLShortener',
    'URLMappingModel',
]
