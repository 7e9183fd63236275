from urlshortener.dao.base import URLMappingBaseDAO
from urlshortener.dao.memory import URLMappingMemoryDAO
from urlshortener.dao.redis import URLMappingRedisDAO
from urlshortener.dao.sql import URLMappingSQLDAO
from urlshortener.dao.factory import dao_from_config


__all__ = [
    'URLMappingBaseDAO',
    'URLMappingMemoryDAO',
    'URLMappingRedisDAO',
    'URLMappingSQLDAO',
    'dao_from_config',
]
