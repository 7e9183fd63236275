from urlshortener.dao.base.url_mapping_base_dao import URLMappingBaseDAO


__all__ = [
    'URLMappingBaseDAO',
]
