from urlshortener.dao.sql.schema import metadata, urls_table
from urlshortener.dao.sql.url_mapping_sql_dao import URLMappingSQLDAO


__all__ = [
    'metadata',
    'urls_table',
    'URLMappingSQLDAO',
]
