"""Relational schema for URL mappings

A single table keyed by shortcode with a unique constraint on the original URL.
The two constraints together are what make the stored relation a bijection.

    CREATE TABLE urls (
        short_code   TEXT PRIMARY KEY,
        original_url TEXT NOT NULL UNIQUE
    );
"""

from sqlalchemy import Column, MetaData, Table, Text


metadata = MetaData()

urls_table = Table(
    'urls',
    metadata,
    Column('short_code', Text, primary_key=True),
    Column('original_url', Text, nullable=False, unique=True),
)
