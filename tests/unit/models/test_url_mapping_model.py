"""Unit tests for URLMappingModel"""

import dataclasses

import pytest

from urlshortener.models import URLMappingModel


def test_url_mapping_model_fields():
    mapping = URLMappingModel(target='https://example.com', shortcode='abc1234')
    assert mapping.target == 'https://example.com'
    assert mapping.shortcode == 'abc1234'


def test_url_mapping_model_equality():
    assert URLMappingModel('https://example.com', 'abc1234') == URLMappingModel(target='https://example.com', shortcode='abc1234')
    assert URLMappingModel('https://example.com', 'abc1234') != URLMappingModel('https://example.com', 'abc12345')


def test_url_mapping_model_is_immutable():
    mapping = URLMappingModel(target='https://example.com', shortcode='abc1234')
    with pytest.raises(dataclasses.FrozenInstanceError):
        mapping.shortcode = 'zzz9999'
