from dataclasses import dataclass


@dataclass(frozen=True)
class URLMappingModel:
    """Represent a committed shortcode <-> target URL mapping.

    The target URL is treated as an opaque string: it is neither validated
    nor normalized by the core.

    Attributes:
        target (str):
            The original long URL that the shortcode resolves to.
        shortcode (str):
            The unique base62 identifier bound to the target URL.

    Example:
        >>> mapping = URLMappingModel(
        ...     target="https://example.com/article/123",
        ...     shortcode="Gh71WPT",
        ... )
        >>> mapping.target
        'https://example.com/article/123'
        >>> mapping.shortcode
        'Gh71WPT'
    """

    target: str
    shortcode: str
