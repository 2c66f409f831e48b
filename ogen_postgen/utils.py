import re
import unicodedata
from urllib.parse import urlparse

__all__ = ('is_url', 'path_to_identifier', 'to_camel')


def capitalize(input_string):
    if not input_string:
        return ''
    return input_string[0].upper() + input_string[1:]


def is_url(text):
    try:
        result = urlparse(text)
        return result.scheme in ('http', 'https') and bool(result.netloc)
    except (ValueError, AttributeError):
        return False


def remove_accents(input_str):
    nfkd_form = unicodedata.normalize('NFKD', input_str)
    return ''.join(c for c in nfkd_form if not unicodedata.combining(c))


def to_camel(name: str) -> str:
    """Convert a string into an exported Go identifier (UpperCamelCase).

    - Any run of characters that is not a letter or digit separates words
    - Each word gets its first letter upper-cased, the rest is kept
    - A letter directly following a digit is upper-cased as well

    >>> to_camel('pet-store')
    'PetStore'
    >>> to_camel('{petId}')
    'PetId'
    >>> to_camel('v1beta')
    'V1Beta'
    """
    if not name:
        return ''

    parts = re.split(r'[^A-Za-z0-9]+', remove_accents(name))
    words = []
    for part in parts:
        if not part:
            continue
        # v1beta -> V1Beta
        part = re.sub(r'(?<=[0-9])([a-z])', lambda m: m.group(1).upper(), part)
        words.append(capitalize(part))
    return ''.join(words)


def path_to_identifier(path: str) -> str:
    """Camel-case every ``/``-separated segment of a URL path and join them."""
    return ''.join(to_camel(segment) for segment in path.split('/'))
