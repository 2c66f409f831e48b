"""Association of interface methods with OpenAPI operations.

The doc comment ogen writes above every ``Handler`` method is the only
evidence of which operation the method implements, e.g.::

    // AddPet implements addPet operation.
    //
    // Add a new pet to the store.
    //
    // POST /pet

``MethodMatcher`` decides whether an operation identifier occurs in such a
comment according to a :class:`~ogen_postgen.models.MatchMode`.
"""

import re
from functools import lru_cache

from ogen_postgen.models import MatchMode, MethodDescriptor


@lru_cache(maxsize=1024)
def _word_pattern(identifier: str) -> re.Pattern:
    return re.compile(rf'(?<![\w-]){re.escape(identifier)}(?![\w-])')


@lru_cache(maxsize=1024)
def _marker_pattern(identifier: str) -> re.Pattern:
    return re.compile(rf'\bimplements\s+{re.escape(identifier)}\s+operation\b')


class MethodMatcher:
    """Tests method doc comments against operation identifiers.

    The reserved error handler method never matches anything.

    Example:
        >>> matcher = MethodMatcher(MatchMode.WORD)
        >>> method = MethodDescriptor(name='ListItems', doc_comment='ListItems implements listItems operation.')
        >>> matcher.matches(method, 'listItems'), matcher.matches(method, 'list')
        (True, False)
    """

    def __init__(self, mode: MatchMode = MatchMode.WORD):
        self.mode = MatchMode(mode)

    def matches(self, method: MethodDescriptor, identifier: str) -> bool:
        if method.is_error_handler or not identifier:
            return False
        comment = method.doc_comment
        if self.mode is MatchMode.SUBSTRING:
            return identifier in comment
        if self.mode is MatchMode.MARKER:
            return _marker_pattern(identifier).search(comment) is not None
        return _word_pattern(identifier).search(comment) is not None
