"""Method grouping: matching, partitioning and assembly of method groups."""

from ogen_postgen.grouping.assembler import assemble
from ogen_postgen.grouping.matcher import MethodMatcher
from ogen_postgen.grouping.partitioner import (
    MethodPartitioner,
    parse_strategy,
    partition,
)

__all__ = [
    'MethodMatcher',
    'MethodPartitioner',
    'assemble',
    'parse_strategy',
    'partition',
]
