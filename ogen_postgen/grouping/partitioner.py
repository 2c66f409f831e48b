"""Partitioning of interface methods into named groups.

Three strategies are supported:

- ``each``: one group per method, ``<Method>Handler``.
- ``tags``: one group per declared OpenAPI tag, ``<Tag>Service``; a method
  implementing operations under several tags is placed in each of them.
- ``paths``: one group per OpenAPI path, named after its camel-cased
  segments, ``/pet/{petId}`` -> ``PetPetIdService``.

Under ``tags`` and ``paths`` every method that matched no operation ends up
in ``UnmatchedMethodsHandler`` so that nothing is dropped from the output.
"""

import logging
from collections.abc import Iterable, Sequence

from ogen_postgen.exceptions import ConfigurationError, UnsupportedStrategyError
from ogen_postgen.grouping.matcher import MethodMatcher
from ogen_postgen.models import (
    UNMATCHED_GROUP_NAME,
    MatchMode,
    MethodDescriptor,
    MethodGroup,
    PartitionResult,
    SpecModel,
    Strategy,
)
from ogen_postgen.utils import path_to_identifier, to_camel

logger = logging.getLogger(__name__)


class _GroupBuilder:
    """Accumulates the methods of one group, each method at most once."""

    def __init__(self, name: str):
        self.name = name
        self.methods: list[MethodDescriptor] = []
        self._names: set[str] = set()

    def add(self, method: MethodDescriptor) -> None:
        if method.name not in self._names:
            self._names.add(method.name)
            self.methods.append(method)

    def build(self) -> MethodGroup:
        return MethodGroup(name=self.name, methods=tuple(self.methods))


class MethodPartitioner:
    """Splits a method list into groups according to a :class:`Strategy`."""

    def __init__(
        self,
        strategy: Strategy = Strategy.PATHS,
        match_mode: MatchMode = MatchMode.WORD,
    ):
        self.strategy = Strategy(strategy)
        self.matcher = MethodMatcher(match_mode)

    def partition(
        self, methods: Sequence[MethodDescriptor], spec: SpecModel | None
    ) -> PartitionResult:
        """Partition ``methods`` using operations and tags from ``spec``.

        ``spec`` may only be ``None`` for the ``each`` strategy.

        Raises:
            ConfigurationError: If a spec-driven strategy gets no spec.
        """
        error_handler = next((m for m in methods if m.is_error_handler), None)
        candidates = [m for m in methods if not m.is_error_handler]

        if self.strategy is Strategy.EACH:
            groups = self._by_each(candidates)
            matched = {m.name for m in candidates}
        else:
            if spec is None:
                raise ConfigurationError(
                    f"strategy '{self.strategy.value}' requires an OpenAPI document",
                    field='openapi',
                )
            if self.strategy is Strategy.TAGS:
                builders = self._by_tags(candidates, spec)
            else:
                builders = self._by_paths(candidates, spec)

            matched = {m.name for b in builders for m in b.methods}
            groups = []
            for builder in builders:
                if builder.methods:
                    groups.append(builder.build())
                else:
                    logger.debug('Group %s has no methods, skipping', builder.name)

            unmatched = _unmatched(candidates, matched)
            if unmatched:
                logger.warning(
                    '%d methods matched no operation: %s',
                    len(unmatched),
                    ', '.join(m.name for m in unmatched),
                )
                groups.append(MethodGroup(name=UNMATCHED_GROUP_NAME, methods=tuple(unmatched)))

        logger.info(
            'Partitioned %d methods into %d groups by %s',
            len(candidates),
            len(groups),
            self.strategy.value,
        )
        return PartitionResult(
            groups=tuple(groups),
            matched_names=frozenset(matched),
            error_handler=error_handler,
        )

    def _by_each(self, methods: Iterable[MethodDescriptor]) -> list[MethodGroup]:
        return [MethodGroup(name=f'{m.name}Handler', methods=(m,)) for m in methods]

    def _by_tags(
        self, methods: Sequence[MethodDescriptor], spec: SpecModel
    ) -> list[_GroupBuilder]:
        builders: dict[str, _GroupBuilder] = {}
        associations: list[tuple[str, str]] = []
        for operation in spec.iter_operations():
            for tag in operation.tags:
                if tag not in spec.declared_tags:
                    logger.debug(
                        'Tag %s of %s is not declared, ignoring',
                        tag,
                        operation.identifier,
                    )
                    continue
                if tag not in builders:
                    builders[tag] = _GroupBuilder(f'{to_camel(tag)}Service')
                associations.append((tag, operation.identifier))

        for tag, identifier in associations:
            for method in methods:
                if self.matcher.matches(method, identifier):
                    logger.debug('tag: %s, method: %s, operation: %s', tag, method.name, identifier)
                    builders[tag].add(method)
        return list(builders.values())

    def _by_paths(
        self, methods: Sequence[MethodDescriptor], spec: SpecModel
    ) -> list[_GroupBuilder]:
        builders = []
        for path_item in spec.path_items:
            builder = _GroupBuilder(f'{path_to_identifier(path_item.path)}Service')
            for operation in path_item.operations:
                for method in methods:
                    if self.matcher.matches(method, operation.identifier):
                        logger.debug(
                            'path: %s, method: %s, operation: %s',
                            path_item.path,
                            method.name,
                            operation.identifier,
                        )
                        builder.add(method)
            builders.append(builder)
        return builders


def _unmatched(
    methods: Iterable[MethodDescriptor], matched: set[str]
) -> list[MethodDescriptor]:
    seen: set[str] = set()
    unmatched = []
    for method in methods:
        if method.name in matched or method.name in seen:
            continue
        seen.add(method.name)
        unmatched.append(method)
    return unmatched


def partition(
    methods: Sequence[MethodDescriptor],
    spec: SpecModel | None,
    strategy: Strategy,
    match_mode: MatchMode = MatchMode.WORD,
) -> PartitionResult:
    """Convenience wrapper around :class:`MethodPartitioner`."""
    return MethodPartitioner(strategy, match_mode).partition(methods, spec)


STRATEGY_ALIASES = {'tag': Strategy.TAGS, 'path': Strategy.PATHS}


def parse_strategy(value: str | Strategy) -> Strategy:
    """Turn a ``--separate`` value into a :class:`Strategy`.

    ``tag`` and ``path`` are accepted as aliases of ``tags`` and ``paths``.

    Raises:
        UnsupportedStrategyError: If the value names no known strategy.
    """
    if isinstance(value, Strategy):
        return value
    normalized = value.strip().lower()
    if normalized in STRATEGY_ALIASES:
        return STRATEGY_ALIASES[normalized]
    try:
        return Strategy(normalized)
    except ValueError:
        raise UnsupportedStrategyError(
            value, supported=['each', 'tag', 'tags', 'paths']
        )
