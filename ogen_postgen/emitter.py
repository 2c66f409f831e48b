"""Rendering of a :class:`GenerationInfo` into a Go source file.

The generated file declares one interface per method group and a
``PostgenHandler`` struct that implements the original ogen ``Handler``
interface by forwarding every call to the group holding the method, so the
result can be passed to ``NewServer`` unchanged.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from jinja2 import Environment, PackageLoader, StrictUndefined

from ogen_postgen.models import (
    ErrorHandlerPolicy,
    GenerationInfo,
    ImportDescriptor,
    MethodDescriptor,
)

logger = logging.getLogger(__name__)

ERROR_HANDLER_INTERFACE = 'ErrorHandler'
COMPOSITE_NAME = 'PostgenHandler'


@dataclass
class _Forwarder:
    """A method of the composite handler delegating to one group."""

    method: MethodDescriptor
    target: str
    signature: str
    call: str
    returns: bool


@dataclass
class _RenderContext:
    package_name: str
    interface_name: str
    imports: list[ImportDescriptor] = field(default_factory=list)
    groups: list = field(default_factory=list)
    error_handler: MethodDescriptor | None = None
    fields: list[str] = field(default_factory=list)
    forwarders: list[_Forwarder] = field(default_factory=list)
    implements: bool = True


def go_comment(text: str, indent: str = '') -> str:
    """Turn doc comment text back into ``//`` lines."""
    lines = text.rstrip('\n').split('\n') if text else []
    return '\n'.join(f'{indent}//{" " + line if line else ""}' for line in lines)


def go_results(returns: str) -> str:
    """Wrap a result list in parentheses where Go requires them."""
    if not returns:
        return ''
    if ',' in _strip_brackets(returns) or ' ' in _strip_brackets(returns):
        return f' ({returns})'
    return f' {returns}'


def _strip_brackets(text: str) -> str:
    # commas and spaces inside func(...), map[...] or generics don't count
    previous = None
    while previous != text:
        previous = text
        text = re.sub(r'\([^()]*\)|\[[^\[\]]*\]|\{[^{}]*\}', '', text)
    return text


class GoServicesEmitter:
    """Renders grouped interfaces and the forwarding handler as Go code.

    Example:
        >>> emitter = GoServicesEmitter()
        >>> source = emitter.render(info, package_name='api')
        >>> source.splitlines()[0]
        '// Code generated by ogen-postgen, DO NOT EDIT.'
    """

    def __init__(self, interface_name: str = 'Handler'):
        self.interface_name = interface_name
        self._env = Environment(
            loader=PackageLoader('ogen_postgen', 'templates'),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self._env.filters['go_comment'] = go_comment
        self._env.filters['go_results'] = go_results

    def render(self, info: GenerationInfo, package_name: str) -> str:
        context = self._build_context(info, package_name)
        template = self._env.get_template('services.go.j2')
        return template.render(ctx=context)

    def _build_context(self, info: GenerationInfo, package_name: str) -> _RenderContext:
        context = _RenderContext(
            package_name=package_name,
            interface_name=self.interface_name,
            error_handler=info.error_handler,
            groups=list(info.groups),
            implements=info.policy is not ErrorHandlerPolicy.DROP,
        )

        seen: set[str] = set()
        for group in info.groups:
            context.fields.append(group.name)
            for method in group.methods:
                if method.name in seen:
                    continue
                seen.add(method.name)
                context.forwarders.append(_forwarder(method, group.name))

        if info.error_handler is not None:
            context.fields.append(ERROR_HANDLER_INTERFACE)
            context.forwarders.append(
                _forwarder(info.error_handler, ERROR_HANDLER_INTERFACE)
            )

        context.imports = used_imports(info.imports, context.groups, info.error_handler)
        logger.debug(
            'Rendering %d groups, %d forwarding methods, %d imports',
            len(context.groups),
            len(context.forwarders),
            len(context.imports),
        )
        return context


def used_imports(
    imports, groups, error_handler: MethodDescriptor | None = None
) -> list[ImportDescriptor]:
    """Keep the imports whose qualifier occurs in a rendered signature.

    Blank and dot imports only matter to the file they were declared in and
    are never carried over.
    """
    signatures = []
    for group in groups:
        for method in group.methods:
            signatures.append(f'{method.typed_parameters} {method.returns}')
    if error_handler is not None:
        signatures.append(f'{error_handler.typed_parameters} {error_handler.returns}')
    text = ' '.join(signatures)

    used = []
    for info in imports:
        qualifier = info.alias or info.package_name
        if not qualifier or qualifier in ('_', '.'):
            continue
        if re.search(rf'(?<![\w.]){re.escape(qualifier)}\.', text):
            used.append(info)
    return used


def _forwarder(method: MethodDescriptor, target: str) -> _Forwarder:
    params = []
    args = []
    for index, parameter in enumerate(method.parameters):
        name = parameter.name if parameter.name != '_' else f'p{index}'
        params.append(f'{name} {parameter.type}')
        args.append(f'{name}...' if parameter.type.startswith('...') else name)
    return _Forwarder(
        method=method,
        target=target,
        signature=f'{method.name}({", ".join(params)}){go_results(method.returns)}',
        call=f'h.{target}.{method.name}({", ".join(args)})',
        returns=bool(method.returns),
    )
