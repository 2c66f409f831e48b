"""Extraction of interface method signatures from ogen-generated Go code.

This module parses a Go source file with tree-sitter, locates a named
interface declaration (``Handler`` in ``oas_server_gen.go``) and describes
each of its methods as plain text: name, doc comment, parameters and
results. The import table of the file is captured alongside so that
package-qualified types can be rendered with the right qualifier.
"""

import logging
import re
from pathlib import Path

import tree_sitter_go
from tree_sitter import Language, Node, Parser

from ogen_postgen.exceptions import (
    InterfaceNotFoundError,
    ReadError,
    SourceParseError,
)
from ogen_postgen.models import (
    ExtractedInterface,
    ImportDescriptor,
    MethodDescriptor,
    Parameter,
)

logger = logging.getLogger(__name__)

GO_LANGUAGE = Language(tree_sitter_go.language())

DISCARD_ALIAS = '_'

# method_spec/method_spec_list are the node names of older grammar releases
_METHOD_NODES = {'method_elem', 'method_spec'}
_DIRECTIVE = re.compile(r'^(line |extern |export |[a-z0-9]+:[a-z0-9])')


class InterfaceExtractor:
    """Extracts a structured description of a Go interface.

    Example:
        >>> extractor = InterfaceExtractor()
        >>> handler = extractor.extract('api/oas_server_gen.go', 'Handler')
        >>> [m.name for m in handler.methods]
        ['AddPet', 'DeletePet', 'NewError']
    """

    def __init__(self, parser: Parser | None = None):
        self._parser = parser or Parser(GO_LANGUAGE)

    def extract(self, source_file_path: str | Path, interface_name: str) -> ExtractedInterface:
        """Parse ``source_file_path`` and describe the interface ``interface_name``.

        Raises:
            ReadError: If the file cannot be read.
            SourceParseError: If the file is not valid Go.
            InterfaceNotFoundError: If no interface with that name is declared.
        """
        try:
            source = Path(source_file_path).read_bytes()
        except OSError as e:
            raise ReadError(str(source_file_path), cause=e)

        return self.extract_source(source, interface_name, str(source_file_path))

    def extract_source(
        self, source: bytes, interface_name: str, origin: str = '<source>'
    ) -> ExtractedInterface:
        """Same as :meth:`extract` for source already held in memory."""
        try:
            source.decode('utf-8')
        except UnicodeDecodeError as e:
            raise SourceParseError(origin, errors=[f'byte {e.start} (invalid UTF-8)'])

        tree = self._parser.parse(source)
        root = tree.root_node
        if root.has_error:
            raise SourceParseError(origin, errors=_error_locations(root))

        imports = parse_imports(root)
        interface = _find_interface(root, interface_name)
        if interface is None:
            raise InterfaceNotFoundError(interface_name, origin)

        renderer = TypeRenderer(imports)
        methods = [
            _describe_method(node, doc, trailing, renderer)
            for node, doc, trailing in _interface_members(interface)
        ]
        logger.debug(
            'Extracted %d methods and %d imports from %s',
            len(methods),
            len(imports),
            origin,
        )
        return ExtractedInterface(
            name=interface_name,
            imports=tuple(imports.values()),
            methods=tuple(methods),
        )


def extract_interface(source_file_path: str | Path, interface_name: str) -> ExtractedInterface:
    """Convenience wrapper around :class:`InterfaceExtractor`."""
    return InterfaceExtractor().extract(source_file_path, interface_name)


class TypeRenderer:
    """Renders tree-sitter Go type nodes back to source text.

    Package qualifiers are resolved through the file's import table; a
    qualifier with no matching import is reproduced as written.
    """

    def __init__(self, imports: dict[str, ImportDescriptor]):
        self._by_qualifier: dict[str, ImportDescriptor] = {}
        for info in imports.values():
            key = info.alias or info.package_name
            if key and key not in (DISCARD_ALIAS, '.'):
                self._by_qualifier.setdefault(key, info)

    def render(self, node: Node) -> str:
        kind = node.type
        if kind in ('type_identifier', 'identifier', 'package_identifier'):
            return _text(node)
        if kind == 'qualified_type':
            package = _text(node.child_by_field_name('package'))
            name = _text(node.child_by_field_name('name'))
            return f'{self.qualifier(package)}.{name}'
        if kind == 'pointer_type':
            return '*' + self.render(node.named_children[0])
        if kind == 'slice_type':
            return '[]' + self.render(node.child_by_field_name('element'))
        if kind == 'map_type':
            key = self.render(node.child_by_field_name('key'))
            value = self.render(node.child_by_field_name('value'))
            return f'map[{key}]{value}'
        if kind == 'type_elem' and len(node.named_children) == 1:
            return self.render(node.named_children[0])
        if kind == 'parenthesized_type':
            return f'({self.render(node.named_children[0])})'
        # arrays, generics, func and chan types are copied as written
        return _text(node)

    def qualifier(self, package: str) -> str:
        info = self._by_qualifier.get(package)
        if info is None:
            return package
        return info.alias or info.package_name


def parse_imports(root: Node) -> dict[str, ImportDescriptor]:
    """Build the import table of a parsed Go file, keyed by import path."""
    imports: dict[str, ImportDescriptor] = {}
    for declaration in root.children:
        if declaration.type != 'import_declaration':
            continue
        for spec in _descendants(declaration, 'import_spec'):
            path = _text(spec.child_by_field_name('path')).strip('"`')
            name_node = spec.child_by_field_name('name')
            if name_node is not None:
                alias = _text(name_node)
                package_name = '' if alias == DISCARD_ALIAS else alias
            else:
                alias = ''
                package_name = path.split('/')[-1]
            imports[path] = ImportDescriptor(
                path=path, package_name=package_name, alias=alias
            )
    return imports


def comment_text(comments: list[Node]) -> str:
    """Return the text of a comment group the way go/ast CommentGroup.Text does.

    Comment markers, the first space of a line comment and compiler
    directives are removed; leading and trailing blank lines are dropped and
    runs of blank lines are collapsed. Non-empty results end with a newline.
    """
    lines: list[str] = []
    for comment in comments:
        text = _text(comment)
        if text.startswith('//'):
            text = text[2:]
            if _DIRECTIVE.match(text):
                continue
            if text.startswith(' '):
                text = text[1:]
        elif text.startswith('/*'):
            text = text[2:-2]
        lines.extend(text.split('\n'))

    lines = [line.rstrip() for line in lines]
    collapsed: list[str] = []
    for line in lines:
        if line or (collapsed and collapsed[-1]):
            collapsed.append(line)
    while collapsed and not collapsed[-1]:
        collapsed.pop()
    if not collapsed:
        return ''
    return '\n'.join(collapsed) + '\n'


def _describe_method(
    node: Node, doc: list[Node], trailing: list[Node], renderer: TypeRenderer
) -> MethodDescriptor:
    name = _text(node.child_by_field_name('name'))

    typed_parameters: list[str] = []
    parameter_names: list[str] = []
    parameters: list[Parameter] = []
    for declaration in _declarations(node.child_by_field_name('parameters')):
        names, type_name = _declaration_parts(declaration, renderer)
        names = names or ['_']
        typed_parameters.append(f'{", ".join(names)} {type_name}')
        parameter_names.append(', '.join(names))
        parameters.extend(Parameter(name=n, type=type_name) for n in names)

    returns: list[str] = []
    result = node.child_by_field_name('result')
    if result is not None and result.type == 'parameter_list':
        for declaration in _declarations(result):
            names, type_name = _declaration_parts(declaration, renderer)
            if names:
                returns.append(f'{", ".join(names)} {type_name}')
            else:
                returns.append(type_name)
    elif result is not None:
        returns.append(renderer.render(result))

    doc_comment = comment_text(doc)
    if trailing:
        doc_comment += comment_text(trailing)

    return MethodDescriptor(
        name=name,
        doc_comment=doc_comment,
        typed_parameters=', '.join(typed_parameters),
        parameter_names=', '.join(parameter_names),
        returns=', '.join(returns),
        parameters=tuple(parameters),
    )


def _declaration_parts(declaration: Node, renderer: TypeRenderer) -> tuple[list[str], str]:
    names = [_text(n) for n in declaration.children_by_field_name('name')]
    type_name = renderer.render(declaration.child_by_field_name('type'))
    if declaration.type == 'variadic_parameter_declaration':
        type_name = '...' + type_name
    return names, type_name


def _declarations(parameter_list: Node | None) -> list[Node]:
    if parameter_list is None:
        return []
    return [
        child
        for child in parameter_list.named_children
        if child.type in ('parameter_declaration', 'variadic_parameter_declaration')
    ]


def _find_interface(root: Node, interface_name: str) -> Node | None:
    for declaration in root.children:
        if declaration.type != 'type_declaration':
            continue
        for spec in declaration.named_children:
            if spec.type != 'type_spec':
                continue
            if _text(spec.child_by_field_name('name')) != interface_name:
                continue
            type_node = spec.child_by_field_name('type')
            if type_node is not None and type_node.type == 'interface_type':
                return type_node
    return None


def _interface_members(interface: Node) -> list[tuple[Node, list[Node], list[Node]]]:
    """Pair every method of an interface with its doc and trailing comments.

    A doc comment is the run of comments ending on the line right above the
    method; a comment starting on the line a method ends on is that method's
    trailing comment.
    """
    children = list(interface.named_children)
    if len(children) == 1 and children[0].type == 'method_spec_list':
        children = list(children[0].named_children)

    members: list[tuple[Node, list[Node], list[Node]]] = []
    pending: list[Node] = []
    last_row = -1
    for child in children:
        if child.type == 'comment':
            if members and child.start_point[0] == last_row:
                members[-1][2].append(child)
                continue
            if pending and child.start_point[0] > pending[-1].end_point[0] + 1:
                pending = []
            pending.append(child)
            continue

        doc = []
        if pending and pending[-1].end_point[0] == child.start_point[0] - 1:
            doc = pending
        pending = []
        if child.type in _METHOD_NODES:
            members.append((child, doc, []))
            last_row = child.end_point[0]
        else:
            logger.debug('Skipping embedded interface element %s', _text(child))
            last_row = -1
    return members


def _descendants(node: Node, kind: str):
    for child in node.named_children:
        if child.type == kind:
            yield child
        else:
            yield from _descendants(child, kind)


def _error_locations(root: Node) -> list[str]:
    locations = []
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_error or node.is_missing:
            row, column = node.start_point[0] + 1, node.start_point[1] + 1
            locations.append(f'line {row}, column {column}')
            continue
        if node.has_error:
            stack.extend(reversed(node.children))
    return locations


def _text(node: Node | None) -> str:
    if node is None:
        return ''
    return node.text.decode('utf-8')
