"""Data model shared by the extraction, partitioning and emission stages.

All models are frozen pydantic models: they are built once by the stage
that owns them and only read afterwards. ``GenerationInfo`` doubles as the
serializable view printed by ``--verbose``.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

ERROR_HANDLER_METHOD = 'NewError'
UNMATCHED_GROUP_NAME = 'UnmatchedMethodsHandler'


class Strategy(str, Enum):
    """How interface methods are partitioned into groups."""

    EACH = 'each'
    TAGS = 'tags'
    PATHS = 'paths'


class MatchMode(str, Enum):
    """How an operation identifier is looked up in a method's doc comment.

    - ``word``: the identifier must appear as a whole token.
    - ``substring``: plain containment, ``list`` matches ``listItems``.
    - ``marker``: only ogen's ``implements <id> operation`` phrase counts.
    """

    WORD = 'word'
    SUBSTRING = 'substring'
    MARKER = 'marker'


class ErrorHandlerPolicy(str, Enum):
    """What happens to the ``NewError`` method in the generated output."""

    SEPARATE = 'separate'
    SPLICE = 'splice'
    DROP = 'drop'


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class ImportDescriptor(_Frozen):
    """One import of the parsed source file."""

    path: str
    package_name: str = ''
    alias: str = ''


class Parameter(_Frozen):
    """A single parameter or result; ``name`` is ``_`` when undeclared."""

    name: str
    type: str


class MethodDescriptor(_Frozen):
    """Textual description of one interface method.

    Attributes:
        name: Method identifier.
        doc_comment: Text of the comment block attached to the method. This is
            the only link between a method and an OpenAPI operation.
        typed_parameters: Parameters as ``name type, name type``.
        parameter_names: Parameter names only, for call forwarding.
        returns: Results rendered like parameters; named results are kept.
        parameters: One entry per declared parameter name.
    """

    name: str
    doc_comment: str = ''
    typed_parameters: str = ''
    parameter_names: str = ''
    returns: str = ''
    parameters: tuple[Parameter, ...] = ()

    @property
    def is_error_handler(self) -> bool:
        return self.name == ERROR_HANDLER_METHOD


class ExtractedInterface(_Frozen):
    name: str
    imports: tuple[ImportDescriptor, ...] = ()
    methods: tuple[MethodDescriptor, ...] = ()


class Operation(_Frozen):
    """An OpenAPI operation as seen by the partitioner."""

    identifier: str
    tags: tuple[str, ...] = ()
    method: str = ''
    path: str = ''


class PathItem(_Frozen):
    path: str
    operations: tuple[Operation, ...] = ()


class SpecModel(_Frozen):
    """Read-only view of an OpenAPI document: its paths and declared tags."""

    path_items: tuple[PathItem, ...] = ()
    declared_tags: frozenset[str] = frozenset()
    title: str = ''
    version: str = ''

    def iter_operations(self):
        """Yield every operation of every path item, in document order."""
        for path_item in self.path_items:
            yield from path_item.operations


class MethodGroup(_Frozen):
    """A named interface holding a subset of the original methods."""

    name: str
    methods: tuple[MethodDescriptor, ...] = ()

    def method_names(self) -> list[str]:
        return [method.name for method in self.methods]


class PartitionResult(_Frozen):
    groups: tuple[MethodGroup, ...] = ()
    matched_names: frozenset[str] = frozenset()
    error_handler: MethodDescriptor | None = None


class GenerationInfo(_Frozen):
    """Everything the emitter needs to render the output file."""

    imports: tuple[ImportDescriptor, ...] = ()
    groups: tuple[MethodGroup, ...] = ()
    error_handler: MethodDescriptor | None = None
    policy: ErrorHandlerPolicy = Field(default=ErrorHandlerPolicy.SEPARATE)

    def group(self, name: str) -> MethodGroup | None:
        """Return the group called ``name``, if any."""
        for group in self.groups:
            if group.name == name:
                return group
        return None
