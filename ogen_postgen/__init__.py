"""ogen-postgen - split ogen's Handler interface into grouped services.

ogen generates a single ``Handler`` interface with one method per OpenAPI
operation. ogen-postgen reads that interface from ``oas_server_gen.go``,
cross-references it with the OpenAPI document and writes smaller service
interfaces (one per method, per tag or per path) together with a
``PostgenHandler`` that forwards ``Handler`` calls to them.

Quick Start:
    >>> from ogen_postgen import Postgen, PostgenConfig
    >>>
    >>> config = PostgenConfig(
    ...     ogen_folder='internal/api',
    ...     separate_by='tags',
    ...     openapi_file='openapi.yaml',
    ... )
    >>> Postgen(config).generate()

CLI Usage:
    $ ogen-postgen -f internal/api -s tag -a openapi.yaml
    $ ogen-postgen -s each -v
"""

from importlib.metadata import PackageNotFoundError, version

from ogen_postgen.config import PostgenConfig, get_config
from ogen_postgen.exceptions import (
    ConfigurationError,
    InterfaceNotFoundError,
    InvalidSpecificationError,
    PostgenError,
    ReadError,
    SourceParseError,
    UnsupportedStrategyError,
    WriteError,
)
from ogen_postgen.extractor import InterfaceExtractor, extract_interface
from ogen_postgen.grouping import MethodPartitioner, assemble, partition
from ogen_postgen.models import (
    ErrorHandlerPolicy,
    GenerationInfo,
    MatchMode,
    MethodDescriptor,
    MethodGroup,
    Strategy,
)
from ogen_postgen.postgen import Postgen
from ogen_postgen.specification import SpecificationLoader, load_specification

__all__ = [
    # Pipeline
    'Postgen',
    'InterfaceExtractor',
    'SpecificationLoader',
    'MethodPartitioner',
    'extract_interface',
    'load_specification',
    'partition',
    'assemble',
    # Model
    'ErrorHandlerPolicy',
    'GenerationInfo',
    'MatchMode',
    'MethodDescriptor',
    'MethodGroup',
    'Strategy',
    # Configuration
    'PostgenConfig',
    'get_config',
    # Exceptions
    'PostgenError',
    'ReadError',
    'InvalidSpecificationError',
    'SourceParseError',
    'InterfaceNotFoundError',
    'UnsupportedStrategyError',
    'ConfigurationError',
    'WriteError',
]

try:
    __version__ = version('ogen-postgen')
except PackageNotFoundError:
    __version__ = 'unknown'
