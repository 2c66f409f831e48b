"""Custom exceptions for ogen-postgen.

This module defines a hierarchy of exceptions used throughout the pipeline
so that every stage (extraction, specification loading, partitioning,
writing) can report failures the CLI turns into a single log line.
"""


class PostgenError(Exception):
    """Base exception for all ogen-postgen errors.

    All exceptions raised by ogen-postgen inherit from this class, making it
    easy to catch every pipeline failure with a single except clause.

    Example:
        try:
            info = run_pipeline(config)
        except PostgenError as e:
            print(f"ogen-postgen error: {e}")
    """

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        self.stage: str | None = None
        super().__init__(message, *args, **kwargs)


class ReadError(PostgenError):
    """Failed to read an input (source file or OpenAPI document).

    Attributes:
        source: The path or URL that could not be read.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, source: str, cause: Exception | None = None):
        self.source = source
        self.cause = cause
        message = f"Failed to read '{source}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)


class InvalidSpecificationError(PostgenError):
    """The OpenAPI document could not be parsed or failed validation.

    Attributes:
        source: The path or URL of the invalid document.
        errors: List of validation error messages.
    """

    def __init__(self, source: str, errors: list[str] | None = None):
        self.source = source
        self.errors = errors or []
        message = f"Invalid OpenAPI specification '{source}'"
        if errors:
            message += f': {"; ".join(errors)}'
        super().__init__(message)


class SourceParseError(PostgenError):
    """The Go source file contains syntax errors.

    Attributes:
        source: The path of the source file.
        errors: Locations of the syntax errors, e.g. ``line 12, column 4``.
    """

    def __init__(self, source: str, errors: list[str] | None = None):
        self.source = source
        self.errors = errors or []
        message = f"Failed to parse Go source '{source}'"
        if errors:
            message += f': syntax error at {", ".join(errors)}'
        super().__init__(message)


class InterfaceNotFoundError(PostgenError):
    """The requested interface is not declared in the source file.

    Attributes:
        interface_name: The name that was looked up.
        source: The path of the source file.
    """

    def __init__(self, interface_name: str, source: str | None = None):
        self.interface_name = interface_name
        self.source = source
        message = f'interface {interface_name} not found'
        if source:
            message += f" in '{source}'"
        super().__init__(message)


class UnsupportedStrategyError(PostgenError):
    """An unknown separation strategy was requested.

    Attributes:
        value: The rejected strategy value.
        supported: The values that would have been accepted.
    """

    def __init__(self, value: str, supported: list[str] | None = None):
        self.value = value
        self.supported = supported or []
        message = f"SeparateBy: '{value}' is not supported"
        if supported:
            message += f' (expected one of: {", ".join(supported)})'
        super().__init__(message)


class ConfigurationError(PostgenError):
    """Error in configuration.

    This exception is raised when the configuration is invalid, cannot be
    loaded, or is inconsistent with the requested strategy.

    Attributes:
        config_path: The path to the configuration file, if applicable.
        field: The specific configuration field that is invalid.
    """

    def __init__(
        self, message: str, config_path: str | None = None, field: str | None = None
    ):
        self.config_path = config_path
        self.field = field
        full_message = message
        if config_path:
            full_message = f"{message} in '{config_path}'"
        if field:
            full_message += f' (field: {field})'
        super().__init__(full_message)


class WriteError(PostgenError):
    """Error writing the generated Go file.

    Attributes:
        output_path: The path where output was being written.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, output_path: str, cause: Exception | None = None):
        self.output_path = output_path
        self.cause = cause
        message = f"Failed to write output to '{output_path}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)
