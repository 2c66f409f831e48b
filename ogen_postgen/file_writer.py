"""File writing utilities for generated Go code.

This module writes rendered Go source to the filesystem after checking that
it parses, so a broken template never leaves a broken file behind.
"""

import logging
from pathlib import Path

from tree_sitter import Parser
from upath import UPath

from ogen_postgen.exceptions import WriteError
from ogen_postgen.extractor import GO_LANGUAGE

logger = logging.getLogger(__name__)


class GoFileWriter:
    """Writes Go source files with syntax validation.

    Example:
        >>> writer = GoFileWriter()
        >>> writer.write('package api\\n', Path('api/oas_postgen_services_gen.go'))
    """

    def __init__(self, validate: bool = True):
        self.validate = validate
        self._parser = Parser(GO_LANGUAGE)

    def write(self, content: str, path: UPath | Path | str) -> None:
        """Write ``content`` to ``path``, creating parent directories.

        Raises:
            WriteError: If the content is not valid Go or cannot be written.
        """
        path = UPath(path)

        if self.validate:
            self._validate_go_syntax(content, str(path))

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open('w', encoding='utf-8') as f:
                f.write(content)
        except OSError as e:
            raise WriteError(str(path), cause=e)
        logger.info('Wrote %s', path)

    def _validate_go_syntax(self, content: str, path: str) -> None:
        tree = self._parser.parse(content.encode('utf-8'))
        if tree.root_node.has_error:
            raise WriteError(path, cause=SyntaxError('generated code is not valid Go'))


def write_output(content: str, path: UPath | Path | str) -> None:
    """Convenience wrapper around :class:`GoFileWriter`."""
    GoFileWriter().write(content, path)
