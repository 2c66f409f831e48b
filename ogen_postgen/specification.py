"""Loading of OpenAPI documents into a partition-friendly view.

This module reads an OpenAPI document from a local file or an http(s) URL,
hands the decoded content to ``openapi-pydantic`` for structural validation
and exposes only what method partitioning needs: the path items with their
operations (identifier and tags) and the set of declared tag names.
"""

import logging
from pathlib import Path
from typing import Any

import httpx
import yaml
from openapi_pydantic import parse_obj
from pydantic import ValidationError

from ogen_postgen.exceptions import InvalidSpecificationError, ReadError
from ogen_postgen.models import Operation, PathItem, SpecModel
from ogen_postgen.utils import is_url

logger = logging.getLogger(__name__)

# order of ogen's (and libopenapi's) operation iteration within a path item
HTTP_METHODS = ('get', 'put', 'post', 'delete', 'options', 'head', 'patch', 'trace')


class SpecificationLoader:
    """Loads OpenAPI documents from URLs or file paths.

    The loader is a thin adapter: parsing and validation are delegated to
    ``openapi-pydantic`` and any error it reports aborts the whole load.
    """

    def __init__(self, http_client: httpx.Client | None = None):
        """Initialize the loader.

        Args:
            http_client: Optional HTTP client to use for URL requests.
                        If not provided, ``httpx.get`` is used.
        """
        self._http_client = http_client

    def load(self, source: str) -> SpecModel:
        """Load and validate an OpenAPI document.

        Args:
            source: URL or file path of the document (JSON or YAML).

        Returns:
            The path items and declared tags of the document.

        Raises:
            ReadError: If the document cannot be read.
            InvalidSpecificationError: If it is not a valid OpenAPI 3.x document.
        """
        if is_url(source):
            raw = self._read_url(source)
        else:
            raw = self._read_file(source)

        content = self._decode(raw, source)
        return self.build_model(content, source)

    def build_model(self, content: Any, source: str = '<memory>') -> SpecModel:
        """Validate already decoded content and build the :class:`SpecModel`."""
        if not isinstance(content, dict):
            raise InvalidSpecificationError(
                source, errors=['document root must be a mapping']
            )
        try:
            document = parse_obj(content)
        except ValidationError as e:
            errors = [
                f'{".".join(str(part) for part in error["loc"])}: {error["msg"]}'
                for error in e.errors()
            ]
            raise InvalidSpecificationError(source, errors=errors)
        except ValueError as e:
            raise InvalidSpecificationError(source, errors=[str(e)])

        path_items = []
        for path, path_item in (document.paths or {}).items():
            operations = []
            for method in HTTP_METHODS:
                operation = getattr(path_item, method, None)
                if operation is None:
                    continue
                identifier = operation.operationId or f'{method.upper()} {path}'
                operations.append(
                    Operation(
                        identifier=identifier,
                        tags=tuple(operation.tags or ()),
                        method=method,
                        path=path,
                    )
                )
            path_items.append(PathItem(path=path, operations=tuple(operations)))

        declared_tags = frozenset(tag.name for tag in document.tags or ())
        logger.debug(
            'Loaded %s: %d paths, %d declared tags',
            source,
            len(path_items),
            len(declared_tags),
        )
        return SpecModel(
            path_items=tuple(path_items),
            declared_tags=declared_tags,
            title=document.info.title,
            version=document.info.version,
        )

    def _read_url(self, url: str) -> bytes:
        try:
            if self._http_client:
                response = self._http_client.get(url)
            else:
                response = httpx.get(url, follow_redirects=True, timeout=30.0)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise ReadError(url, cause=e)
        return response.content

    def _read_file(self, file_path: str) -> bytes:
        try:
            return Path(file_path).read_bytes()
        except OSError as e:
            raise ReadError(file_path, cause=e)

    def _decode(self, raw: bytes, source: str) -> Any:
        # YAML is a superset of JSON, one decoder covers both formats
        try:
            return yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise InvalidSpecificationError(source, errors=[str(e)])


def load_specification(source: str) -> SpecModel:
    """Convenience wrapper around :class:`SpecificationLoader`."""
    return SpecificationLoader().load(source)
