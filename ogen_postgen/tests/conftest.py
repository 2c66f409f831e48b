"""Shared pytest fixtures."""

from pathlib import Path

import pytest
import yaml

from ogen_postgen.tests.fixtures import PETSTORE_SERVER_GO, PETSTORE_SPEC


@pytest.fixture
def ogen_dir(tmp_path) -> Path:
    """Folder holding an ogen-generated oas_server_gen.go."""
    folder = tmp_path / 'api'
    folder.mkdir()
    (folder / 'oas_server_gen.go').write_text(PETSTORE_SERVER_GO)
    return folder


@pytest.fixture
def spec_file(tmp_path) -> Path:
    """The petstore OpenAPI document written as YAML."""
    path = tmp_path / 'openapi.yaml'
    path.write_text(yaml.safe_dump(PETSTORE_SPEC, sort_keys=False))
    return path
