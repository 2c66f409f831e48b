import os
import tomllib
from pathlib import Path

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from ogen_postgen.exceptions import ConfigurationError
from ogen_postgen.models import ErrorHandlerPolicy, MatchMode

DEFAULT_FILENAMES = ['ogen-postgen.yaml', 'ogen-postgen.yml']
PYPROJECT_SECTION = 'ogen-postgen'

SERVER_FILE = 'oas_server_gen.go'
OUTPUT_FILE = 'oas_postgen_services_gen.go'


class PostgenConfig(BaseSettings):
    """Settings for one ogen-postgen run.

    Values come from a config file (or ``[tool.ogen-postgen]`` in
    ``pyproject.toml``); ``OGEN_POSTGEN_*`` environment variables fill in
    what the file leaves unset, and command-line flags override both.
    """

    model_config = SettingsConfigDict(env_prefix='OGEN_POSTGEN_', extra='forbid')

    ogen_folder: str = Field('api', description='Folder holding the ogen output.')

    separate_by: str = Field(
        'paths', description='Grouping strategy: each, tag(s) or paths.'
    )

    package_name: str = Field('api', description='Package of the generated file.')

    out_file: str = Field(
        '', description='Output file; defaults to <ogen_folder>/' + OUTPUT_FILE
    )

    openapi_file: str = Field('', description='Path or URL of the OpenAPI document.')

    interface_name: str = Field('Handler', description='Interface to split.')

    match_mode: MatchMode = Field(
        MatchMode.WORD, description='How operation ids are found in doc comments.'
    )

    error_handler: ErrorHandlerPolicy = Field(
        ErrorHandlerPolicy.SEPARATE, description='Where NewError ends up.'
    )

    verbose: bool = Field(False, description='Print the generation info.')

    @property
    def server_file(self) -> Path:
        return Path(self.ogen_folder) / SERVER_FILE

    @property
    def output_path(self) -> str:
        return self.out_file or str(Path(self.ogen_folder) / OUTPUT_FILE)


def load_yaml(path: str | Path) -> dict:
    return yaml.safe_load(Path(path).read_text()) or {}


def _read(path: str | Path) -> dict:
    try:
        return load_yaml(path)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f'cannot read config: {e}', config_path=str(path))


def _validate(data: dict, source: str) -> PostgenConfig:
    if not isinstance(data, dict):
        raise ConfigurationError('configuration must be a mapping', config_path=source)
    try:
        return PostgenConfig(**data)
    except ValidationError as e:
        fields = ', '.join('.'.join(str(p) for p in err['loc']) for err in e.errors())
        raise ConfigurationError('invalid configuration', config_path=source, field=fields)


def get_config(path: str | None = None) -> PostgenConfig:
    """Load configuration from a file or return the default config.

    Without an explicit ``path`` the current directory is searched for
    ``ogen-postgen.yaml``, ``ogen-postgen.yml`` and finally a
    ``[tool.ogen-postgen]`` table in ``pyproject.toml``.

    Raises:
        ConfigurationError: If the file cannot be read or holds invalid values.
    """
    if path:
        return _validate(_read(path), path)

    cwd = os.getcwd()

    for filename in DEFAULT_FILENAMES:
        candidate = Path(cwd) / filename
        if candidate.exists():
            return _validate(_read(candidate), str(candidate))

    candidate = Path(cwd) / 'pyproject.toml'

    if candidate.exists():
        try:
            pyproject = tomllib.loads(candidate.read_text())
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f'cannot read config: {e}', config_path=str(candidate))
        tools = pyproject.get('tool', {})

        if PYPROJECT_SECTION in tools:
            return _validate(tools[PYPROJECT_SECTION], str(candidate))

    return PostgenConfig()
