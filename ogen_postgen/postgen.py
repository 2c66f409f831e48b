"""Pipeline orchestration for ogen-postgen.

This module provides the Postgen class that runs extraction, specification
loading, partitioning, assembly, rendering and writing in one linear pass.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from ogen_postgen.config import PostgenConfig
from ogen_postgen.emitter import GoServicesEmitter
from ogen_postgen.exceptions import ConfigurationError, PostgenError
from ogen_postgen.extractor import InterfaceExtractor
from ogen_postgen.file_writer import GoFileWriter
from ogen_postgen.grouping import MethodPartitioner, assemble, parse_strategy
from ogen_postgen.models import ExtractedInterface, GenerationInfo, SpecModel, Strategy
from ogen_postgen.specification import SpecificationLoader

logger = logging.getLogger(__name__)


@contextmanager
def stage(description: str) -> Iterator[None]:
    """Tag pipeline failures with the stage they happened in."""
    try:
        yield
    except PostgenError as e:
        if e.stage is None:
            e.stage = description
        raise


class Postgen:
    """Splits an ogen ``Handler`` interface into grouped service interfaces.

    The run is strictly sequential and every stage either succeeds or raises
    a :class:`~ogen_postgen.exceptions.PostgenError`; nothing is written
    unless all previous stages succeeded.

    Attributes:
        config: The settings of this run.
        strategy: The parsed grouping strategy.

    Example:
        >>> from ogen_postgen.config import PostgenConfig
        >>> postgen = Postgen(PostgenConfig(openapi_file='openapi.yaml'))
        >>> info = postgen.generate()
        # Writes api/oas_postgen_services_gen.go
    """

    def __init__(
        self,
        config: PostgenConfig,
        extractor: InterfaceExtractor | None = None,
        loader: SpecificationLoader | None = None,
        emitter: GoServicesEmitter | None = None,
        writer: GoFileWriter | None = None,
    ):
        """Initialize the pipeline.

        Raises:
            UnsupportedStrategyError: If ``config.separate_by`` is unknown.
        """
        if not config.ogen_folder:
            raise ConfigurationError('ogen folder must not be empty', field='ogen')
        self.config = config
        with stage('select separation strategy'):
            self.strategy = parse_strategy(config.separate_by)
        self._extractor = extractor or InterfaceExtractor()
        self._loader = loader or SpecificationLoader()
        self._emitter = emitter or GoServicesEmitter(config.interface_name)
        self._writer = writer or GoFileWriter()

    def extract(self) -> ExtractedInterface:
        with stage('parse ogen server file'):
            return self._extractor.extract(
                self.config.server_file, self.config.interface_name
            )

    def load_specification(self) -> SpecModel | None:
        """Load the OpenAPI document; ``each`` runs without one."""
        if not self.config.openapi_file:
            if self.strategy is Strategy.EACH:
                return None
            with stage('process openapi file'):
                raise ConfigurationError(
                    f"strategy '{self.strategy.value}' requires an OpenAPI document",
                    field='openapi',
                )
        with stage('process openapi file'):
            return self._loader.load(self.config.openapi_file)

    def build(self) -> GenerationInfo:
        """Run every stage up to (not including) rendering."""
        handler = self.extract()
        spec = self.load_specification()
        partitioner = MethodPartitioner(self.strategy, self.config.match_mode)
        with stage('partition methods'):
            result = partitioner.partition(handler.methods, spec)
        return assemble(handler.imports, result, self.config.error_handler)

    def render(self, info: GenerationInfo) -> str:
        return self._emitter.render(info, self.config.package_name)

    def write(self, info: GenerationInfo) -> str:
        output = self.config.output_path
        logger.info('write to %s', output)
        with stage('write output'):
            self._writer.write(self.render(info), output)
        return output

    def generate(self) -> GenerationInfo:
        info = self.build()
        self.write(info)
        return info
