import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from ogen_postgen import __version__
from ogen_postgen.config import get_config
from ogen_postgen.exceptions import PostgenError
from ogen_postgen.models import ErrorHandlerPolicy, MatchMode
from ogen_postgen.postgen import Postgen

EXIT_FAILURE = 2

console = Console(stderr=True)
logger = logging.getLogger('ogen_postgen')

app = typer.Typer(
    name='ogen-postgen',
    help='Split the Handler interface generated by ogen into grouped services',
    add_completion=False,
)


def configure_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logger.setLevel(level)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = RichHandler(console=console, show_path=False, show_time=False)
    handler.setFormatter(logging.Formatter('%(message)s'))
    logger.addHandler(handler)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f'ogen-postgen version: {__version__}')
        raise typer.Exit()


@app.command()
def generate(
    ogen: Annotated[
        str | None,
        typer.Option('--ogen', '-f', help='Ogen folder holding oas_server_gen.go [default: api]'),
    ] = None,
    separate: Annotated[
        str | None,
        typer.Option('--separate', '-s', help='Separate by tag/each/paths [default: paths]'),
    ] = None,
    package: Annotated[
        str | None,
        typer.Option('--package', '-p', help='Package name [default: api]'),
    ] = None,
    out: Annotated[
        str | None,
        typer.Option('--out', '-o', help='Out file path [default: <ogen>/oas_postgen_services_gen.go]'),
    ] = None,
    openapi: Annotated[
        str | None,
        typer.Option('--openapi', '-a', help='Openapi file path or URL'),
    ] = None,
    interface: Annotated[
        str | None,
        typer.Option('--interface', '-i', help='Interface to split [default: Handler]'),
    ] = None,
    match: Annotated[
        MatchMode | None,
        typer.Option('--match', '-m', help='How operation ids are matched in comments'),
    ] = None,
    error_handler: Annotated[
        ErrorHandlerPolicy | None,
        typer.Option('--error-handler', '-e', help='Where the NewError method goes'),
    ] = None,
    config: Annotated[
        str | None,
        typer.Option('--config', '-c', help='Path to configuration file (YAML)'),
    ] = None,
    verbose: Annotated[
        bool, typer.Option('--verbose', '-v', help='Print the generation info')
    ] = False,
    version: Annotated[
        bool,
        typer.Option('--version', callback=_version_callback, is_eager=True, help='Show the version'),
    ] = False,
) -> None:
    """Split the ogen Handler interface into grouped service interfaces.

    Examples:
        ogen-postgen -a openapi.yaml
        ogen-postgen -f internal/api -s tag -a openapi.yaml
        ogen-postgen -s each -o services.go
    """
    configure_logging(verbose)

    overrides = {
        'ogen_folder': ogen,
        'separate_by': separate,
        'package_name': package,
        'out_file': out,
        'openapi_file': openapi,
        'interface_name': interface,
        'match_mode': match,
        'error_handler': error_handler,
    }
    try:
        settings = get_config(config)
        settings = settings.model_copy(
            update={k: v for k, v in overrides.items() if v is not None}
        )
        if settings.verbose and not verbose:
            verbose = True
            configure_logging(verbose)
        logger.debug('OgenFolder: %s', settings.ogen_folder)

        postgen = Postgen(settings)
        info = postgen.build()
        if verbose:
            typer.echo(info.model_dump_json(indent=4))
        postgen.write(info)
    except PostgenError as e:
        if e.stage:
            logger.error('failed %s: %s', e.stage, e.message)
        else:
            logger.error('%s', e.message)
        raise typer.Exit(EXIT_FAILURE)


if __name__ == '__main__':
    app()
