import json
import logging
from pathlib import Path

import click

from .errors import WebIdlToQuillError
from .pipeline import BindingGenerator, CodeGeneratorConfig, OutputMode
from .pipeline.ast_backends import QuillAstBackend

logger = logging.getLogger(__name__)


@click.command()
@click.option("--name", "-n", default=None, type=str, help="Module name (default: first file name up to its first dot)")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--output", "-o", default=None, type=click.Path(resolve_path=True), help="Output file (default: <name>.quill)")
@click.option("--force", "-f", is_flag=True, default=False, help="Overwrite the output file if it already exists")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, resolve_path=True))
def webidl_to_quill(name, config, output, force, verbose, paths):
    """Generate a Quill binding module from webidl2 JSON definition trees.

    All PATHS are merged into a single module.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    fragments = []
    for path in paths:
        with open(path) as f:
            fragments.append(json.load(f))

    if config is not None:
        with open(config) as f:
            config = json.load(f)
            config = CodeGeneratorConfig.from_dict(config)
    else:
        config = CodeGeneratorConfig()

    # CLI flag overrides the config file
    if force:
        config.output.mode = OutputMode.FORCE

    if name is None:
        name = Path(paths[0]).name.split(".")[0]

    if output is None:
        output = f"{name}.{QuillAstBackend.FILE_EXTENSION}"

    logger.debug(f"Generating module '{name}' from {len(paths)} file(s)")
    codegen = BindingGenerator(name, fragments, config)

    try:
        codegen.write(Path(output))
    except (FileExistsError, WebIdlToQuillError) as e:
        raise click.ClickException(str(e)) from e
