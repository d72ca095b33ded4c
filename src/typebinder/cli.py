from pathlib import Path
from typing import Optional

import click

from typebinder.errors import TypeExportError
from typebinder.logger import configure_logging, logger
from typebinder.pipeline import export_file
from typebinder.settings import load_settings


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument(
    "input_file",
    type=click.Path(
        exists=True, file_okay=True, dir_okay=False, readable=True, path_type=Path
    ),
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Write one file per module here (default: print to stdout).",
)
@click.option(
    "--path-map",
    type=click.Path(exists=True, dir_okay=False, readable=True, path_type=Path),
    default=None,
    help="JSON file mapping module paths to output locations.",
)
@click.option(
    "--no-follow-modules",
    is_flag=True,
    default=False,
    help="Skip `mod name;` declarations instead of loading them from disk.",
)
@click.option(
    "--require-serialize",
    is_flag=True,
    default=False,
    help="Only export structs and enums deriving `Serialize`.",
)
@click.option(
    "--debug/--no-debug",
    default=False,
    help="Enable debug logging.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Emit log events as JSON lines on stderr.",
)
def main(
    input_file: Path,
    output_dir: Optional[Path],
    path_map: Optional[Path],
    no_follow_modules: bool,
    require_serialize: bool,
    debug: bool,
    log_json: bool,
) -> None:
    """
    Generate TypeScript declarations from the serde types of a Rust source file.
    """
    configure_logging(debug=debug, json_format=log_json)

    overrides = {
        "input_file": str(input_file),
        "require_serialize_derive": require_serialize,
        "follow_modules": not no_follow_modules,
    }
    if output_dir is not None:
        overrides["output_dir"] = str(output_dir)
    if path_map is not None:
        overrides["path_map_file"] = str(path_map)
    settings = load_settings(**overrides)

    try:
        results = export_file(settings)
    except TypeExportError as e:
        logger.error("Export failed", error=str(e))
        raise click.ClickException(str(e)) from e

    logger.debug("Export finished", modules=len(results))


if __name__ == "__main__":
    main()
