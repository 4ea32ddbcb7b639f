import json

import click

from .cli_utils import configure_logging
from .pipeline import ArmImportError, ArmTemplateImporter, ImporterConfig, OutputMode, SchemaFetcher


@click.command()
@click.option("--include", "-i", multiple=True, help="Only import definitions whose fqn matches this pattern")
@click.option("--exclude", "-x", multiple=True, help="Do not import definitions whose fqn matches this pattern; references to them become Any")
@click.option(
    "--schema-url",
    envvar="SCHEMA_DEFINITION_URL",
    default=None,
    type=str,
    help="Schema URL or file to import instead of the published schema for API_VERSION",
)
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--resolved-dump", default=None, type=click.Path(), help="Where to write the bundled schema (default: resolved.json)")
@click.option("--force", "-f", is_flag=True, default=False, help="Overwrite the output file if it exists")
@click.option("--verbose", "-v", is_flag=True, default=False)
@click.argument("api_version", type=str)
@click.argument("output", type=click.Path(resolve_path=True))
def arm_template_to_code(include, exclude, schema_url, config, resolved_dump, force, verbose, api_version, output):
    configure_logging(verbose)

    if config is not None:
        with open(config) as f:
            config = ImporterConfig.from_dict(json.load(f))
    else:
        config = ImporterConfig()

    # CLI values override the config file
    config.api_version = api_version
    if include:
        config.include = list(include)
    if exclude:
        config.exclude = list(exclude)
    if schema_url:
        config.schema_url = schema_url
    if resolved_dump is not None:
        config.resolved_dump_path = resolved_dump
    if force:
        config.output.mode = OutputMode.FORCE

    try:
        with SchemaFetcher(timeout=config.timeout) as fetcher:
            ArmTemplateImporter(config, fetcher).write(output)
    except (ArmImportError, OSError) as e:
        raise click.ClickException(str(e)) from e
