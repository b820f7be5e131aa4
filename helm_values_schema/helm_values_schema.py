import json
import logging

import click

from .exceptions import HelmValuesSchemaError
from .pipeline import POSSIBLE_SKIP_FIELDS, GeneratorConfig, SchemaGenerator

logger = logging.getLogger(__name__)

LOG_LEVELS = ["debug", "info", "warning", "error"]


def split_skip_fields(values) -> list[str]:
    """Flatten repeated and comma separated --skip-auto-generation values."""
    names = []
    for value in values:
        names.extend(name.strip() for name in value.split(",") if name.strip())
    return names


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--keep-full-comment", is_flag=True, default=False, help="Keep every paragraph of key comments")
@click.option(
    "--helm-docs-compatibility-mode",
    is_flag=True,
    default=False,
    help="Also read helm-docs `# --` comments",
)
@click.option(
    "--dont-strip-helm-docs-prefix",
    is_flag=True,
    default=False,
    help="Keep helm-docs @tags and `--` prefixes in descriptions",
)
@click.option("--dont-add-global", is_flag=True, default=False, help="Do not add the global property")
@click.option("--resolve-urls", is_flag=True, default=False, help="Download $refs pointing to http(s) URLs")
@click.option("--no-required", is_flag=True, default=False, help="Do not emit required lists")
@click.option(
    "--skip-auto-generation",
    "-k",
    multiple=True,
    help=f"Fields not to generate automatically, one of: {', '.join(POSSIBLE_SKIP_FIELDS)}",
)
@click.option("--log-level", "-l", default="warning", type=click.Choice(LOG_LEVELS))
@click.argument("values", type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.argument("output", default=None, required=False, type=click.Path(dir_okay=False, resolve_path=True))
def helm_values_schema(
    config,
    keep_full_comment,
    helm_docs_compatibility_mode,
    dont_strip_helm_docs_prefix,
    dont_add_global,
    resolve_urls,
    no_required,
    skip_auto_generation,
    log_level,
    values,
    output,
):
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    if config is not None:
        with open(config) as f:
            config = GeneratorConfig.from_dict(json.load(f))
    else:
        config = GeneratorConfig()

    # CLI flags override the config file if set
    for name, flag in (
        ("keep_full_comment", keep_full_comment),
        ("helm_docs_compatibility_mode", helm_docs_compatibility_mode),
        ("dont_strip_helm_docs_prefix", dont_strip_helm_docs_prefix),
        ("dont_add_global", dont_add_global),
        ("resolve_urls", resolve_urls),
        ("no_required", no_required),
    ):
        if flag:
            setattr(config, name, True)
    if skip_auto_generation:
        config.skip_auto_generation = split_skip_fields(skip_auto_generation)

    try:
        out = SchemaGenerator(config).generate_json(values)
    except HelmValuesSchemaError as e:
        logger.error(str(e))
        raise click.ClickException(str(e)) from e

    if output is None:
        click.echo(out, nl=False)
        return

    with open(output, "w", encoding="utf-8") as f:
        f.write(out)
    logger.info(f"Wrote schema to {output}")
