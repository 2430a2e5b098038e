"""Command-line interface for versionist."""

import json
from functools import wraps
from typing import Any, Callable, Optional

import click

from .catalog import CatalogLoader
from .config import get_settings
from .exceptions import VersionistError
from .formats import default_formats
from .logging import get_logger, setup_logging
from .serialization import dump, to_yaml
from .value import Value

FORMAT_OPTION_HELP = "Format name (defaults to the standard format)"


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Report versionist errors as CLI errors instead of tracebacks."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except VersionistError as e:
            get_logger(__name__).debug("Command failed", error=e)
            raise click.ClickException(str(e)) from e

    return wrapper


def _parse(ctx: click.Context, text: str, format_name: Optional[str]) -> Value:
    name = format_name or ctx.obj["settings"].standard_format
    return default_formats.get(name).parse(text)


@click.group()
@click.option(
    "--catalog",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="Catalog YAML with schemas, formats and conversions",
)
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
)
@click.pass_context
def main(ctx: click.Context, catalog: Optional[str], log_level: Optional[str]) -> None:
    """versionist - parse, bump, compare and convert version numbers."""
    ctx.ensure_object(dict)
    settings = get_settings()
    ctx.obj["settings"] = settings

    setup_logging(
        log_level=log_level or settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
    )

    catalog_path = catalog or settings.catalog_path
    if not catalog_path:
        raise click.UsageError("No catalog given (use --catalog or VERSIONIST_CATALOG_PATH)")

    try:
        ctx.obj["catalog"] = CatalogLoader(catalog_path).load(replace=True)
    except (VersionistError, FileNotFoundError) as e:
        raise click.ClickException(f"Failed to load catalog: {e}") from e

    get_logger(__name__).debug("CLI initialized", catalog_path=str(catalog_path))


@main.command()
@click.pass_context
def formats(ctx: click.Context) -> None:
    """List the formats defined by the catalog."""
    for name, fmt in ctx.obj["catalog"].formats.items():
        field_names = ", ".join(f.name for f in fmt.schema.fields)
        click.echo(f"{name} (schema: {fmt.schema.name}; fields: {field_names})")


@main.command()
@click.argument("text")
@click.option("--format", "-f", "format_name", help=FORMAT_OPTION_HELP)
@click.option("--json", "as_json", is_flag=True, help="Print fields as JSON")
@click.pass_context
@handle_errors
def parse(ctx: click.Context, text: str, format_name: Optional[str], as_json: bool) -> None:
    """Parse TEXT and print its fields."""
    value = _parse(ctx, text, format_name)
    if as_json:
        click.echo(json.dumps(dict(zip(value.field_names(), value.values_array()))))
        return
    for field_, field_value in value.fields():
        click.echo(f"{field_.name}: {field_value}")


@main.command()
@click.argument("text")
@click.argument("field")
@click.option("--format", "-f", "format_name", help=FORMAT_OPTION_HELP)
@click.pass_context
@handle_errors
def bump(ctx: click.Context, text: str, field: str, format_name: Optional[str]) -> None:
    """Bump FIELD (name, alias or index) of TEXT."""
    value = _parse(ctx, text, format_name)
    click.echo(value.bump(int(field) if field.isdigit() else field).unparse())


@main.command()
@click.argument("text")
@click.argument("field")
@click.option("--format", "-f", "format_name", help=FORMAT_OPTION_HELP)
@click.pass_context
@handle_errors
def reset(ctx: click.Context, text: str, field: str, format_name: Optional[str]) -> None:
    """Reset FIELD (name, alias or index) of TEXT to its default."""
    value = _parse(ctx, text, format_name)
    click.echo(value.reset(int(field) if field.isdigit() else field).unparse())


@main.command()
@click.argument("left")
@click.argument("right")
@click.option("--format", "-f", "format_name", help=FORMAT_OPTION_HELP)
@click.option("--right-format", help="Format of RIGHT (defaults to --format)")
@click.pass_context
@handle_errors
def compare(
    ctx: click.Context,
    left: str,
    right: str,
    format_name: Optional[str],
    right_format: Optional[str],
) -> None:
    """Compare LEFT with RIGHT, printing <, = or >."""
    left_value = _parse(ctx, left, format_name)
    right_value = _parse(ctx, right, right_format or format_name)
    result = left_value.compare(right_value)
    if result is None:
        click.echo("incomparable")
        ctx.exit(2)
    click.echo("<" if result < 0 else ">" if result > 0 else "=")


@main.command()
@click.argument("text")
@click.option("--to", "to_format", required=True, help="Target format name")
@click.option("--format", "-f", "format_name", help=FORMAT_OPTION_HELP)
@click.pass_context
@handle_errors
def convert(ctx: click.Context, text: str, to_format: str, format_name: Optional[str]) -> None:
    """Convert TEXT to another format."""
    value = _parse(ctx, text, format_name)
    click.echo(value.convert(to_format).unparse())


@main.command("dump")
@click.argument("text")
@click.option("--format", "-f", "format_name", help=FORMAT_OPTION_HELP)
@click.option("--yaml", "as_yaml", is_flag=True, help="Emit YAML instead of JSON")
@click.pass_context
@handle_errors
def dump_command(ctx: click.Context, text: str, format_name: Optional[str], as_yaml: bool) -> None:
    """Print the serialized form of TEXT."""
    value = _parse(ctx, text, format_name)
    if as_yaml:
        click.echo(to_yaml(value), nl=False)
    else:
        click.echo(json.dumps(dump(value)))


if __name__ == "__main__":
    main()
