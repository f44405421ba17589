import os
import sys
from collections.abc import Callable
from typing import IO, Any

import click
from click.core import ParameterSource

from vpa_recommendation import config
from vpa_recommendation.config import DEFAULT_SORT_COLUMNS, Options
from vpa_recommendation.environment import VPA_RECOMMENDATION_CONFIG, init_env
from vpa_recommendation.exceptions import (
    ConfigError,
    ConfigNotFound,
    RecordError,
    SortOrderError,
)
from vpa_recommendation.loader import load_rows
from vpa_recommendation.table.sort import ColumnKey, SortOrder, sort_table
from vpa_recommendation.table.view import render


def config_file(function: Callable) -> Callable:
    help_msg = "Path to configuration file in toml format."
    function = click.option(
        "--config",
        "configfile",
        default=os.environ.get(VPA_RECOMMENDATION_CONFIG),
        help=help_msg,
    )(function)
    return function


def log_level(function: Callable) -> Callable:
    function = click.option(
        "--log-level",
        help="log-level of the command. Defaults to WARNING.",
        type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    )(function)
    return function


def _parse_sort_order(ctx: click.Context, param: click.Parameter, value: str) -> Any:
    try:
        return SortOrder.parse(value)
    except SortOrderError as e:
        raise click.BadParameter(str(e)) from None


def sort(function: Callable) -> Callable:
    columns = ", ".join(ColumnKey)
    function = click.option(
        "--sort-columns",
        "-s",
        help=f"comma-separated list of columns to sort by ({columns})",
        default=",".join(DEFAULT_SORT_COLUMNS),
    )(function)
    function = click.option(
        "--sort-order",
        "-o",
        help='sort order, either "asc" or "desc"',
        default=SortOrder.ASC.value,
        callback=_parse_sort_order,
    )(function)
    return function


def build_options(ctx: click.Context, params: dict[str, Any]) -> Options:
    """
    Merge the config file options with the command line. Flags given on the
    command line win over the config file.
    """
    overrides = {
        name: value
        for name, value in params.items()
        if ctx.get_parameter_source(name) != ParameterSource.DEFAULT
    }
    try:
        return config.read_options(overrides)
    except ConfigError as e:
        raise click.ClickException(str(e)) from None


@click.command()
@config_file
@log_level
@click.option("--show-namespace", is_flag=True, help="show the namespace column")
@click.option("--show-kind", is_flag=True, help="show the resource kind prefixes")
@click.option(
    "--wide", is_flag=True, help="show the request and recommendation columns"
)
@click.option("--no-headers", is_flag=True, help="do not print the table headers")
@click.option("--no-colors", is_flag=True, help="do not colorize the differences")
@click.option("--show-stats", is_flag=True, help="print statistics after the table")
@sort
@click.argument("recommendations", type=click.File("r"), default="-")
@click.pass_context
def main(
    ctx: click.Context,
    configfile: str | None,
    log_level: str | None,
    recommendations: IO[str],
    **params: Any,
) -> None:
    """Print the VPA recommendations read from a YAML or JSON document."""
    init_env(log_level=log_level)

    if configfile:
        try:
            config.init_from_toml(configfile)
        except (ConfigNotFound, ConfigError) as e:
            raise click.ClickException(str(e)) from None
    else:
        config.init({})
    options = build_options(ctx, params)

    try:
        table = load_rows(recommendations.read())
    except RecordError as e:
        raise click.ClickException(str(e)) from None
    if not table:
        click.echo("no recommendations found", err=True)
        sys.exit(1)

    sort_table(table, options.sort_order, *options.sort_columns)
    click.echo(render(table, options))
