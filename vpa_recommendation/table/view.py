import os
from collections.abc import Iterable, Sequence
from enum import StrEnum

from rich.color import ColorSystem
from rich.console import Console
from rich.style import Style
import tabulate

from vpa_recommendation.config import Options
from vpa_recommendation.table.model import Row
from vpa_recommendation.table.quantity import Quantity
from vpa_recommendation.table.stats import UNSET_CELL, stats_rows

TREE_ELEM_PREFIX = "├─ "
TREE_LAST_ELEM_PREFIX = "└─ "

HDR_NAMESPACE = "Namespace"
HDR_NAME = "Name"
HDR_MODE = "Mode"
HDR_TARGET = "Target"
HDR_CPU_REQUEST = "CPU Request"
HDR_CPU_TARGET = "CPU Target"
HDR_CPU_DIFFERENCE = "% CPU Diff"
HDR_MEM_REQUEST = "Memory Request"
HDR_MEM_TARGET = "Memory Target"
HDR_MEM_DIFFERENCE = "% Memory Diff"

STATS_HEADERS = ["Description", "Total", "Mean", "Median"]

# kubectl like output: no borders, no header rule, three spaces between columns
KUBECTL_TABLE_FORMAT = tabulate.TableFormat(
    lineabove=None,
    linebelowheader=None,
    linebetweenrows=None,
    linebelow=None,
    headerrow=tabulate.DataRow("", "   ", ""),
    datarow=tabulate.DataRow("", "   ", ""),
    padding=0,
    with_header_hide=None,
)

# tabulate widens header cells by two spaces by default, columns must be exactly
# as wide as their widest cell with or without headers
tabulate.MIN_PADDING = 0

COLOR_SYSTEMS = {
    "standard": ColorSystem.STANDARD,
    "256": ColorSystem.EIGHT_BIT,
    "truecolor": ColorSystem.TRUECOLOR,
    "windows": ColorSystem.WINDOWS,
}


class Tint(StrEnum):
    GOOD = "#A8CC8C"
    WARNING = "#DBAB79"
    ALERT = "#E88388"


def delta_tint(value: float) -> Tint:
    if -10 <= value <= 20:
        return Tint.GOOD
    if 20 < value < 50 or -50 < value < -10:
        return Tint.WARNING
    return Tint.ALERT


def env_no_color() -> bool:
    if os.environ.get("NO_COLOR", ""):
        return True
    force = os.environ.get("CLICOLOR_FORCE", "")
    return os.environ.get("CLICOLOR") == "0" and force in {"", "0"}


def detect_color_system(no_colors: bool = False) -> ColorSystem | None:
    """Colors supported by the terminal, None when colors are off."""
    if no_colors or env_no_color():
        return None
    name = Console().color_system
    if name is None:
        return None
    return COLOR_SYSTEMS.get(name)


def format_quantity(q: Quantity | None) -> str:
    if q is None or q.is_zero():
        return UNSET_CELL
    return str(q)


def format_percentage(value: float | None, color_system: ColorSystem | None) -> str:
    if value is None:
        return UNSET_CELL
    text = f"{value:+.2f}"
    style = Style(color=delta_tint(value).value, bold=True)
    return style.render(text, color_system=color_system)


def faint(text: str, color_system: ColorSystem | None) -> str:
    return Style(dim=True).render(text, color_system=color_system)


def table_headers(options: Options) -> list[str]:
    headers = []
    if options.show_namespace:
        headers.append(HDR_NAMESPACE)
    headers += [HDR_NAME, HDR_MODE, HDR_TARGET]
    if options.wide:
        headers += [HDR_CPU_REQUEST, HDR_CPU_TARGET]
    headers.append(HDR_CPU_DIFFERENCE)
    if options.wide:
        headers += [HDR_MEM_REQUEST, HDR_MEM_TARGET]
    headers.append(HDR_MEM_DIFFERENCE)
    return headers


def row_cells(
    row: Row,
    options: Options,
    color_system: ColorSystem | None,
    tree_prefix: str | None = None,
) -> list[str]:
    """Table cells of a row, a tree prefix marks the row as a child."""
    name = row.name
    target_name = row.target_name
    if tree_prefix is not None:
        name = tree_prefix + name
    elif options.show_kind:
        name = f"{faint(row.gvk.group_kind().lower(), color_system)}/{name}"
        target_name = (
            f"{faint(row.target_gvk.group_kind().lower(), color_system)}/{target_name}"
        )

    cells = []
    if options.show_namespace:
        cells.append(row.namespace)
    cells += [name, row.mode, target_name]
    if options.wide:
        cells += [
            format_quantity(row.requests.cpu),
            format_quantity(row.recommendations.cpu),
        ]
    cells.append(format_percentage(row.cpu_difference, color_system))
    if options.wide:
        cells += [
            format_quantity(row.requests.memory),
            format_quantity(row.recommendations.memory),
        ]
    cells.append(format_percentage(row.memory_difference, color_system))
    return cells


def table_data(
    table: Iterable[Row],
    options: Options,
    color_system: ColorSystem | None,
) -> list[list[str]]:
    data = []
    for row in table:
        data.append(row_cells(row, options, color_system))
        for i, child in enumerate(row.children):
            prefix = (
                TREE_LAST_ELEM_PREFIX
                if i == len(row.children) - 1
                else TREE_ELEM_PREFIX
            )
            data.append(row_cells(child, options, color_system, tree_prefix=prefix))
    return data


def format_table(data: Sequence[Sequence[str]], headers: Sequence[str] = ()) -> str:
    return tabulate.tabulate(
        data,
        headers=[h.upper() for h in headers],
        tablefmt=KUBECTL_TABLE_FORMAT,
        stralign="left",
        disable_numparse=True,
    )


def render_table(
    table: Iterable[Row],
    options: Options,
    color_system: ColorSystem | None = None,
) -> str:
    headers = [] if options.no_headers else table_headers(options)
    return format_table(table_data(table, options, color_system), headers)


def render_stats(table: Sequence[Row]) -> str:
    return format_table(stats_rows(table), STATS_HEADERS)


def render(table: Sequence[Row], options: Options) -> str:
    color_system = detect_color_system(options.no_colors)
    output = render_table(table, options, color_system)
    if options.show_stats:
        output += "\n\n" + render_stats(table)
    return output
