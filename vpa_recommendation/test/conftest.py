from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from vpa_recommendation.table.model import ResourceQuantities, Row
from vpa_recommendation.table.quantity import Quantity


@pytest.fixture
def fx() -> Callable:
    def _fx(name: str) -> str:
        return (Path(__file__).parent / "fixtures" / name).read_text()

    return _fx


@pytest.fixture
def fx_path() -> Callable:
    def _fx_path(name: str) -> str:
        return str(Path(__file__).parent / "fixtures" / name)

    return _fx_path


def q(value: str | None) -> Quantity | None:
    return Quantity.parse(value) if value is not None else None


def build_row(
    name: str,
    namespace: str = "default",
    target_name: str | None = None,
    cpu_request: str | None = None,
    memory_request: str | None = None,
    cpu_recommendation: str | None = None,
    memory_recommendation: str | None = None,
    **kwargs: Any,
) -> Row:
    return Row(
        name=name,
        namespace=namespace,
        mode=kwargs.pop("mode", "Auto"),
        target_name=target_name if target_name is not None else name,
        requests=ResourceQuantities(cpu=q(cpu_request), memory=q(memory_request)),
        recommendations=ResourceQuantities(
            cpu=q(cpu_recommendation), memory=q(memory_recommendation)
        ),
        **kwargs,
    )
