"""
Builds table rows from recommendation documents (YAML or JSON).

A document is either a list of records or a mapping with an ``items`` list:

    items:
      - name: web
        namespace: shop
        kind: {group: autoscaling.k8s.io, version: v1, kind: VerticalPodAutoscaler}
        mode: Auto
        target: {name: web, kind: {group: apps, version: v1, kind: Deployment}}
        containers:
          - name: nginx
            requests: {cpu: 100m, memory: 128Mi}
            recommendations: {cpu: 25m, memory: 262144k}
"""

import logging
from collections.abc import Iterable
from decimal import Decimal
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError

from vpa_recommendation.exceptions import RecordError
from vpa_recommendation.table.model import (
    GroupVersionKind,
    ResourceQuantities,
    Row,
    Table,
)
from vpa_recommendation.table.quantity import EXACT, Quantity


class TargetRecord(BaseModel):
    name: str = ""
    kind: GroupVersionKind = GroupVersionKind()


class ContainerRecord(BaseModel):
    name: str
    mode: str | None = None
    requests: ResourceQuantities = ResourceQuantities()
    recommendations: ResourceQuantities = ResourceQuantities()
    cpu_difference: float | None = None
    memory_difference: float | None = None


class RecommendationRecord(BaseModel):
    name: str
    namespace: str = ""
    kind: GroupVersionKind = GroupVersionKind()
    mode: str = ""
    target: TargetRecord = TargetRecord()
    requests: ResourceQuantities | None = None
    recommendations: ResourceQuantities | None = None
    cpu_difference: float | None = None
    memory_difference: float | None = None
    containers: list[ContainerRecord] = []


class RecommendationList(BaseModel):
    items: list[RecommendationRecord]


def percentage_difference(
    request: Quantity | None, recommendation: Quantity | None
) -> float | None:
    """
    Signed difference of the recommendation relative to the request,
    unset when there is nothing to compare against.
    """
    if request is None or recommendation is None or request.is_zero():
        return None
    delta = EXACT.subtract(recommendation.value, request.value)
    return float(EXACT.divide(delta, request.value) * Decimal(100))


def sum_optional(quantities: Iterable[Quantity | None]) -> Quantity | None:
    total = None
    for q in quantities:
        if q is not None:
            total = q if total is None else total + q
    return total


def sum_resources(resources: list[ResourceQuantities]) -> ResourceQuantities:
    return ResourceQuantities(
        cpu=sum_optional(r.cpu for r in resources),
        memory=sum_optional(r.memory for r in resources),
    )


def _difference(
    record: BaseModel,
    field: str,
    request: Quantity | None,
    recommendation: Quantity | None,
) -> float | None:
    # an explicitly given difference wins, even when it is null
    if field in record.model_fields_set:
        return getattr(record, field)
    return percentage_difference(request, recommendation)


def build_child_row(parent: RecommendationRecord, container: ContainerRecord) -> Row:
    return Row(
        name=container.name,
        namespace=parent.namespace,
        mode=container.mode if container.mode is not None else parent.mode,
        requests=container.requests,
        recommendations=container.recommendations,
        cpu_difference=_difference(
            container,
            "cpu_difference",
            container.requests.cpu,
            container.recommendations.cpu,
        ),
        memory_difference=_difference(
            container,
            "memory_difference",
            container.requests.memory,
            container.recommendations.memory,
        ),
    )


def build_row(record: RecommendationRecord) -> Row:
    requests = record.requests
    if requests is None:
        requests = sum_resources([c.requests for c in record.containers])
    recommendations = record.recommendations
    if recommendations is None:
        recommendations = sum_resources([c.recommendations for c in record.containers])
    return Row(
        name=record.name,
        namespace=record.namespace,
        gvk=record.kind,
        mode=record.mode,
        target_name=record.target.name,
        target_gvk=record.target.kind,
        requests=requests,
        recommendations=recommendations,
        cpu_difference=_difference(
            record, "cpu_difference", requests.cpu, recommendations.cpu
        ),
        memory_difference=_difference(
            record, "memory_difference", requests.memory, recommendations.memory
        ),
        children=[build_child_row(record, c) for c in record.containers],
    )


def parse_rows(document: Any) -> Table:
    if document is None:
        return []
    if isinstance(document, list):
        document = {"items": document}
    if not isinstance(document, dict):
        raise RecordError(
            f"expected a list or a mapping with items, got {type(document).__name__}"
        )
    try:
        recommendations = RecommendationList.model_validate(document)
    except ValidationError as e:
        raise RecordError(e) from None
    return [build_row(record) for record in recommendations.items]


def load_rows(content: str) -> Table:
    """Parse a YAML or JSON document into table rows."""
    try:
        document = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise RecordError(e) from None
    rows = parse_rows(document)
    logging.info(f"loaded {len(rows)} recommendations")
    return rows
