from pydantic import BaseModel, ConfigDict

from vpa_recommendation.table.quantity import Quantity


class GroupVersionKind(BaseModel):
    model_config = ConfigDict(frozen=True)

    group: str = ""
    version: str = ""
    kind: str = ""

    def group_kind(self) -> str:
        if not self.group:
            return self.kind
        return f"{self.kind}.{self.group}"


class ResourceQuantities(BaseModel):
    model_config = ConfigDict(frozen=True)

    cpu: Quantity | None = None
    memory: Quantity | None = None


class Row(BaseModel):
    """
    A single recommendation line of the table. Children are the per
    container lines printed beneath it.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    namespace: str = ""
    gvk: GroupVersionKind = GroupVersionKind()
    mode: str = ""
    target_name: str = ""
    target_gvk: GroupVersionKind = GroupVersionKind()
    requests: ResourceQuantities = ResourceQuantities()
    recommendations: ResourceQuantities = ResourceQuantities()
    cpu_difference: float | None = None
    memory_difference: float | None = None
    children: list["Row"] = []


Table = list[Row]
