# ABOUTME: Flattens the nested world status page into one row per world
# ABOUTME: Each row carries its data center and region so clients can filter without walking the tree

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel

from flarestone.engine import UNSET
from flarestone.models.worldstatus import PhysicalDataCenter


class FlattenedRegion(BaseModel):
    id: int | None = None
    name: str | None = None


class FlattenedWorldStatus(BaseModel):
    name: str | None = None
    data_center: str | None = None
    region: FlattenedRegion
    status: str | None = None
    category: str | None = None
    creation_open: bool | None = None


def _present(value: Any) -> Any:
    return None if value is UNSET else value


def flatten_world_status(regions: Iterable[PhysicalDataCenter]) -> list[FlattenedWorldStatus]:
    flattened: list[FlattenedWorldStatus] = []

    for region in regions:
        region_info = FlattenedRegion(id=_present(region.id), name=_present(region.name))
        for data_center in region.data_centers:
            for world in data_center.worlds:
                flattened.append(
                    FlattenedWorldStatus(
                        name=_present(world.name),
                        data_center=_present(data_center.name),
                        region=region_info,
                        status=_present(world.status),
                        category=_present(world.category),
                        creation_open=world.creation_open,
                    )
                )

    return flattened
