from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from inventory.src.constants import MAX_RECLINEMENT_ANGLE
from inventory.src.enums import SeatType, SpaceType


class RequestInfo(BaseModel):
    method: str
    path: str
    app_id: int


class HealthStatus(BaseModel):
    status: str
    version: str


class ErrorResponse(BaseModel):
    detail: str


## Seat layout
class Position(BaseModel):
    x: int
    y: int


class FloorConfiguration(BaseModel):
    floor_number: int
    num_rows: int
    seats_left: int
    seats_right: int


class Space(BaseModel):
    """
    Desired state of one space in a seat configuration payload.

    `floor_number` and `position` identify the space. Seat only attributes
    are ignored for the other space types. An omitted `active` means the
    space is part of the layout.
    """

    space_type: SpaceType = SpaceType.SEAT
    seat_number: Optional[str] = Field(default=None, max_length=32)
    floor_number: Optional[int] = None
    seat_type: Optional[SeatType] = None
    amenities: Optional[List[int]] = None
    reclinement_angle: Optional[int] = Field(
        default=None, ge=0, le=MAX_RECLINEMENT_ANGLE
    )
    position: Optional[Position] = None
    active: bool = True


class SpaceSnapshot(BaseModel):
    """Detached copy of a persisted space, unaffected by later row updates."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    bus_diagram_model_id: int
    space_type: SpaceType
    seat_number: Optional[str]
    floor_number: int
    seat_type: Optional[SeatType]
    amenities: List[int]
    reclinement_angle: Optional[int]
    position_x: int
    position_y: int
    meta: Dict[str, Any]
    active: bool


class BusSeatModelSchema(BaseModel):
    id: int
    bus_diagram_model_id: int
    space_type: int
    seat_number: Optional[str]
    floor_number: int
    seat_type: Optional[int]
    amenities: List[int]
    reclinement_angle: Optional[int]
    position: Position
    meta: Dict[str, Any]
    active: bool
    updated_on: Optional[datetime]
    created_on: datetime


class BusDiagramModelSchema(BaseModel):
    id: int
    name: str
    description: Optional[str]
    max_capacity: int
    num_floors: int
    seats_per_floor: List[FloorConfiguration]
    total_seats: int
    is_factory_default: bool
    active: bool
    updated_on: Optional[datetime]
    created_on: datetime


class SeatConfigurationResult(BaseModel):
    seats_created: int
    seats_updated: int
    seats_deactivated: int
    total_active_seats: int


class RegenerationResult(BaseModel):
    bus_diagram_model: BusDiagramModelSchema
    seats_generated: int
