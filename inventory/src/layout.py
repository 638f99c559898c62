"""
Seat layout generation for bus diagram models.

A diagram model describes each floor as rows of `seats_left` seats, an aisle
and `seats_right` seats. Positions are `x` = column (0 based, the aisle is
column `seats_left`) and `y` = row (1 based). Seats are numbered "1", "2", ...
floor by floor, row by row, left to right.

Everything here is pure: payloads are plain dicts keyed by the
`BusSeatModel` column names, ready for `gateway.insertSpaces`.
"""

from typing import Any, Dict, List, Tuple

from inventory.src import exceptions
from inventory.src.constants import (
    DEFAULT_IS_ACTIVE,
    DEFAULT_RECLINEMENT_ANGLE,
    INITIAL_SEAT_NUMBER,
    MAX_BUS_CAPACITY,
    MAX_FLOORS,
    MAX_ROWS_PER_FLOOR,
    MAX_SEATS_PER_SIDE,
)
from inventory.src.enums import SeatType, SpaceType

DEFAULT_SEAT_TYPE = SeatType.REGULAR
FLOOR_CONFIGURATION_KEYS = ("floor_number", "num_rows", "seats_left", "seats_right")
SEAT_META_KEYS = ("isWindow", "isLegroom")


def isSeat(spaceType: int) -> bool:
    return spaceType == SpaceType.SEAT


def floorConfiguration(seatsPerFloor: List[dict], floorNumber: int) -> dict:
    """Return the configuration of `floorNumber` or raise ValidationError."""
    for config in seatsPerFloor or []:
        if config.get("floor_number") == floorNumber:
            return config
    raise exceptions.ValidationError(
        f"Floor configuration not found for floor {floorNumber}"
    )


def rightmostColumn(floorConfig: dict) -> int:
    return floorConfig["seats_left"] + floorConfig["seats_right"]


def seatMetaProperties(position: Dict[str, int], floorConfig: dict) -> dict:
    """Window seats sit on the outermost columns, legroom seats on the first row."""
    return {
        "isWindow": position["x"] == 0 or position["x"] == rightmostColumn(floorConfig),
        "isLegroom": position["y"] == 1,
    }


def spaceMeta(spaceType: int, position: Dict[str, int], floorConfig: dict) -> dict:
    meta: Dict[str, Any] = {"rowIndex": position["y"] - 1, "colIndex": position["x"]}
    if isSeat(spaceType):
        meta.update(seatMetaProperties(position, floorConfig))
    return meta


def makeSpacePayload(
    diagramModelId: int,
    seatNumber: str | None,
    floorNumber: int,
    position: Dict[str, int],
    floorConfig: dict,
    spaceType: int = SpaceType.SEAT,
) -> dict:
    """
    Build the insert payload of a generated space.

    Seat only attributes get their defaults for SEAT spaces and are left
    empty for every other space type.
    """
    seat = isSeat(spaceType)
    return {
        "bus_diagram_model_id": diagramModelId,
        "space_type": spaceType,
        "seat_number": seatNumber if seat else None,
        "floor_number": floorNumber,
        "seat_type": DEFAULT_SEAT_TYPE if seat else None,
        "amenities": [],
        "reclinement_angle": DEFAULT_RECLINEMENT_ANGLE if seat else None,
        "position_x": position["x"],
        "position_y": position["y"],
        "meta": spaceMeta(spaceType, position, floorConfig),
        "active": DEFAULT_IS_ACTIVE,
    }


def _checkFloorValues(floorConfig: dict) -> None:
    for key in FLOOR_CONFIGURATION_KEYS:
        value = floorConfig.get(key)
        if isinstance(value, bool) or not isinstance(value, int):
            raise exceptions.ValidationError(
                f"Invalid seatsPerFloor configuration: {key} is missing"
            )
        if value < 1:
            raise exceptions.ValidationError(
                f"Invalid seatsPerFloor configuration: {key} must be positive"
            )


def generateFloorSpaces(
    diagramModelId: int, floorConfig: dict, seatNumberCounter: int
) -> Tuple[List[dict], int]:
    """
    Generate the seats of a single floor.

    Returns the payloads together with the next free seat number so that
    numbering continues across floors.
    """
    _checkFloorValues(floorConfig)
    spaces = []
    floorNumber = floorConfig["floor_number"]
    seatsLeft = floorConfig["seats_left"]

    for row in range(1, floorConfig["num_rows"] + 1):
        leftColumns = range(0, seatsLeft)
        # Column seatsLeft is the aisle
        rightColumns = range(seatsLeft + 1, rightmostColumn(floorConfig) + 1)
        for column in [*leftColumns, *rightColumns]:
            spaces.append(
                makeSpacePayload(
                    diagramModelId,
                    str(seatNumberCounter),
                    floorNumber,
                    {"x": column, "y": row},
                    floorConfig,
                )
            )
            seatNumberCounter += 1

    return spaces, seatNumberCounter


def generateAllSpaces(diagramModel) -> List[dict]:
    """
    Enumerate every space of a diagram model from its floor template.

    Args:
        diagramModel: Any object exposing `id`, `num_floors` and
            `seats_per_floor` (typically a `BusDiagramModel`).

    Returns:
        List[dict]: One SEAT payload per seat, in numbering order.

    Raises:
        exceptions.ValidationError: If `num_floors` or any floor
            configuration value is missing or non-positive.
    """
    numFloors = diagramModel.num_floors
    if isinstance(numFloors, bool) or not isinstance(numFloors, int) or numFloors < 1:
        raise exceptions.ValidationError("Invalid number of floors")

    spaces = []
    seatNumberCounter = INITIAL_SEAT_NUMBER
    for floorNumber in range(1, numFloors + 1):
        floorConfig = floorConfiguration(diagramModel.seats_per_floor, floorNumber)
        floorSpaces, seatNumberCounter = generateFloorSpaces(
            diagramModel.id, floorConfig, seatNumberCounter
        )
        spaces.extend(floorSpaces)

    if not spaces:
        raise exceptions.ValidationError("Invalid seatsPerFloor configuration")
    return spaces


def countTemplateSeats(seatsPerFloor: List[dict]) -> int:
    return sum(
        config["num_rows"] * (config["seats_left"] + config["seats_right"])
        for config in seatsPerFloor
    )


def validateDiagramTemplate(
    numFloors: int, seatsPerFloor: List[dict], maxCapacity: int
) -> None:
    """
    Validate a floor template before it is stored.

    Rules:
        - `numFloors` is between 1 and MAX_FLOORS.
        - Every floor from 1 to `numFloors` is configured exactly once,
          and no other floor is configured.
        - Row counts are within MAX_ROWS_PER_FLOOR, seats per side within
          MAX_SEATS_PER_SIDE, all of them positive.
        - The generated seat count does not exceed `maxCapacity`, which
          itself does not exceed MAX_BUS_CAPACITY.

    Raises:
        exceptions.ValidationError: On the first broken rule.
    """
    if numFloors < 1 or numFloors > MAX_FLOORS:
        raise exceptions.ValidationError(
            f"Number of floors must be between 1 and {MAX_FLOORS}"
        )
    if maxCapacity < 1 or maxCapacity > MAX_BUS_CAPACITY:
        raise exceptions.ValidationError(
            f"Maximum capacity must be between 1 and {MAX_BUS_CAPACITY}"
        )

    floorNumbers = [config.get("floor_number") for config in seatsPerFloor]
    if sorted(floorNumbers) != list(range(1, numFloors + 1)):
        raise exceptions.ValidationError(
            f"Exactly one configuration is required for each floor from 1 to {numFloors}"
        )

    for config in seatsPerFloor:
        _checkFloorValues(config)
        if config["num_rows"] > MAX_ROWS_PER_FLOOR:
            raise exceptions.ValidationError(
                f"Floor {config['floor_number']} exceeds {MAX_ROWS_PER_FLOOR} rows"
            )
        if max(config["seats_left"], config["seats_right"]) > MAX_SEATS_PER_SIDE:
            raise exceptions.ValidationError(
                f"Floor {config['floor_number']} exceeds {MAX_SEATS_PER_SIDE} seats per side"
            )

    totalSeats = countTemplateSeats(seatsPerFloor)
    if totalSeats > maxCapacity:
        raise exceptions.ValidationError(
            f"The template holds {totalSeats} seats, more than the maximum capacity of {maxCapacity}"
        )
