"""
Validation and permission checks for the Fleet Inventory API.

This module centralizes guard logic such as:
- Token validation
- Role-based permission checks
- Seat configuration payload validation
- Zone row validation

All functions raise appropriate exceptions from `inventory.src.exceptions`
when validation fails, ensuring consistent error handling.
"""

import re
from datetime import datetime, timezone
from typing import List
from sqlalchemy.orm.session import Session
from sqlalchemy import Column

from inventory.src.db import ExecutiveRole, ExecutiveToken
from inventory.src.constants import REGEX_SEAT_NUMBER
from inventory.src import exceptions, getters, schemas
from inventory.src.layout import floorConfiguration, isSeat, rightmostColumn


# ---------------------------------------------------------------------------
# Token validation
# ---------------------------------------------------------------------------
def executiveToken(access_token: str, session: Session) -> ExecutiveToken:
    """
    Validate an executive access token.

    Args:
        access_token (str): The bearer token string provided by the client.
        session (Session): Active SQLAlchemy session for DB lookup.

    Returns:
        ExecutiveToken: The valid token object from the database.

    Raises:
        exceptions.InvalidToken: If the token is not found or has expired.
    """
    current_time = datetime.now(timezone.utc)

    token = (
        session.query(ExecutiveToken)
        .filter(
            ExecutiveToken.access_token == access_token,
            ExecutiveToken.expires_at > current_time,
        )
        .first()
    )

    if token is None:
        raise exceptions.InvalidToken()

    return token


# ---------------------------------------------------------------------------
# Permission checks
# ---------------------------------------------------------------------------
def executivePermission(role: ExecutiveRole, permission: Column) -> bool:
    """
    Validate that an executive role has the required permission.

    Args:
        role (ExecutiveRole): Role of the executive, None when no role is mapped.
        permission (Column): Column of the permission flag (e.g. `ExecutiveRole.update_diagram_model`).

    Raises:
        exceptions.NoPermission: If the role does not have the required permission.
    """
    if role and getattr(role, permission.name, False):
        return True
    raise exceptions.NoPermission()


# ---------------------------------------------------------------------------
# Seat configuration
# ---------------------------------------------------------------------------
def seatPositionLimits(spaces: List[schemas.Space], diagramModel) -> None:
    """
    Check every space against the floor template of the diagram model.

    The floor must exist, `y` must be a row of that floor and `x` any column
    from 0 to `seats_left + seats_right`. The aisle column is a legal position
    so that hallways, stairs and fold-out seats can be placed on it.
    """
    for space in spaces:
        floorNumber = space.floor_number
        if floorNumber < 1 or floorNumber > diagramModel.num_floors:
            raise exceptions.ValidationError(
                f"Invalid floor number {floorNumber}. Must be between 1 and {diagramModel.num_floors}"
            )

        floorConfig = floorConfiguration(diagramModel.seats_per_floor, floorNumber)
        numRows = floorConfig["num_rows"]
        if space.position.y < 1 or space.position.y > numRows:
            raise exceptions.ValidationError(
                f"Invalid row number {space.position.y} for floor {floorNumber}. Must be between 1 and {numRows}"
            )

        maxColumn = rightmostColumn(floorConfig)
        if space.position.x < 0 or space.position.x > maxColumn:
            raise exceptions.ValidationError(
                f"Invalid column number {space.position.x} for floor {floorNumber}. Must be between 0 and {maxColumn}"
            )


def seatConfigurationPayload(spaces: List[schemas.Space], diagramModel=None) -> None:
    """
    Validate a seat configuration payload before anything is written.

    Raises:
        exceptions.ValidationError: When a space misses its floor or position,
            a SEAT misses its seat number or seat type, a seat number is
            malformed, two spaces share a position or two seats share a
            number, or (given `diagramModel`) a space lies outside the
            floor template.
    """
    positionKeys = set()
    seatNumbers = set()

    for space in spaces:
        if space.floor_number is None or space.position is None:
            raise exceptions.ValidationError(
                "Missing required fields: floor_number and position are required for space identification"
            )

        if isSeat(space.space_type):
            if not space.seat_number:
                raise exceptions.ValidationError(
                    "Seat number is required for SEAT space types"
                )
            if space.seat_type is None:
                raise exceptions.ValidationError(
                    "Seat type is required for SEAT space types"
                )
            if re.match(REGEX_SEAT_NUMBER, space.seat_number) is None:
                raise exceptions.ValidationError(
                    f"Invalid seat number {space.seat_number!r}"
                )

        key = (space.floor_number, space.position.x, space.position.y)
        if key in positionKeys:
            raise exceptions.ValidationError("Duplicate positions found in payload")
        positionKeys.add(key)

        if isSeat(space.space_type):
            if space.seat_number in seatNumbers:
                raise exceptions.ValidationError(
                    "Duplicate seat numbers found in payload"
                )
            seatNumbers.add(space.seat_number)

    if diagramModel is not None:
        seatPositionLimits(spaces, diagramModel)


def spaceAmenities(spaces: List[schemas.Space], session: Session) -> None:
    """Every amenity referenced by a SEAT must exist."""
    referenced = set()
    for space in spaces:
        if isSeat(space.space_type) and space.amenities:
            referenced.update(space.amenities)

    unknown = referenced - getters.existingAmenityIDs(referenced, session)
    if unknown:
        raise exceptions.ValidationError(f"Unknown amenities {sorted(unknown)}")


# ---------------------------------------------------------------------------
# Zones
# ---------------------------------------------------------------------------
def zoneRows(
    rowNumbers: List[int],
    diagramModel,
    session: Session,
    zoneId: int | None = None,
) -> None:
    """
    Validate the rows of a zone.

    Rows must be unique, lie within the longest floor of the template and
    not belong to another zone of the same diagram model. `zoneId` excludes
    the zone being edited from the overlap check.

    Raises:
        exceptions.ValidationError: Empty, duplicated or out of range rows.
        exceptions.OverlappingZone: Rows already taken by another zone.
    """
    if not rowNumbers:
        raise exceptions.ValidationError("A zone needs at least one row")
    if len(set(rowNumbers)) != len(rowNumbers):
        raise exceptions.ValidationError("Duplicate rows found in zone")

    maxRows = max(config["num_rows"] for config in diagramModel.seats_per_floor)
    outOfRange = [row for row in rowNumbers if row < 1 or row > maxRows]
    if outOfRange:
        raise exceptions.ValidationError(
            f"Rows {outOfRange} are outside the template rows 1 to {maxRows}"
        )

    takenRows = set()
    for zone in getters.zonesOfDiagramModel(diagramModel.id, session):
        if zone.id != zoneId:
            takenRows.update(zone.row_numbers)
    overlapping = sorted(takenRows.intersection(rowNumbers))
    if overlapping:
        raise exceptions.OverlappingZone(overlapping)
