"""
Reconciliation of a desired seat configuration against the stored spaces.

Spaces are matched by position (`floor:x:y`), never by seat number, since
seat numbers are the data being edited. Inactive rows take part in
the matching, so a position that was deactivated earlier is reactivated in
place instead of getting a second row. Renumbering happens in two phases
so the per diagram seat number uniqueness holds after every statement:

1. every active SEAT row is moved to a temporary number derived from its
   own id (`#TMP-<id>`), which no real seat number can equal;
2. final values are written, new spaces inserted and spaces missing from
   the payload deactivated.

Update decisions compare the payload with a snapshot taken before phase 1,
so a space whose final state equals its stored state is not counted as
updated even though its number was moved and moved back.
"""

from typing import Dict, Iterable, List, Set, Tuple
from sqlalchemy.orm.session import Session

from inventory.src import gateway, layout, schemas
from inventory.src.constants import DEFAULT_RECLINEMENT_ANGLE, TEMPORARY_SEAT_NUMBER_PREFIX
from inventory.src.db import BusDiagramModel, BusSeatModel


def positionKey(floorNumber: int, position: Dict[str, int]) -> str:
    return f"{floorNumber}:{position['x']}:{position['y']}"


def storedPositionKey(space: BusSeatModel | schemas.SpaceSnapshot) -> str:
    return positionKey(
        space.floor_number, {"x": space.position_x, "y": space.position_y}
    )


def incomingPositionKey(space: schemas.Space) -> str:
    return positionKey(space.floor_number, space.position.model_dump())


def temporarySeatNumber(spaceId: int) -> str:
    return f"{TEMPORARY_SEAT_NUMBER_PREFIX}{spaceId}"


def needsSpaceUpdate(
    incoming: schemas.Space, existing: schemas.SpaceSnapshot
) -> bool:
    """
    Whether the stored space differs from its desired state.

    A type change always counts. Seat attributes are compared only when both
    sides are seats, and optional seat attributes only when the payload
    carries them.
    """
    if incoming.space_type != existing.space_type:
        return True

    if layout.isSeat(incoming.space_type):
        if incoming.seat_number != existing.seat_number:
            return True
        if incoming.seat_type is not None and incoming.seat_type != existing.seat_type:
            return True
        if incoming.amenities is not None and incoming.amenities != existing.amenities:
            return True
        if (
            incoming.reclinement_angle is not None
            and incoming.reclinement_angle != existing.reclinement_angle
        ):
            return True

    return incoming.active != existing.active


def makeSpaceUpdateData(
    incoming: schemas.Space,
    existing: schemas.SpaceSnapshot,
    diagramModel: BusDiagramModel,
) -> dict:
    """
    Build the column values that move `existing` to the desired state.

    Attributes are chosen by the incoming space type: seat attributes are
    cleared when a space stops being a seat and defaulted when it becomes
    one. Seat meta (`isWindow`, `isLegroom`) follows the type change.
    """
    values = {"space_type": incoming.space_type, "active": incoming.active}

    if incoming.space_type != existing.space_type:
        if layout.isSeat(incoming.space_type):
            floorConfig = layout.floorConfiguration(
                diagramModel.seats_per_floor, incoming.floor_number
            )
            values["meta"] = {
                **existing.meta,
                **layout.seatMetaProperties(incoming.position.model_dump(), floorConfig),
            }
        else:
            values["meta"] = {
                key: value
                for key, value in existing.meta.items()
                if key not in layout.SEAT_META_KEYS
            }

    if layout.isSeat(incoming.space_type):
        wasSeat = layout.isSeat(existing.space_type)
        values["seat_number"] = incoming.seat_number
        if incoming.seat_type is not None:
            values["seat_type"] = incoming.seat_type
        elif not wasSeat:
            values["seat_type"] = layout.DEFAULT_SEAT_TYPE
        if incoming.reclinement_angle is not None:
            values["reclinement_angle"] = incoming.reclinement_angle
        elif not wasSeat:
            values["reclinement_angle"] = DEFAULT_RECLINEMENT_ANGLE
        if incoming.amenities is not None:
            values["amenities"] = incoming.amenities
    else:
        values["seat_number"] = None
        values["seat_type"] = None
        values["reclinement_angle"] = None
        values["amenities"] = []

    return values


def makeNewSpacePayload(
    incoming: schemas.Space, diagramModel: BusDiagramModel
) -> dict:
    """Insert payload for a position that has no stored space yet."""
    floorConfig = layout.floorConfiguration(
        diagramModel.seats_per_floor, incoming.floor_number
    )
    payload = layout.makeSpacePayload(
        diagramModel.id,
        incoming.seat_number,
        incoming.floor_number,
        incoming.position.model_dump(),
        floorConfig,
        incoming.space_type,
    )
    if layout.isSeat(incoming.space_type):
        if incoming.seat_type is not None:
            payload["seat_type"] = incoming.seat_type
        if incoming.amenities is not None:
            payload["amenities"] = incoming.amenities
        if incoming.reclinement_angle is not None:
            payload["reclinement_angle"] = incoming.reclinement_angle
    payload["active"] = incoming.active
    return payload


def indexSpaces(spaces: Iterable[BusSeatModel]) -> Dict[str, BusSeatModel]:
    """
    Index stored spaces by position, active and inactive alike.

    When a position holds several rows the active one wins, then the oldest.
    """
    indexed: Dict[str, BusSeatModel] = {}
    for space in spaces:
        key = storedPositionKey(space)
        current = indexed.get(key)
        if current is None or (space.active and not current.active):
            indexed[key] = space
    return indexed


def snapshotSpaces(spaces: Dict[str, BusSeatModel]) -> Dict[str, schemas.SpaceSnapshot]:
    return {
        key: schemas.SpaceSnapshot.model_validate(space)
        for key, space in spaces.items()
    }


def temporizeSeats(session: Session, spaces: Iterable[BusSeatModel]) -> int:
    """Move every active SEAT to its temporary number. Returns the number moved."""
    count = 0
    for space in spaces:
        if space.active and layout.isSeat(space.space_type):
            gateway.updateSpace(
                session, space.id, {"seat_number": temporarySeatNumber(space.id)}
            )
            count += 1
    return count


def applySpaces(
    session: Session,
    incomingSpaces: List[schemas.Space],
    snapshots: Dict[str, schemas.SpaceSnapshot],
    refreshed: Dict[str, BusSeatModel],
    diagramModel: BusDiagramModel,
) -> Tuple[int, int]:
    """
    Write the final state of every incoming space.

    Matched spaces, including inactive ones, are updated when they differ
    from their snapshot, otherwise an active seat only gets its original
    number back. Unmatched
    positions are inserted in one batch after all updates.

    Returns:
        Tuple[int, int]: Spaces created and spaces updated.
    """
    newPayloads = []
    updated = 0

    for incoming in incomingSpaces:
        key = incomingPositionKey(incoming)
        stored = refreshed.get(key)
        if stored is None:
            newPayloads.append(makeNewSpacePayload(incoming, diagramModel))
            continue

        snapshot = snapshots[key]
        if needsSpaceUpdate(incoming, snapshot):
            gateway.updateSpace(
                session,
                stored.id,
                makeSpaceUpdateData(incoming, snapshot, diagramModel),
            )
            updated += 1
        elif snapshot.active and layout.isSeat(snapshot.space_type):
            gateway.updateSpace(
                session, stored.id, {"seat_number": snapshot.seat_number}
            )

    if newPayloads:
        gateway.insertSpaces(session, newPayloads)
    return len(newPayloads), updated


def deactivateSpaces(
    session: Session,
    snapshots: Dict[str, schemas.SpaceSnapshot],
    incomingKeys: Set[str],
) -> int:
    """
    Deactivate the originally active spaces missing from the payload.

    The original seat number is written back in the same statement, which
    keeps historical seat numbers resolvable on the deactivated row.
    """
    deactivated = 0
    for key, snapshot in snapshots.items():
        if key in incomingKeys or not snapshot.active:
            continue
        values = {"active": False}
        if layout.isSeat(snapshot.space_type):
            values["seat_number"] = snapshot.seat_number
        gateway.updateSpace(session, snapshot.id, values)
        deactivated += 1
    return deactivated
