"""
Seat configuration service of bus diagram models.

Owns the diagram model aggregate: creating a model together with its
generated layout, regenerating a layout from the template (a reset that
drops per seat customization), and applying an edited layout
incrementally while keeping customization. Each operation runs in a
single transaction and recomputes `total_seats` from storage before
committing.
"""

from logging import getLogger
from typing import List
from sqlalchemy.orm.session import Session

from inventory.src import gateway, layout, reconciler, schemas, validators
from inventory.src.db import BusDiagramModel

logger = getLogger("uvicorn.error")


def _refreshTotalSeats(session: Session, diagramModel: BusDiagramModel) -> int:
    totalSeats = gateway.countActiveSeats(session, diagramModel.id)
    gateway.updateDiagramModel(session, diagramModel, {"total_seats": totalSeats})
    return totalSeats


def createSpacesFromDiagramModel(diagramModelId: int, session: Session) -> int:
    """
    Generate and insert the full layout of a diagram model.

    Runs inside the caller's transaction and does not commit.

    Returns:
        int: Number of spaces created.
    """
    diagramModel = gateway.findDiagramModel(session, diagramModelId)
    spaces = gateway.insertSpaces(session, layout.generateAllSpaces(diagramModel))
    return len(spaces)


def createDiagramModelWithSpaces(session: Session, values: dict) -> BusDiagramModel:
    """
    Create a diagram model and seed it with its generated layout.

    Args:
        values (dict): Column values of the new `BusDiagramModel`. The
            template (`num_floors`, `seats_per_floor`, `max_capacity`) is
            validated before anything is written.
    """
    layout.validateDiagramTemplate(
        values["num_floors"], values["seats_per_floor"], values["max_capacity"]
    )
    with gateway.transaction(session):
        diagramModel = BusDiagramModel(**values)
        session.add(diagramModel)
        session.flush()
        created = createSpacesFromDiagramModel(diagramModel.id, session)
        _refreshTotalSeats(session, diagramModel)

    logger.info(
        f"Created bus diagram model {diagramModel.id} with {created} spaces"
    )
    return diagramModel


def regenerateSpaces(
    diagramModelId: int, session: Session, updateData: dict | None = None
) -> dict:
    """
    Reset the layout of a diagram model to its template.

    Optionally updates the diagram model first, then hard deletes every
    space and regenerates the layout from the (possibly updated) template.
    Per seat customization such as amenities or reclinement is not kept.

    Returns:
        dict: `bus_diagram_model` and `seats_generated`.

    Raises:
        exceptions.NotFoundError: If the diagram model does not exist.
        exceptions.ValidationError: If the resulting template is invalid.
    """
    with gateway.transaction(session):
        diagramModel = gateway.findDiagramModel(session, diagramModelId)
        if updateData:
            gateway.updateDiagramModel(session, diagramModel, updateData)
        layout.validateDiagramTemplate(
            diagramModel.num_floors,
            diagramModel.seats_per_floor,
            diagramModel.max_capacity,
        )

        removed = gateway.deleteSpaces(session, diagramModelId)
        spaces = gateway.insertSpaces(
            session, layout.generateAllSpaces(diagramModel)
        )
        _refreshTotalSeats(session, diagramModel)

    logger.info(
        f"Regenerated bus diagram model {diagramModelId}: "
        f"{removed} spaces removed, {len(spaces)} generated"
    )
    return {"bus_diagram_model": diagramModel, "seats_generated": len(spaces)}


def batchUpdateSeatConfiguration(
    diagramModelId: int, incomingSpaces: List[schemas.Space], session: Session
) -> dict:
    """
    Converge the stored layout of a diagram model to `incomingSpaces`.

    Spaces are matched by position against every stored row, so a
    deactivated position is reactivated in place. Unmatched incoming spaces are created,
    matched ones updated when they differ, and active spaces missing from
    the payload are deactivated, never deleted. The payload is validated
    before the first write and any failure rolls the whole operation back.

    Returns:
        dict: `seats_created`, `seats_updated`, `seats_deactivated` and
        `total_active_seats`.

    Raises:
        exceptions.NotFoundError: If the diagram model does not exist.
        exceptions.ValidationError: If the payload is invalid.
    """
    with gateway.transaction(session):
        diagramModel = gateway.findDiagramModel(session, diagramModelId)
        validators.seatConfigurationPayload(incomingSpaces, diagramModel)
        validators.spaceAmenities(incomingSpaces, session)

        existing = reconciler.indexSpaces(gateway.findSpaces(session, diagramModelId))
        snapshots = reconciler.snapshotSpaces(existing)
        incomingKeys = {
            reconciler.incomingPositionKey(space) for space in incomingSpaces
        }

        reconciler.temporizeSeats(session, existing.values())
        refreshed = reconciler.indexSpaces(
            gateway.findSpaces(session, diagramModelId)
        )

        created, updated = reconciler.applySpaces(
            session, incomingSpaces, snapshots, refreshed, diagramModel
        )
        deactivated = reconciler.deactivateSpaces(session, snapshots, incomingKeys)
        totalSeats = _refreshTotalSeats(session, diagramModel)

    logger.info(
        f"Seat configuration of bus diagram model {diagramModelId}: "
        f"{created} created, {updated} updated, {deactivated} deactivated, "
        f"{totalSeats} active seats"
    )
    return {
        "seats_created": created,
        "seats_updated": updated,
        "seats_deactivated": deactivated,
        "total_active_seats": totalSeats,
    }
