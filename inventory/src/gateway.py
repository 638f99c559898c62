"""
Transactional storage operations of the seat layout engine.

Every write to `bus_seat_model` and to the seat bookkeeping of
`bus_diagram_model` goes through this module. Functions operate on a
caller supplied SQLAlchemy session and never commit on their own; the
commit or rollback is owned by `transaction()`.
"""

from contextlib import contextmanager
from typing import Iterator, List
from sqlalchemy import delete, func, update
from sqlalchemy.orm.session import Session

from inventory.src import exceptions
from inventory.src.db import BusDiagramModel, BusSeatModel
from inventory.src.enums import SpaceType


@contextmanager
def transaction(session: Session) -> Iterator[Session]:
    """
    Run the enclosed block as one atomic unit.

    Commits when the block completes, rolls back and re-raises on any error,
    so a failed block leaves no partial state behind.
    """
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise


def findDiagramModel(session: Session, diagramModelId: int) -> BusDiagramModel:
    """
    Raises:
        exceptions.NotFoundError: If the diagram model does not exist.
    """
    diagramModel = (
        session.query(BusDiagramModel)
        .filter(BusDiagramModel.id == diagramModelId)
        .first()
    )
    if diagramModel is None:
        raise exceptions.NotFoundError(BusDiagramModel, diagramModelId)
    return diagramModel


def findSpaces(
    session: Session, diagramModelId: int, active: bool | None = None
) -> List[BusSeatModel]:
    """
    Load the spaces of a diagram model straight from storage.

    Rows already present in the session are overwritten with the stored
    values, so the result reflects earlier updates of this transaction.
    """
    query = (
        session.query(BusSeatModel)
        .filter(BusSeatModel.bus_diagram_model_id == diagramModelId)
        .execution_options(populate_existing=True)
    )
    if active is not None:
        query = query.filter(BusSeatModel.active == active)
    return query.order_by(BusSeatModel.id.asc()).all()


def insertSpaces(session: Session, payloads: List[dict]) -> List[BusSeatModel]:
    """Insert all payloads in a single flush and return the new rows."""
    spaces = [BusSeatModel(**payload) for payload in payloads]
    session.add_all(spaces)
    session.flush()
    return spaces


def updateSpace(session: Session, spaceId: int, values: dict) -> None:
    """Update one space by identity, immediately, as its own statement."""
    session.execute(
        update(BusSeatModel).where(BusSeatModel.id == spaceId).values(**values)
    )


def deleteSpaces(session: Session, diagramModelId: int) -> int:
    """Hard delete every space of a diagram model, returning the row count."""
    result = session.execute(
        delete(BusSeatModel).where(BusSeatModel.bus_diagram_model_id == diagramModelId)
    )
    return result.rowcount


def countActiveSeats(session: Session, diagramModelId: int) -> int:
    return (
        session.query(func.count(BusSeatModel.id))
        .filter(
            BusSeatModel.bus_diagram_model_id == diagramModelId,
            BusSeatModel.active.is_(True),
            BusSeatModel.space_type == SpaceType.SEAT,
        )
        .scalar()
    )


def updateDiagramModel(
    session: Session, diagramModel: BusDiagramModel, values: dict
) -> BusDiagramModel:
    for key, value in values.items():
        setattr(diagramModel, key, value)
    session.flush()
    return diagramModel
