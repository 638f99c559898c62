from fastapi import Request
from sqlalchemy.orm.session import Session

from inventory.src import schemas
from inventory.src.db import (
    Amenity,
    BusDiagramModelZone,
    ExecutiveRole,
    ExecutiveRoleMap,
    ExecutiveToken,
)


def requestInfo(request: Request) -> schemas.RequestInfo:
    """
    Extract metadata about the incoming request.

    Args:
        request (Request): FastAPI request object.

    Returns:
        schemas.RequestInfo: Pydantic model containing:
            - method (str): HTTP method (GET, POST, etc.).
            - path (str): Path portion of the request URL.
            - app_id (int): Application ID from app state.
    """
    return schemas.RequestInfo(
        method=request.method,
        path=request.url.path,
        app_id=request.scope["app"].state.id,
    )


def executiveRole(token: ExecutiveToken, session: Session) -> ExecutiveRole | None:
    """Fetch the role associated with an executive token."""
    return (
        session.query(ExecutiveRole)
        .join(ExecutiveRoleMap, ExecutiveRole.id == ExecutiveRoleMap.role_id)
        .filter(ExecutiveRoleMap.executive_id == token.executive_id)
        .first()
    )


def zonesOfDiagramModel(
    diagramModelId: int, session: Session
) -> list[BusDiagramModelZone]:
    return (
        session.query(BusDiagramModelZone)
        .filter(BusDiagramModelZone.bus_diagram_model_id == diagramModelId)
        .order_by(BusDiagramModelZone.id.asc())
        .all()
    )


def existingAmenityIDs(amenityIDs: set[int], session: Session) -> set[int]:
    """Return the subset of `amenityIDs` present in the amenity table."""
    if not amenityIDs:
        return set()
    rows = session.query(Amenity.id).filter(Amenity.id.in_(amenityIDs)).all()
    return {row.id for row in rows}
