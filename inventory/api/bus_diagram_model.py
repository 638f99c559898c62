from datetime import datetime
from enum import IntEnum
from typing import List
from fastapi import APIRouter, Depends, Query, Response, status, Form, Body
from sqlalchemy.orm.session import Session
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, Field

from inventory.api.bearer import bearer_executive
from inventory.src.constants import MAX_BUS_CAPACITY, MAX_FLOORS
from inventory.src.db import BusDiagramModel, ExecutiveRole, sessionMaker
from inventory.src import exceptions, layout, seat_configuration, validators, getters
from inventory.src.enums import OrderIn
from inventory.src.loggers import logEvent
from inventory.src.redis import diagramModelLock
from inventory.src.schemas import BusDiagramModelSchema, FloorConfiguration
from inventory.src.functions import enumStr, fuseExceptionResponses, updateIfChanged
from inventory.src.urls import URL_BUS_DIAGRAM_MODEL

route_executive = APIRouter()
route_public = APIRouter()


## Input Forms
class CreateForm(BaseModel):
    name: str = Field(Body(max_length=64))
    description: str | None = Field(Body(max_length=1024, default=None))
    max_capacity: int = Field(Body(ge=1, le=MAX_BUS_CAPACITY))
    num_floors: int = Field(Body(ge=1, le=MAX_FLOORS))
    seats_per_floor: List[FloorConfiguration] = Field(Body())
    is_factory_default: bool = Field(Body(default=True))


class UpdateForm(BaseModel):
    id: int = Field(Body())
    name: str | None = Field(Body(max_length=64, default=None))
    description: str | None = Field(Body(max_length=1024, default=None))
    max_capacity: int | None = Field(Body(ge=1, le=MAX_BUS_CAPACITY, default=None))
    num_floors: int | None = Field(Body(ge=1, le=MAX_FLOORS, default=None))
    seats_per_floor: List[FloorConfiguration] | None = Field(Body(default=None))
    is_factory_default: bool | None = Field(Body(default=None))
    active: bool | None = Field(Body(default=None))
    regenerate_seats: bool = Field(
        Body(
            default=False,
            description="Required for floor or row changes, regenerates every seat from the template",
        )
    )


class DeleteForm(BaseModel):
    id: int = Field(Form())


## Query Parameters
class OrderBy(IntEnum):
    id = 1
    name = 2
    total_seats = 3
    updated_on = 4
    created_on = 5


class QueryParamsForPB(BaseModel):
    name: str | None = Field(Query(default=None))
    num_floors: int | None = Field(Query(default=None))
    # id based
    id: int | None = Field(Query(default=None))
    id_list: List[int] | None = Field(Query(default=None))
    # total_seats based
    total_seats_ge: int | None = Field(Query(default=None))
    total_seats_le: int | None = Field(Query(default=None))
    # Ordering
    order_by: OrderBy = Field(Query(default=OrderBy.id, description=enumStr(OrderBy)))
    order_in: OrderIn = Field(Query(default=OrderIn.DESC, description=enumStr(OrderIn)))
    # Pagination
    offset: int = Field(Query(default=0, ge=0))
    limit: int = Field(Query(default=20, gt=0, le=100))


class QueryParamsForEX(QueryParamsForPB):
    is_factory_default: bool | None = Field(Query(default=None))
    active: bool | None = Field(Query(default=None))
    # updated_on based
    updated_on_ge: datetime | None = Field(Query(default=None))
    updated_on_le: datetime | None = Field(Query(default=None))
    # created_on based
    created_on_ge: datetime | None = Field(Query(default=None))
    created_on_le: datetime | None = Field(Query(default=None))


## Function
def templateChanges(diagramModel: BusDiagramModel, fParam: UpdateForm) -> dict:
    """Floor template values of the form that differ from the stored ones."""
    changes = {}
    if fParam.num_floors is not None and fParam.num_floors != diagramModel.num_floors:
        changes[BusDiagramModel.num_floors.key] = fParam.num_floors
    if fParam.seats_per_floor is not None:
        seatsPerFloor = [config.model_dump() for config in fParam.seats_per_floor]
        if seatsPerFloor != diagramModel.seats_per_floor:
            changes[BusDiagramModel.seats_per_floor.key] = seatsPerFloor
    return changes


def searchDiagramModel(
    session: Session, qParam: QueryParamsForPB | QueryParamsForEX
) -> List[BusDiagramModel]:
    query = session.query(BusDiagramModel)

    # Filters
    if qParam.name is not None:
        query = query.filter(BusDiagramModel.name.ilike(f"%{qParam.name}%"))
    if qParam.num_floors is not None:
        query = query.filter(BusDiagramModel.num_floors == qParam.num_floors)
    if isinstance(qParam, QueryParamsForEX):
        if qParam.is_factory_default is not None:
            query = query.filter(
                BusDiagramModel.is_factory_default == qParam.is_factory_default
            )
        if qParam.active is not None:
            query = query.filter(BusDiagramModel.active == qParam.active)
        # updated_on based
        if qParam.updated_on_ge is not None:
            query = query.filter(BusDiagramModel.updated_on >= qParam.updated_on_ge)
        if qParam.updated_on_le is not None:
            query = query.filter(BusDiagramModel.updated_on <= qParam.updated_on_le)
        # created_on based
        if qParam.created_on_ge is not None:
            query = query.filter(BusDiagramModel.created_on >= qParam.created_on_ge)
        if qParam.created_on_le is not None:
            query = query.filter(BusDiagramModel.created_on <= qParam.created_on_le)
    else:
        query = query.filter(BusDiagramModel.active.is_(True))
    # id based
    if qParam.id is not None:
        query = query.filter(BusDiagramModel.id == qParam.id)
    if qParam.id_list is not None:
        query = query.filter(BusDiagramModel.id.in_(qParam.id_list))
    # total_seats based
    if qParam.total_seats_ge is not None:
        query = query.filter(BusDiagramModel.total_seats >= qParam.total_seats_ge)
    if qParam.total_seats_le is not None:
        query = query.filter(BusDiagramModel.total_seats <= qParam.total_seats_le)

    # Ordering
    orderingAttribute = getattr(BusDiagramModel, OrderBy(qParam.order_by).name)
    if qParam.order_in == OrderIn.ASC:
        query = query.order_by(orderingAttribute.asc())
    else:
        query = query.order_by(orderingAttribute.desc())

    # Pagination
    query = query.offset(qParam.offset).limit(qParam.limit)
    return query.all()


## API endpoints [Executive]
@route_executive.post(
    URL_BUS_DIAGRAM_MODEL,
    tags=["Bus Diagram Model"],
    response_model=BusDiagramModelSchema,
    status_code=status.HTTP_201_CREATED,
    responses=fuseExceptionResponses(
        [
            exceptions.InvalidToken(),
            exceptions.NoPermission(),
            exceptions.ValidationError(),
            exceptions.UniqueViolation("The name is already taken"),
        ]
    ),
    description="""
    Creates a new bus diagram model and generates its seats from the floor template in one transaction.
    Seats are numbered from 1, floor by floor, row by row, left to right.
    Only executives with `create_diagram_model` permission can create diagram models.
    Logs the creation activity with the associated token.
    """,
)
async def create_diagram_model(
    fParam: CreateForm = Depends(),
    bearer=Depends(bearer_executive),
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        token = validators.executiveToken(bearer.credentials, session)
        role = getters.executiveRole(token, session)
        validators.executivePermission(role, ExecutiveRole.create_diagram_model)

        diagramModel = seat_configuration.createDiagramModelWithSpaces(
            session,
            {
                "name": fParam.name,
                "description": fParam.description,
                "max_capacity": fParam.max_capacity,
                "num_floors": fParam.num_floors,
                "seats_per_floor": [c.model_dump() for c in fParam.seats_per_floor],
                "is_factory_default": fParam.is_factory_default,
            },
        )
        session.refresh(diagramModel)

        diagramModelData = jsonable_encoder(diagramModel)
        logEvent(token, request_info, diagramModelData)
        return diagramModelData
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_executive.patch(
    URL_BUS_DIAGRAM_MODEL,
    tags=["Bus Diagram Model"],
    response_model=BusDiagramModelSchema,
    responses=fuseExceptionResponses(
        [
            exceptions.InvalidToken(),
            exceptions.NoPermission(),
            exceptions.NotFoundError(BusDiagramModel),
            exceptions.ValidationError(),
            exceptions.LockAcquireTimeout(),
        ]
    ),
    description="""
    Updates an existing bus diagram model.
    Changing `num_floors` or `seats_per_floor` requires `regenerate_seats`, which deletes every seat and regenerates the layout from the new template.
    Per seat customization is lost on regeneration.
    Only executives with `update_diagram_model` permission can perform this operation.
    Logs the update activity with the associated token.
    """,
)
async def update_diagram_model(
    fParam: UpdateForm = Depends(),
    bearer=Depends(bearer_executive),
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        token = validators.executiveToken(bearer.credentials, session)
        role = getters.executiveRole(token, session)
        validators.executivePermission(role, ExecutiveRole.update_diagram_model)

        with diagramModelLock(fParam.id):
            diagramModel = (
                session.query(BusDiagramModel)
                .filter(BusDiagramModel.id == fParam.id)
                .first()
            )
            if diagramModel is None:
                raise exceptions.NotFoundError(BusDiagramModel, fParam.id)

            changes = templateChanges(diagramModel, fParam)
            if changes and not fParam.regenerate_seats:
                raise exceptions.ValidationError(
                    "Changing the floor template requires regenerate_seats"
                )

            updateIfChanged(
                diagramModel,
                fParam,
                [
                    BusDiagramModel.name.key,
                    BusDiagramModel.description.key,
                    BusDiagramModel.max_capacity.key,
                    BusDiagramModel.is_factory_default.key,
                    BusDiagramModel.active.key,
                ],
            )
            if fParam.regenerate_seats:
                seat_configuration.regenerateSpaces(diagramModel.id, session, changes)
                haveUpdates = True
            else:
                haveUpdates = session.is_modified(diagramModel)
                if haveUpdates:
                    layout.validateDiagramTemplate(
                        diagramModel.num_floors,
                        diagramModel.seats_per_floor,
                        diagramModel.max_capacity,
                    )
                    session.commit()
            if haveUpdates:
                session.refresh(diagramModel)

        diagramModelData = jsonable_encoder(diagramModel)
        if haveUpdates:
            logEvent(token, request_info, diagramModelData)
        return diagramModelData
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_executive.delete(
    URL_BUS_DIAGRAM_MODEL,
    tags=["Bus Diagram Model"],
    status_code=status.HTTP_204_NO_CONTENT,
    responses=fuseExceptionResponses(
        [exceptions.InvalidToken(), exceptions.NoPermission()]
    ),
    description="""
    Deletes a bus diagram model together with its seats and zones.
    Only executives with `delete_diagram_model` permission can perform this operation.
    Unknown IDs are silently ignored.
    Logs the deletion activity with the associated token.
    """,
)
async def delete_diagram_model(
    fParam: DeleteForm = Depends(),
    bearer=Depends(bearer_executive),
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        token = validators.executiveToken(bearer.credentials, session)
        role = getters.executiveRole(token, session)
        validators.executivePermission(role, ExecutiveRole.delete_diagram_model)

        diagramModel = (
            session.query(BusDiagramModel)
            .filter(BusDiagramModel.id == fParam.id)
            .first()
        )
        if diagramModel is not None:
            session.delete(diagramModel)
            session.commit()
            logEvent(token, request_info, jsonable_encoder(diagramModel))
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_executive.get(
    URL_BUS_DIAGRAM_MODEL,
    tags=["Bus Diagram Model"],
    response_model=List[BusDiagramModelSchema],
    responses=fuseExceptionResponses([exceptions.InvalidToken()]),
    description="""
    Fetches bus diagram models.
    Supports filtering by name, floors, seat count, status and timestamps, with ordering and pagination.
    Requires a valid executive token.
    """,
)
async def fetch_diagram_models(
    qParam: QueryParamsForEX = Depends(), bearer=Depends(bearer_executive)
):
    try:
        session = sessionMaker()
        validators.executiveToken(bearer.credentials, session)

        return searchDiagramModel(session, qParam)
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


## API endpoints [Public]
@route_public.get(
    URL_BUS_DIAGRAM_MODEL,
    tags=["Bus Diagram Model"],
    response_model=List[BusDiagramModelSchema],
    description="""
    Fetches the active bus diagram models.
    Supports filtering by name, floors and seat count, with ordering and pagination.
    """,
)
async def fetch_active_diagram_models(qParam: QueryParamsForPB = Depends()):
    try:
        session = sessionMaker()
        return searchDiagramModel(session, qParam)
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()
