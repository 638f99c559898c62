from enum import IntEnum
from typing import List
from fastapi import APIRouter, Depends, Query, status, Form, Body
from sqlalchemy.orm.session import Session
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, Field

from inventory.api.bearer import bearer_executive
from inventory.src.db import BusSeatModel, ExecutiveRole, sessionMaker
from inventory.src import exceptions, seat_configuration, validators, getters
from inventory.src.enums import OrderIn, SeatType, SpaceType
from inventory.src.loggers import logEvent
from inventory.src.redis import diagramModelLock
from inventory.src.schemas import (
    BusSeatModelSchema,
    RegenerationResult,
    SeatConfigurationResult,
    Space,
)
from inventory.src.functions import enumStr, fuseExceptionResponses
from inventory.src.urls import URL_BUS_SEAT_MODEL, URL_BUS_SEAT_MODEL_REGENERATE

route_executive = APIRouter()
route_public = APIRouter()


## Input Forms
class SeatConfigurationForm(BaseModel):
    bus_diagram_model_id: int = Field(Body())
    spaces: List[Space] = Field(
        Body(
            description="The complete desired layout, stored spaces missing from it are deactivated"
        )
    )


class RegenerateForm(BaseModel):
    bus_diagram_model_id: int = Field(Form())


## Query Parameters
class OrderBy(IntEnum):
    position = 1
    id = 2


class QueryParams(BaseModel):
    bus_diagram_model_id: int = Field(Query())
    floor_number: int | None = Field(Query(default=None))
    space_type: SpaceType | None = Field(
        Query(default=None, description=enumStr(SpaceType))
    )
    seat_type: SeatType | None = Field(
        Query(default=None, description=enumStr(SeatType))
    )
    seat_number: str | None = Field(Query(default=None))
    active: bool | None = Field(Query(default=True))
    # Ordering
    order_by: OrderBy = Field(
        Query(default=OrderBy.position, description=enumStr(OrderBy))
    )
    order_in: OrderIn = Field(Query(default=OrderIn.ASC, description=enumStr(OrderIn)))
    # Pagination
    offset: int = Field(Query(default=0, ge=0))
    limit: int = Field(Query(default=200, gt=0, le=500))


## Function
def searchSpace(session: Session, qParam: QueryParams) -> List[BusSeatModel]:
    query = session.query(BusSeatModel).filter(
        BusSeatModel.bus_diagram_model_id == qParam.bus_diagram_model_id
    )

    # Filters
    if qParam.floor_number is not None:
        query = query.filter(BusSeatModel.floor_number == qParam.floor_number)
    if qParam.space_type is not None:
        query = query.filter(BusSeatModel.space_type == qParam.space_type)
    if qParam.seat_type is not None:
        query = query.filter(BusSeatModel.seat_type == qParam.seat_type)
    if qParam.seat_number is not None:
        query = query.filter(BusSeatModel.seat_number == qParam.seat_number)
    if qParam.active is not None:
        query = query.filter(BusSeatModel.active == qParam.active)

    # Ordering
    if qParam.order_by == OrderBy.position:
        orderingAttributes = [
            BusSeatModel.floor_number,
            BusSeatModel.position_y,
            BusSeatModel.position_x,
            BusSeatModel.id,
        ]
    else:
        orderingAttributes = [BusSeatModel.id]
    if qParam.order_in == OrderIn.ASC:
        query = query.order_by(*[attribute.asc() for attribute in orderingAttributes])
    else:
        query = query.order_by(*[attribute.desc() for attribute in orderingAttributes])

    # Pagination
    query = query.offset(qParam.offset).limit(qParam.limit)
    return query.all()


## API endpoints [Executive]
@route_executive.put(
    URL_BUS_SEAT_MODEL,
    tags=["Seat Configuration"],
    response_model=SeatConfigurationResult,
    responses=fuseExceptionResponses(
        [
            exceptions.InvalidToken(),
            exceptions.NoPermission(),
            exceptions.NotFoundError(),
            exceptions.ValidationError(),
            exceptions.UniqueViolation("Seat number is already in use"),
            exceptions.LockAcquireTimeout(),
        ]
    ),
    description="""
    Replaces the seat configuration of a bus diagram model with the given layout.
    Spaces are matched by floor and position, never by seat number, so seats can be renumbered or swapped freely.
    New positions are created, changed spaces updated and stored spaces missing from the layout deactivated.
    The whole change is applied atomically and the `total_seats` of the diagram model is recomputed.
    Only executives with `update_diagram_model` permission can perform this operation.
    Logs the change summary with the associated token.
    """,
)
async def update_seat_configuration(
    fParam: SeatConfigurationForm = Depends(),
    bearer=Depends(bearer_executive),
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        token = validators.executiveToken(bearer.credentials, session)
        role = getters.executiveRole(token, session)
        validators.executivePermission(role, ExecutiveRole.update_diagram_model)

        with diagramModelLock(fParam.bus_diagram_model_id):
            result = seat_configuration.batchUpdateSeatConfiguration(
                fParam.bus_diagram_model_id, fParam.spaces, session
            )

        logEvent(
            token,
            request_info,
            {"bus_diagram_model_id": fParam.bus_diagram_model_id, **result},
        )
        return result
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_executive.post(
    URL_BUS_SEAT_MODEL_REGENERATE,
    tags=["Seat Configuration"],
    response_model=RegenerationResult,
    status_code=status.HTTP_201_CREATED,
    responses=fuseExceptionResponses(
        [
            exceptions.InvalidToken(),
            exceptions.NoPermission(),
            exceptions.NotFoundError(),
            exceptions.ValidationError(),
            exceptions.LockAcquireTimeout(),
        ]
    ),
    description="""
    Resets the seat configuration of a bus diagram model to its floor template.
    Every stored space is deleted and the layout is generated again, dropping per seat customization.
    Only executives with `update_diagram_model` permission can perform this operation.
    Logs the regeneration with the associated token.
    """,
)
async def regenerate_seats(
    fParam: RegenerateForm = Depends(),
    bearer=Depends(bearer_executive),
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        token = validators.executiveToken(bearer.credentials, session)
        role = getters.executiveRole(token, session)
        validators.executivePermission(role, ExecutiveRole.update_diagram_model)

        with diagramModelLock(fParam.bus_diagram_model_id):
            result = seat_configuration.regenerateSpaces(
                fParam.bus_diagram_model_id, session
            )

        resultData = {
            "bus_diagram_model": jsonable_encoder(result["bus_diagram_model"]),
            "seats_generated": result["seats_generated"],
        }
        logEvent(token, request_info, resultData)
        return resultData
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_executive.get(
    URL_BUS_SEAT_MODEL,
    tags=["Seat Configuration"],
    response_model=List[BusSeatModelSchema],
    responses=fuseExceptionResponses([exceptions.InvalidToken()]),
    description="""
    Fetches the spaces of a bus diagram model, by default the active ones in layout order.
    Requires a valid executive token.
    """,
)
async def fetch_seat_configuration(
    qParam: QueryParams = Depends(), bearer=Depends(bearer_executive)
):
    try:
        session = sessionMaker()
        validators.executiveToken(bearer.credentials, session)

        return searchSpace(session, qParam)
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


## API endpoints [Public]
@route_public.get(
    URL_BUS_SEAT_MODEL,
    tags=["Seat Configuration"],
    response_model=List[BusSeatModelSchema],
    description="""
    Fetches the active spaces of a bus diagram model in layout order.
    """,
)
async def fetch_active_seat_configuration(qParam: QueryParams = Depends()):
    try:
        session = sessionMaker()
        qParam.active = True
        return searchSpace(session, qParam)
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()
