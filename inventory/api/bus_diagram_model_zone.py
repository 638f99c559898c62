from datetime import datetime
from decimal import Decimal
from enum import IntEnum
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status, Form, Body
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, Field

from inventory.api.bearer import bearer_executive
from inventory.src.db import BusDiagramModelZone, ExecutiveRole, sessionMaker
from inventory.src import exceptions, gateway, validators, getters
from inventory.src.enums import OrderIn
from inventory.src.loggers import logEvent
from inventory.src.functions import enumStr, fuseExceptionResponses, updateIfChanged
from inventory.src.urls import URL_BUS_DIAGRAM_MODEL_ZONE

route_executive = APIRouter()


## Output Schema
class BusDiagramModelZoneSchema(BaseModel):
    id: int
    bus_diagram_model_id: int
    name: str
    row_numbers: List[int]
    price_multiplier: Decimal
    updated_on: Optional[datetime]
    created_on: datetime


## Input Forms
class CreateForm(BaseModel):
    bus_diagram_model_id: int = Field(Body())
    name: str = Field(Body(max_length=32))
    row_numbers: List[int] = Field(Body(min_length=1))
    price_multiplier: Decimal = Field(
        Body(default=Decimal("1.00"), gt=0, max_digits=4, decimal_places=2)
    )


class UpdateForm(BaseModel):
    id: int = Field(Body())
    name: str | None = Field(Body(max_length=32, default=None))
    row_numbers: List[int] | None = Field(Body(min_length=1, default=None))
    price_multiplier: Decimal | None = Field(
        Body(default=None, gt=0, max_digits=4, decimal_places=2)
    )


class DeleteForm(BaseModel):
    id: int = Field(Form())


## Query Parameters
class OrderBy(IntEnum):
    id = 1
    name = 2
    price_multiplier = 3
    created_on = 4


class QueryParams(BaseModel):
    bus_diagram_model_id: int | None = Field(Query(default=None))
    name: str | None = Field(Query(default=None))
    # id based
    id: int | None = Field(Query(default=None))
    id_list: List[int] | None = Field(Query(default=None))
    # Ordering
    order_by: OrderBy = Field(Query(default=OrderBy.id, description=enumStr(OrderBy)))
    order_in: OrderIn = Field(Query(default=OrderIn.ASC, description=enumStr(OrderIn)))
    # Pagination
    offset: int = Field(Query(default=0, ge=0))
    limit: int = Field(Query(default=20, gt=0, le=100))


## API endpoints [Executive]
@route_executive.post(
    URL_BUS_DIAGRAM_MODEL_ZONE,
    tags=["Bus Diagram Model Zone"],
    response_model=BusDiagramModelZoneSchema,
    status_code=status.HTTP_201_CREATED,
    responses=fuseExceptionResponses(
        [
            exceptions.InvalidToken(),
            exceptions.NoPermission(),
            exceptions.NotFoundError(),
            exceptions.ValidationError(),
            exceptions.OverlappingZone([]),
        ]
    ),
    description="""
    Creates a pricing zone on a bus diagram model.
    Rows must exist in the floor template and must not belong to another zone of the diagram model.
    Only executives with `update_diagram_model` permission can create zones.
    """,
)
async def create_zone(
    fParam: CreateForm = Depends(),
    bearer=Depends(bearer_executive),
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        token = validators.executiveToken(bearer.credentials, session)
        role = getters.executiveRole(token, session)
        validators.executivePermission(role, ExecutiveRole.update_diagram_model)

        diagramModel = gateway.findDiagramModel(session, fParam.bus_diagram_model_id)
        validators.zoneRows(fParam.row_numbers, diagramModel, session)

        zone = BusDiagramModelZone(
            bus_diagram_model_id=diagramModel.id,
            name=fParam.name,
            row_numbers=sorted(fParam.row_numbers),
            price_multiplier=fParam.price_multiplier,
        )
        session.add(zone)
        session.commit()
        session.refresh(zone)

        zoneData = jsonable_encoder(zone)
        logEvent(token, request_info, zoneData)
        return zoneData
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_executive.patch(
    URL_BUS_DIAGRAM_MODEL_ZONE,
    tags=["Bus Diagram Model Zone"],
    response_model=BusDiagramModelZoneSchema,
    responses=fuseExceptionResponses(
        [
            exceptions.InvalidToken(),
            exceptions.NoPermission(),
            exceptions.InvalidIdentifier(),
            exceptions.ValidationError(),
            exceptions.OverlappingZone([]),
        ]
    ),
    description="""
    Updates the name, rows or price multiplier of a zone.
    Only executives with `update_diagram_model` permission can perform this operation.
    """,
)
async def update_zone(
    fParam: UpdateForm = Depends(),
    bearer=Depends(bearer_executive),
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        token = validators.executiveToken(bearer.credentials, session)
        role = getters.executiveRole(token, session)
        validators.executivePermission(role, ExecutiveRole.update_diagram_model)

        zone = (
            session.query(BusDiagramModelZone)
            .filter(BusDiagramModelZone.id == fParam.id)
            .first()
        )
        if zone is None:
            raise exceptions.InvalidIdentifier()

        if fParam.row_numbers is not None:
            diagramModel = gateway.findDiagramModel(session, zone.bus_diagram_model_id)
            validators.zoneRows(fParam.row_numbers, diagramModel, session, zone.id)
            fParam.row_numbers = sorted(fParam.row_numbers)

        updateIfChanged(
            zone,
            fParam,
            [
                BusDiagramModelZone.name.key,
                BusDiagramModelZone.row_numbers.key,
                BusDiagramModelZone.price_multiplier.key,
            ],
        )
        haveUpdates = session.is_modified(zone)
        if haveUpdates:
            session.commit()
            session.refresh(zone)

        zoneData = jsonable_encoder(zone)
        if haveUpdates:
            logEvent(token, request_info, zoneData)
        return zoneData
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_executive.delete(
    URL_BUS_DIAGRAM_MODEL_ZONE,
    tags=["Bus Diagram Model Zone"],
    status_code=status.HTTP_204_NO_CONTENT,
    responses=fuseExceptionResponses(
        [exceptions.InvalidToken(), exceptions.NoPermission()]
    ),
    description="""
    Deletes a zone of a bus diagram model. Unknown IDs are silently ignored.
    Only executives with `update_diagram_model` permission can perform this operation.
    """,
)
async def delete_zone(
    fParam: DeleteForm = Depends(),
    bearer=Depends(bearer_executive),
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        token = validators.executiveToken(bearer.credentials, session)
        role = getters.executiveRole(token, session)
        validators.executivePermission(role, ExecutiveRole.update_diagram_model)

        zone = (
            session.query(BusDiagramModelZone)
            .filter(BusDiagramModelZone.id == fParam.id)
            .first()
        )
        if zone is not None:
            session.delete(zone)
            session.commit()
            logEvent(token, request_info, jsonable_encoder(zone))
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_executive.get(
    URL_BUS_DIAGRAM_MODEL_ZONE,
    tags=["Bus Diagram Model Zone"],
    response_model=List[BusDiagramModelZoneSchema],
    responses=fuseExceptionResponses([exceptions.InvalidToken()]),
    description="""
    Fetches zones, optionally of a single bus diagram model.
    Requires a valid executive token.
    """,
)
async def fetch_zones(qParam: QueryParams = Depends(), bearer=Depends(bearer_executive)):
    try:
        session = sessionMaker()
        validators.executiveToken(bearer.credentials, session)

        query = session.query(BusDiagramModelZone)

        # Filters
        if qParam.bus_diagram_model_id is not None:
            query = query.filter(
                BusDiagramModelZone.bus_diagram_model_id == qParam.bus_diagram_model_id
            )
        if qParam.name is not None:
            query = query.filter(BusDiagramModelZone.name.ilike(f"%{qParam.name}%"))
        # id based
        if qParam.id is not None:
            query = query.filter(BusDiagramModelZone.id == qParam.id)
        if qParam.id_list is not None:
            query = query.filter(BusDiagramModelZone.id.in_(qParam.id_list))

        # Ordering
        orderingAttribute = getattr(BusDiagramModelZone, OrderBy(qParam.order_by).name)
        if qParam.order_in == OrderIn.ASC:
            query = query.order_by(orderingAttribute.asc())
        else:
            query = query.order_by(orderingAttribute.desc())

        # Pagination
        query = query.offset(qParam.offset).limit(qParam.limit)
        return query.all()
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()
