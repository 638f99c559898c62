from datetime import datetime
from enum import IntEnum
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status, Form
from sqlalchemy.orm.session import Session
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, Field

from inventory.api.bearer import bearer_executive
from inventory.src.db import Amenity, ExecutiveRole, sessionMaker
from inventory.src import exceptions, validators, getters
from inventory.src.enums import AmenityCategory, OrderIn
from inventory.src.loggers import logEvent
from inventory.src.functions import enumStr, fuseExceptionResponses, updateIfChanged
from inventory.src.urls import URL_AMENITY

route_executive = APIRouter()
route_public = APIRouter()


## Output Schema
class AmenitySchema(BaseModel):
    id: int
    name: str
    category: int
    description: Optional[str]
    active: bool
    updated_on: Optional[datetime]
    created_on: datetime


## Input Forms
class CreateForm(BaseModel):
    name: str = Field(Form(max_length=32))
    category: AmenityCategory = Field(
        Form(description=enumStr(AmenityCategory), default=AmenityCategory.OTHER)
    )
    description: str | None = Field(Form(max_length=2048, default=None))


class UpdateForm(BaseModel):
    id: int = Field(Form())
    name: str | None = Field(Form(max_length=32, default=None))
    category: AmenityCategory | None = Field(
        Form(description=enumStr(AmenityCategory), default=None)
    )
    description: str | None = Field(Form(max_length=2048, default=None))
    active: bool | None = Field(Form(default=None))


class DeleteForm(BaseModel):
    id: int = Field(Form())


## Query Parameters
class OrderBy(IntEnum):
    id = 1
    name = 2
    created_on = 3


class QueryParamsForPB(BaseModel):
    name: str | None = Field(Query(default=None))
    category: AmenityCategory | None = Field(
        Query(default=None, description=enumStr(AmenityCategory))
    )
    # id based
    id: int | None = Field(Query(default=None))
    id_list: List[int] | None = Field(Query(default=None))
    # Ordering
    order_by: OrderBy = Field(Query(default=OrderBy.id, description=enumStr(OrderBy)))
    order_in: OrderIn = Field(Query(default=OrderIn.ASC, description=enumStr(OrderIn)))
    # Pagination
    offset: int = Field(Query(default=0, ge=0))
    limit: int = Field(Query(default=20, gt=0, le=100))


class QueryParamsForEX(QueryParamsForPB):
    active: bool | None = Field(Query(default=None))


## Function
def searchAmenity(
    session: Session, qParam: QueryParamsForPB | QueryParamsForEX
) -> List[Amenity]:
    query = session.query(Amenity)

    # Filters
    if qParam.name is not None:
        query = query.filter(Amenity.name.ilike(f"%{qParam.name}%"))
    if qParam.category is not None:
        query = query.filter(Amenity.category == qParam.category)
    if isinstance(qParam, QueryParamsForEX):
        if qParam.active is not None:
            query = query.filter(Amenity.active == qParam.active)
    else:
        query = query.filter(Amenity.active.is_(True))
    # id based
    if qParam.id is not None:
        query = query.filter(Amenity.id == qParam.id)
    if qParam.id_list is not None:
        query = query.filter(Amenity.id.in_(qParam.id_list))

    # Ordering
    orderingAttribute = getattr(Amenity, OrderBy(qParam.order_by).name)
    if qParam.order_in == OrderIn.ASC:
        query = query.order_by(orderingAttribute.asc())
    else:
        query = query.order_by(orderingAttribute.desc())

    # Pagination
    query = query.offset(qParam.offset).limit(qParam.limit)
    return query.all()


## API endpoints [Executive]
@route_executive.post(
    URL_AMENITY,
    tags=["Amenity"],
    response_model=AmenitySchema,
    status_code=status.HTTP_201_CREATED,
    responses=fuseExceptionResponses(
        [
            exceptions.InvalidToken(),
            exceptions.NoPermission(),
            exceptions.UniqueViolation("name"),
        ]
    ),
    description="""
    Creates a new seat amenity.
    Only executives with `create_amenity` permission can create amenities.
    """,
)
async def create_amenity(
    fParam: CreateForm = Depends(),
    bearer=Depends(bearer_executive),
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        token = validators.executiveToken(bearer.credentials, session)
        role = getters.executiveRole(token, session)
        validators.executivePermission(role, ExecutiveRole.create_amenity)

        amenity = Amenity(
            name=fParam.name,
            category=fParam.category,
            description=fParam.description,
        )
        session.add(amenity)
        session.commit()
        session.refresh(amenity)

        amenityData = jsonable_encoder(amenity)
        logEvent(token, request_info, amenityData)
        return amenityData
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_executive.patch(
    URL_AMENITY,
    tags=["Amenity"],
    response_model=AmenitySchema,
    responses=fuseExceptionResponses(
        [
            exceptions.InvalidToken(),
            exceptions.NoPermission(),
            exceptions.InvalidIdentifier(),
            exceptions.UniqueViolation("name"),
        ]
    ),
    description="""
    Updates an existing amenity.
    Deactivated amenities stay on the seats that reference them and are hidden from the public listing.
    Only executives with `update_amenity` permission can perform this operation.
    """,
)
async def update_amenity(
    fParam: UpdateForm = Depends(),
    bearer=Depends(bearer_executive),
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        token = validators.executiveToken(bearer.credentials, session)
        role = getters.executiveRole(token, session)
        validators.executivePermission(role, ExecutiveRole.update_amenity)

        amenity = session.query(Amenity).filter(Amenity.id == fParam.id).first()
        if amenity is None:
            raise exceptions.InvalidIdentifier()

        updateIfChanged(
            amenity,
            fParam,
            [
                Amenity.name.key,
                Amenity.category.key,
                Amenity.description.key,
                Amenity.active.key,
            ],
        )
        haveUpdates = session.is_modified(amenity)
        if haveUpdates:
            session.commit()
            session.refresh(amenity)

        amenityData = jsonable_encoder(amenity)
        if haveUpdates:
            logEvent(token, request_info, amenityData)
        return amenityData
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_executive.delete(
    URL_AMENITY,
    tags=["Amenity"],
    status_code=status.HTTP_204_NO_CONTENT,
    responses=fuseExceptionResponses(
        [exceptions.InvalidToken(), exceptions.NoPermission()]
    ),
    description="""
    Deletes an amenity. Unknown IDs are silently ignored.
    Seat layouts still referencing the deleted ID are rejected until the ID is removed from them.
    Only executives with `delete_amenity` permission can perform this operation.
    """,
)
async def delete_amenity(
    fParam: DeleteForm = Depends(),
    bearer=Depends(bearer_executive),
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        token = validators.executiveToken(bearer.credentials, session)
        role = getters.executiveRole(token, session)
        validators.executivePermission(role, ExecutiveRole.delete_amenity)

        amenity = session.query(Amenity).filter(Amenity.id == fParam.id).first()
        if amenity is not None:
            session.delete(amenity)
            session.commit()
            logEvent(token, request_info, jsonable_encoder(amenity))
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_executive.get(
    URL_AMENITY,
    tags=["Amenity"],
    response_model=List[AmenitySchema],
    responses=fuseExceptionResponses([exceptions.InvalidToken()]),
    description="""
    Fetches amenities, active or not.
    Requires a valid executive token.
    """,
)
async def fetch_amenities(
    qParam: QueryParamsForEX = Depends(), bearer=Depends(bearer_executive)
):
    try:
        session = sessionMaker()
        validators.executiveToken(bearer.credentials, session)

        return searchAmenity(session, qParam)
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


## API endpoints [Public]
@route_public.get(
    URL_AMENITY,
    tags=["Amenity"],
    response_model=List[AmenitySchema],
    description="""
    Fetches the active amenities.
    """,
)
async def fetch_active_amenities(qParam: QueryParamsForPB = Depends()):
    try:
        session = sessionMaker()
        return searchAmenity(session, qParam)
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()
