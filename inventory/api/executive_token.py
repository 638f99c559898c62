"""
Login, logout and session listing for the inventory back office.

Executives of the fleet inventory team sign in with a username and password
and receive an opaque bearer token. Every diagram model, zone, seat layout
and amenity endpoint of the executive app is authorized with it.
"""

from datetime import datetime, timedelta, timezone
from enum import IntEnum
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status, Form
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, Field
from sqlalchemy.orm.session import Session

from inventory.api.bearer import bearer_executive
from inventory.src.constants import MAX_EXECUTIVE_TOKENS, MAX_TOKEN_VALIDITY
from inventory.src.db import Executive, ExecutiveRole, ExecutiveToken, sessionMaker
from inventory.src import argon2, exceptions, validators, getters
from inventory.src.enums import AccountStatus, OrderIn, PlatformType
from inventory.src.loggers import logEvent
from inventory.src.functions import enumStr, fuseExceptionResponses
from inventory.src.urls import URL_EXECUTIVE_TOKEN

route_executive = APIRouter()


## Output Schema
class SessionSchema(BaseModel):
    id: int
    executive_id: int
    expires_in: int
    expires_at: datetime
    platform_type: int
    client_details: Optional[str]
    updated_on: Optional[datetime]
    created_on: datetime


class LoginSchema(SessionSchema):
    access_token: str
    token_type: Optional[str] = "bearer"


## Input Forms
class LoginForm(BaseModel):
    username: str = Field(Form(max_length=32))
    password: str = Field(Form(max_length=32))
    platform_type: PlatformType = Field(
        Form(description=enumStr(PlatformType), default=PlatformType.OTHER)
    )
    client_details: str | None = Field(Form(max_length=1024, default=None))


class LogoutForm(BaseModel):
    id: int | None = Field(Form(default=None))


## Query Parameters
class OrderBy(IntEnum):
    id = 1
    expires_at = 2
    created_on = 3


class QueryParams(BaseModel):
    executive_id: int | None = Field(Query(default=None))
    platform_type: PlatformType | None = Field(
        Query(default=None, description=enumStr(PlatformType))
    )
    id: int | None = Field(Query(default=None))
    active_after: datetime | None = Field(Query(default=None))
    order_by: OrderBy = Field(Query(default=OrderBy.id, description=enumStr(OrderBy)))
    order_in: OrderIn = Field(Query(default=OrderIn.DESC, description=enumStr(OrderIn)))
    offset: int = Field(Query(default=0, ge=0))
    limit: int = Field(Query(default=20, gt=0, le=100))


## Function
def authenticate(session: Session, username: str, password: str) -> Executive:
    """
    Raises:
        exceptions.InvalidCredentials: Unknown username or wrong password.
        exceptions.InactiveAccount: The executive is suspended.
    """
    executive = session.query(Executive).filter(Executive.username == username).first()
    if executive is None or not argon2.checkPassword(password, executive.password):
        raise exceptions.InvalidCredentials()
    if executive.status != AccountStatus.ACTIVE:
        raise exceptions.InactiveAccount()
    if argon2.needsRehash(executive.password):
        executive.password = argon2.makePassword(password)
    return executive


def dropOldestSessions(session: Session, executiveId: int) -> int:
    """Leave room for one more session under MAX_EXECUTIVE_TOKENS."""
    sessions = (
        session.query(ExecutiveToken)
        .filter(ExecutiveToken.executive_id == executiveId)
        .order_by(ExecutiveToken.created_on.desc(), ExecutiveToken.id.desc())
        .all()
    )
    stale = sessions[MAX_EXECUTIVE_TOKENS - 1 :]
    for token in stale:
        session.delete(token)
    session.flush()
    return len(stale)


def sessionAudit(token: ExecutiveToken, action: str) -> dict:
    return {
        "action": action,
        "session_id": token.id,
        "executive_id": token.executive_id,
        "platform_type": token.platform_type,
        "expires_at": jsonable_encoder(token.expires_at),
    }


## API endpoints [Executive]
@route_executive.post(
    URL_EXECUTIVE_TOKEN,
    tags=["Session"],
    response_model=LoginSchema,
    status_code=status.HTTP_201_CREATED,
    responses=fuseExceptionResponses(
        [exceptions.InactiveAccount(), exceptions.InvalidCredentials()]
    ),
    description="""
    Signs an inventory executive in and returns a bearer token.
    Each executive keeps at most MAX_EXECUTIVE_TOKENS sessions, the oldest are dropped.
    """,
)
async def login(
    fParam: LoginForm = Depends(),
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        executive = authenticate(session, fParam.username, fParam.password)
        dropOldestSessions(session, executive.id)

        token = ExecutiveToken(
            executive_id=executive.id,
            expires_in=MAX_TOKEN_VALIDITY,
            expires_at=datetime.now(timezone.utc)
            + timedelta(seconds=MAX_TOKEN_VALIDITY),
            platform_type=fParam.platform_type,
            client_details=fParam.client_details,
        )
        session.add(token)
        session.commit()
        session.refresh(token)

        logEvent(token, request_info, sessionAudit(token, "login"))
        return jsonable_encoder(token)
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_executive.delete(
    URL_EXECUTIVE_TOKEN,
    tags=["Session"],
    status_code=status.HTTP_204_NO_CONTENT,
    responses=fuseExceptionResponses(
        [exceptions.InvalidToken(), exceptions.NoPermission()]
    ),
    description="""
    Signs out. Without an ID the calling session ends.
    Ending a colleague's session needs the `manage_token` permission.
    """,
)
async def logout(
    fParam: LogoutForm = Depends(),
    bearer=Depends(bearer_executive),
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        token = validators.executiveToken(bearer.credentials, session)

        target = token
        if fParam.id is not None:
            target = session.get(ExecutiveToken, fParam.id)
            if target is None:
                return Response(status_code=status.HTTP_204_NO_CONTENT)
        if target.executive_id != token.executive_id:
            role = getters.executiveRole(token, session)
            validators.executivePermission(role, ExecutiveRole.manage_token)

        audit = sessionAudit(target, "logout")
        session.delete(target)
        session.commit()
        logEvent(token, request_info, audit)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_executive.get(
    URL_EXECUTIVE_TOKEN,
    tags=["Session"],
    response_model=List[SessionSchema],
    responses=fuseExceptionResponses([exceptions.InvalidToken()]),
    description="""
    Lists sessions without their access tokens.
    Only executives with `manage_token` see sessions of other executives.
    """,
)
async def fetch_sessions(
    qParam: QueryParams = Depends(), bearer=Depends(bearer_executive)
):
    try:
        session = sessionMaker()
        token = validators.executiveToken(bearer.credentials, session)
        role = getters.executiveRole(token, session)

        query = session.query(ExecutiveToken)
        if not (role and role.manage_token):
            query = query.filter(ExecutiveToken.executive_id == token.executive_id)
        elif qParam.executive_id is not None:
            query = query.filter(ExecutiveToken.executive_id == qParam.executive_id)
        if qParam.platform_type is not None:
            query = query.filter(ExecutiveToken.platform_type == qParam.platform_type)
        if qParam.id is not None:
            query = query.filter(ExecutiveToken.id == qParam.id)
        if qParam.active_after is not None:
            query = query.filter(ExecutiveToken.expires_at > qParam.active_after)

        orderingAttribute = getattr(ExecutiveToken, OrderBy(qParam.order_by).name)
        if qParam.order_in == OrderIn.ASC:
            query = query.order_by(orderingAttribute.asc())
        else:
            query = query.order_by(orderingAttribute.desc())
        return query.offset(qParam.offset).limit(qParam.limit).all()
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()
