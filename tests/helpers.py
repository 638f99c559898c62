from inventory.src import argon2, schemas
from inventory.src.db import BusSeatModel, Executive, ExecutiveRole, ExecutiveRoleMap
from inventory.src.enums import SpaceType
from inventory.src.urls import URL_EXECUTIVE_TOKEN

SEATER_TEMPLATE = {
    "name": "2x2 Seater",
    "description": "Single floor seater",
    "max_capacity": 40,
    "num_floors": 1,
    "seats_per_floor": [
        {"floor_number": 1, "num_rows": 10, "seats_left": 2, "seats_right": 2}
    ],
}

PERMISSIONS = (
    "manage_token",
    "create_diagram_model",
    "update_diagram_model",
    "delete_diagram_model",
    "create_amenity",
    "update_amenity",
    "delete_amenity",
)


def createExecutive(session, username: str, allowAll: bool = False) -> Executive:
    executive = Executive(username=username, password=argon2.makePassword("password"))
    role = ExecutiveRole(
        name=f"{username} role",
        **{permission: allowAll for permission in PERMISSIONS},
    )
    session.add_all([executive, role])
    session.flush()
    session.add(ExecutiveRoleMap(executive_id=executive.id, role_id=role.id))
    session.commit()
    return executive


def login(client, username: str) -> dict:
    response = client.post(
        "/executive" + URL_EXECUTIVE_TOKEN,
        data={"username": username, "password": "password"},
    )
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def activeSpaces(session, diagramModelId: int) -> list[BusSeatModel]:
    session.expire_all()
    return (
        session.query(BusSeatModel)
        .filter(
            BusSeatModel.bus_diagram_model_id == diagramModelId,
            BusSeatModel.active.is_(True),
        )
        .order_by(BusSeatModel.id)
        .all()
    )


def currentLayout(session, diagramModelId: int) -> list[schemas.Space]:
    """The active spaces of a diagram model as a seat configuration payload."""
    return [
        schemas.Space(
            space_type=space.space_type,
            seat_number=space.seat_number,
            floor_number=space.floor_number,
            seat_type=space.seat_type,
            amenities=space.amenities,
            reclinement_angle=space.reclinement_angle,
            position=schemas.Position(x=space.position_x, y=space.position_y),
        )
        for space in activeSpaces(session, diagramModelId)
    ]


def incomingAt(spaces: list[schemas.Space], x: int, y: int, floorNumber: int = 1):
    for space in spaces:
        if (space.floor_number, space.position.x, space.position.y) == (floorNumber, x, y):
            return space
    return None


def spaceAt(spaces: list[BusSeatModel], x: int, y: int, floorNumber: int = 1):
    for space in spaces:
        if (space.floor_number, space.position_x, space.position_y) == (floorNumber, x, y):
            return space
    return None


def seatNumbers(spaces) -> list[str]:
    return [space.seat_number for space in spaces if space.space_type == SpaceType.SEAT]
