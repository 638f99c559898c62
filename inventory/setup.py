import argparse
from http import HTTPStatus
from requests import get, post, put

from inventory.src import argon2
from inventory.src.enums import AmenityCategory, SeatType, SpaceType
from inventory.src.urls import (
    URL_EXECUTIVE_TOKEN,
    URL_AMENITY,
    URL_BUS_DIAGRAM_MODEL,
    URL_BUS_DIAGRAM_MODEL_ZONE,
    URL_BUS_SEAT_MODEL,
)
from inventory.src.db import (
    Executive,
    ExecutiveRole,
    ExecutiveRoleMap,
    sessionMaker,
    engine,
    ORMbase,
)


# ----------------------------------- Project Setup -------------------------------------------#
def removeTables():
    session = sessionMaker()
    ORMbase.metadata.drop_all(engine)
    session.commit()
    print("* All tables deleted")
    session.close()


def createTables():
    session = sessionMaker()
    ORMbase.metadata.create_all(engine)
    session.commit()
    print("* All tables created")
    session.close()


def initDB():
    session = sessionMaker()
    password = argon2.makePassword("password")
    admin = Executive(
        username="admin",
        password=password,
        full_name="Inventory admin",
        designation="Administrator",
    )
    guest = Executive(
        username="guest",
        password=password,
        full_name="Inventory guest",
        designation="Guest",
    )
    adminRole = ExecutiveRole(
        name="Admin",
        manage_token=True,
        create_diagram_model=True,
        update_diagram_model=True,
        delete_diagram_model=True,
        create_amenity=True,
        update_amenity=True,
        delete_amenity=True,
    )
    guestRole = ExecutiveRole(
        name="Guest",
        manage_token=False,
        create_diagram_model=False,
        update_diagram_model=False,
        delete_diagram_model=False,
        create_amenity=False,
        update_amenity=False,
        delete_amenity=False,
    )
    session.add_all([admin, guest, adminRole, guestRole])
    session.flush()

    adminToRoleMapping = ExecutiveRoleMap(executive_id=admin.id, role_id=adminRole.id)
    guestToRoleMapping = ExecutiveRoleMap(executive_id=guest.id, role_id=guestRole.id)
    session.add_all([adminToRoleMapping, guestToRoleMapping])
    session.flush()

    session.commit()
    print("* Initialization completed")
    session.close()


def POST(URL: str, header: dict = {}, status_code: int = HTTPStatus.CREATED, **kwargs):
    response = post(URL, headers=header, **kwargs)
    assert response.status_code == status_code, response.text
    return response


def testDB():
    # Base URL
    BASE_URL = "http://127.0.0.1:8080/executive"

    # Create Executive Token
    credentials = {"username": "admin", "password": "password"}
    response = POST((BASE_URL + URL_EXECUTIVE_TOKEN), data=credentials)
    print("* Created token for admin")
    accessToken = {"Authorization": f"Bearer {response.json()['access_token']}"}

    # Create Amenities
    amenities = []
    for name, category in [
        ("USB charger", AmenityCategory.TECHNOLOGY),
        ("Reading light", AmenityCategory.COMFORT),
        ("Footrest", AmenityCategory.COMFORT),
    ]:
        amenity = POST(
            (BASE_URL + URL_AMENITY),
            header=accessToken,
            data={"name": name, "category": int(category)},
        )
        amenities.append(amenity.json()["id"])
    print("* Created amenities")

    # Create Bus Diagram Models
    seaterData = {
        "name": "2x2 Seater",
        "description": "Single floor seater with 10 rows",
        "max_capacity": 40,
        "num_floors": 1,
        "seats_per_floor": [
            {"floor_number": 1, "num_rows": 10, "seats_left": 2, "seats_right": 2}
        ],
    }
    sleeperData = {
        "name": "Double decker sleeper",
        "description": "Two floors with a single left berth",
        "max_capacity": 60,
        "num_floors": 2,
        "seats_per_floor": [
            {"floor_number": 1, "num_rows": 10, "seats_left": 1, "seats_right": 2},
            {"floor_number": 2, "num_rows": 10, "seats_left": 1, "seats_right": 2},
        ],
    }
    seater = POST(
        (BASE_URL + URL_BUS_DIAGRAM_MODEL), header=accessToken, json=seaterData
    )
    POST((BASE_URL + URL_BUS_DIAGRAM_MODEL), header=accessToken, json=sleeperData)
    print("* Created bus diagram models")

    # Create Zones
    seaterId = seater.json()["id"]
    for name, rows, multiplier in [
        ("Front", [1, 2, 3], "1.20"),
        ("Rear", [8, 9, 10], "0.90"),
    ]:
        POST(
            (BASE_URL + URL_BUS_DIAGRAM_MODEL_ZONE),
            header=accessToken,
            json={
                "bus_diagram_model_id": seaterId,
                "name": name,
                "row_numbers": rows,
                "price_multiplier": multiplier,
            },
        )
    print("* Created zones")

    # Customize the first row of the seater
    spaces = get(
        (BASE_URL + URL_BUS_SEAT_MODEL),
        headers=accessToken,
        params={"bus_diagram_model_id": seaterId},
    ).json()
    layout = []
    for space in spaces:
        entry = {
            "space_type": space["space_type"],
            "seat_number": space["seat_number"],
            "floor_number": space["floor_number"],
            "seat_type": space["seat_type"],
            "amenities": space["amenities"],
            "reclinement_angle": space["reclinement_angle"],
            "position": space["position"],
        }
        if space["space_type"] == SpaceType.SEAT and space["position"]["y"] == 1:
            entry["seat_type"] = SeatType.PREMIUM
            entry["amenities"] = amenities
            entry["reclinement_angle"] = 140
        layout.append(entry)
    response = put(
        (BASE_URL + URL_BUS_SEAT_MODEL),
        headers=accessToken,
        json={"bus_diagram_model_id": seaterId, "spaces": layout},
    )
    assert response.status_code == HTTPStatus.OK, response.text
    print(f"* Updated seat configuration {response.json()}")


# Setup database
if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    # remove tables
    parser.add_argument("-rm", action="store_true", help="remove tables")
    parser.add_argument("-cr", action="store_true", help="create tables")
    parser.add_argument("-init", action="store_true", help="initialize DB")
    parser.add_argument("-test", action="store_true", help="add test data")
    args = parser.parse_args()

    if args.cr:
        createTables()
    if args.init:
        initDB()
    if args.test:
        testDB()
    if args.rm:
        removeTables()
