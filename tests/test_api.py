"""
HTTP level tests of the executive and public apps.
"""

from inventory.src.constants import MAX_EXECUTIVE_TOKENS
from inventory.src.enums import PlatformType, SeatType, SpaceType
from inventory.src.urls import (
    URL_AMENITY,
    URL_BUS_DIAGRAM_MODEL,
    URL_BUS_DIAGRAM_MODEL_ZONE,
    URL_BUS_SEAT_MODEL,
    URL_BUS_SEAT_MODEL_REGENERATE,
    URL_EXECUTIVE_TOKEN,
)

from helpers import SEATER_TEMPLATE, login

EXECUTIVE = "/executive"
PUBLIC = "/public"


def createSeater(client, header, **values):
    response = client.post(
        EXECUTIVE + URL_BUS_DIAGRAM_MODEL,
        headers=header,
        json={**SEATER_TEMPLATE, **values},
    )
    assert response.status_code == 201, response.text
    return response.json()


def fetchSeats(client, header, diagramModelId, **params):
    response = client.get(
        EXECUTIVE + URL_BUS_SEAT_MODEL,
        headers=header,
        params={"bus_diagram_model_id": diagramModelId, **params},
    )
    assert response.status_code == 200, response.text
    return response.json()


def asLayout(seats):
    keys = (
        "space_type",
        "seat_number",
        "floor_number",
        "seat_type",
        "amenities",
        "reclinement_angle",
        "position",
    )
    return [{key: seat[key] for key in keys} for seat in seats]


def test_health_check(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "OK"


class TestExecutiveToken:
    def test_login_and_logout(self, client, adminHeader, auditEvents):
        response = client.get(EXECUTIVE + URL_EXECUTIVE_TOKEN, headers=adminHeader)
        assert response.status_code == 200
        assert "access_token" not in response.json()[0]
        assert all("access_token" not in event for event in auditEvents)

        response = client.delete(EXECUTIVE + URL_EXECUTIVE_TOKEN, headers=adminHeader)
        assert response.status_code == 204
        response = client.get(EXECUTIVE + URL_EXECUTIVE_TOKEN, headers=adminHeader)
        assert response.status_code == 401

    def test_login_records_the_platform(self, client, adminHeader, auditEvents):
        response = client.post(
            EXECUTIVE + URL_EXECUTIVE_TOKEN,
            data={
                "username": "admin",
                "password": "password",
                "platform_type": int(PlatformType.WEB),
            },
        )

        assert response.status_code == 201
        assert response.json()["platform_type"] == PlatformType.WEB
        event = auditEvents[-1]
        assert event["action"] == "login"
        assert event["platform_type"] == PlatformType.WEB
        assert event["session_id"] == response.json()["id"]
        assert "access_token" not in event

    def test_oldest_sessions_are_dropped(self, client, adminHeader):
        for _ in range(MAX_EXECUTIVE_TOKENS):
            header = login(client, "admin")

        response = client.get(EXECUTIVE + URL_EXECUTIVE_TOKEN, headers=header)
        assert len(response.json()) == MAX_EXECUTIVE_TOKENS
        response = client.get(EXECUTIVE + URL_EXECUTIVE_TOKEN, headers=adminHeader)
        assert response.status_code == 401

    def test_wrong_password(self, client, adminHeader):
        response = client.post(
            EXECUTIVE + URL_EXECUTIVE_TOKEN,
            data={"username": "admin", "password": "wrong"},
        )
        assert response.status_code == 401

    def test_missing_token(self, client):
        response = client.get(EXECUTIVE + URL_BUS_DIAGRAM_MODEL)
        assert response.status_code in (401, 403)


class TestBusDiagramModel:
    def test_create_generates_seats(self, client, adminHeader, auditEvents):
        diagramModel = createSeater(client, adminHeader)

        assert diagramModel["total_seats"] == 40
        seats = fetchSeats(client, adminHeader, diagramModel["id"])
        assert len(seats) == 40
        assert seats[0]["seat_number"] == "1"
        assert seats[0]["position"] == {"x": 0, "y": 1}
        assert auditEvents[-1]["_executive_id"] is not None

    def test_create_needs_permission(self, client, guestHeader):
        response = client.post(
            EXECUTIVE + URL_BUS_DIAGRAM_MODEL, headers=guestHeader, json=SEATER_TEMPLATE
        )
        assert response.status_code == 403

    def test_template_over_capacity(self, client, adminHeader):
        response = client.post(
            EXECUTIVE + URL_BUS_DIAGRAM_MODEL,
            headers=adminHeader,
            json={**SEATER_TEMPLATE, "max_capacity": 20},
        )
        assert response.status_code == 406

    def test_duplicate_name(self, client, adminHeader):
        createSeater(client, adminHeader)
        response = client.post(
            EXECUTIVE + URL_BUS_DIAGRAM_MODEL, headers=adminHeader, json=SEATER_TEMPLATE
        )
        assert response.status_code == 409

    def test_template_change_requires_regeneration(self, client, adminHeader):
        diagramModel = createSeater(client, adminHeader)
        seatsPerFloor = [
            {"floor_number": 1, "num_rows": 8, "seats_left": 2, "seats_right": 2}
        ]

        response = client.patch(
            EXECUTIVE + URL_BUS_DIAGRAM_MODEL,
            headers=adminHeader,
            json={"id": diagramModel["id"], "seats_per_floor": seatsPerFloor},
        )
        assert response.status_code == 406

        response = client.patch(
            EXECUTIVE + URL_BUS_DIAGRAM_MODEL,
            headers=adminHeader,
            json={
                "id": diagramModel["id"],
                "seats_per_floor": seatsPerFloor,
                "regenerate_seats": True,
            },
        )
        assert response.status_code == 200, response.text
        assert response.json()["total_seats"] == 32

    def test_rename(self, client, adminHeader):
        diagramModel = createSeater(client, adminHeader)

        response = client.patch(
            EXECUTIVE + URL_BUS_DIAGRAM_MODEL,
            headers=adminHeader,
            json={"id": diagramModel["id"], "name": "Renamed seater"},
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Renamed seater"
        assert response.json()["total_seats"] == 40

    def test_public_sees_active_models_only(self, client, adminHeader):
        diagramModel = createSeater(client, adminHeader)
        client.patch(
            EXECUTIVE + URL_BUS_DIAGRAM_MODEL,
            headers=adminHeader,
            json={"id": diagramModel["id"], "active": False},
        )

        response = client.get(PUBLIC + URL_BUS_DIAGRAM_MODEL)
        assert response.status_code == 200
        assert response.json() == []

    def test_delete(self, client, adminHeader):
        diagramModel = createSeater(client, adminHeader)

        response = client.request(
            "DELETE",
            EXECUTIVE + URL_BUS_DIAGRAM_MODEL,
            headers=adminHeader,
            data={"id": diagramModel["id"]},
        )
        assert response.status_code == 204
        response = client.get(EXECUTIVE + URL_BUS_DIAGRAM_MODEL, headers=adminHeader)
        assert response.json() == []


class TestSeatConfiguration:
    def test_swap_and_remove(self, client, adminHeader):
        diagramModel = createSeater(client, adminHeader)
        layout = asLayout(fetchSeats(client, adminHeader, diagramModel["id"]))
        layout[0]["seat_number"], layout[1]["seat_number"] = "2", "1"
        layout.pop()

        response = client.put(
            EXECUTIVE + URL_BUS_SEAT_MODEL,
            headers=adminHeader,
            json={"bus_diagram_model_id": diagramModel["id"], "spaces": layout},
        )

        assert response.status_code == 200, response.text
        assert response.json() == {
            "seats_created": 0,
            "seats_updated": 2,
            "seats_deactivated": 1,
            "total_active_seats": 39,
        }
        seats = fetchSeats(client, adminHeader, diagramModel["id"])
        assert [seat["seat_number"] for seat in seats[:2]] == ["2", "1"]
        inactive = fetchSeats(client, adminHeader, diagramModel["id"], active=False)
        assert [seat["seat_number"] for seat in inactive] == ["40"]

    def test_invalid_layout_is_rejected(self, client, adminHeader):
        diagramModel = createSeater(client, adminHeader)
        layout = asLayout(fetchSeats(client, adminHeader, diagramModel["id"]))
        layout[1]["seat_number"] = layout[0]["seat_number"]

        response = client.put(
            EXECUTIVE + URL_BUS_SEAT_MODEL,
            headers=adminHeader,
            json={"bus_diagram_model_id": diagramModel["id"], "spaces": layout},
        )
        assert response.status_code == 406

    def test_unknown_diagram_model(self, client, adminHeader):
        response = client.put(
            EXECUTIVE + URL_BUS_SEAT_MODEL,
            headers=adminHeader,
            json={"bus_diagram_model_id": 404, "spaces": []},
        )
        assert response.status_code == 404

    def test_customize_then_regenerate(self, client, adminHeader):
        diagramModel = createSeater(client, adminHeader)
        layout = asLayout(fetchSeats(client, adminHeader, diagramModel["id"]))
        layout[0]["space_type"] = SpaceType.STAIRS
        layout[1]["seat_type"] = SeatType.EXECUTIVE
        response = client.put(
            EXECUTIVE + URL_BUS_SEAT_MODEL,
            headers=adminHeader,
            json={"bus_diagram_model_id": diagramModel["id"], "spaces": layout},
        )
        assert response.json()["total_active_seats"] == 39

        response = client.post(
            EXECUTIVE + URL_BUS_SEAT_MODEL_REGENERATE,
            headers=adminHeader,
            data={"bus_diagram_model_id": diagramModel["id"]},
        )
        assert response.status_code == 201, response.text
        assert response.json()["seats_generated"] == 40
        assert response.json()["bus_diagram_model"]["total_seats"] == 40
        seats = fetchSeats(client, adminHeader, diagramModel["id"])
        assert {seat["seat_type"] for seat in seats} == {SeatType.REGULAR}

    def test_public_seat_map(self, client, adminHeader):
        diagramModel = createSeater(client, adminHeader)

        response = client.get(
            PUBLIC + URL_BUS_SEAT_MODEL,
            params={"bus_diagram_model_id": diagramModel["id"], "active": False},
        )
        assert response.status_code == 200
        assert len(response.json()) == 40

    def test_update_needs_permission(self, client, adminHeader, guestHeader):
        diagramModel = createSeater(client, adminHeader)
        response = client.put(
            EXECUTIVE + URL_BUS_SEAT_MODEL,
            headers=guestHeader,
            json={"bus_diagram_model_id": diagramModel["id"], "spaces": []},
        )
        assert response.status_code == 403


class TestZone:
    def test_create_and_overlap(self, client, adminHeader):
        diagramModel = createSeater(client, adminHeader)
        zone = {
            "bus_diagram_model_id": diagramModel["id"],
            "name": "Front",
            "row_numbers": [3, 1, 2],
            "price_multiplier": "1.25",
        }
        response = client.post(
            EXECUTIVE + URL_BUS_DIAGRAM_MODEL_ZONE, headers=adminHeader, json=zone
        )
        assert response.status_code == 201, response.text
        assert response.json()["row_numbers"] == [1, 2, 3]

        response = client.post(
            EXECUTIVE + URL_BUS_DIAGRAM_MODEL_ZONE,
            headers=adminHeader,
            json={**zone, "name": "Middle", "row_numbers": [3, 4]},
        )
        assert response.status_code == 406

    def test_rows_outside_template(self, client, adminHeader):
        diagramModel = createSeater(client, adminHeader)
        response = client.post(
            EXECUTIVE + URL_BUS_DIAGRAM_MODEL_ZONE,
            headers=adminHeader,
            json={
                "bus_diagram_model_id": diagramModel["id"],
                "name": "Rear",
                "row_numbers": [10, 11],
            },
        )
        assert response.status_code == 406

    def test_update_rows(self, client, adminHeader):
        diagramModel = createSeater(client, adminHeader)
        response = client.post(
            EXECUTIVE + URL_BUS_DIAGRAM_MODEL_ZONE,
            headers=adminHeader,
            json={
                "bus_diagram_model_id": diagramModel["id"],
                "name": "Front",
                "row_numbers": [1, 2],
            },
        )
        zoneId = response.json()["id"]

        response = client.patch(
            EXECUTIVE + URL_BUS_DIAGRAM_MODEL_ZONE,
            headers=adminHeader,
            json={"id": zoneId, "row_numbers": [2, 3]},
        )
        assert response.status_code == 200, response.text
        assert response.json()["row_numbers"] == [2, 3]


class TestAmenity:
    def test_crud(self, client, adminHeader):
        response = client.post(
            EXECUTIVE + URL_AMENITY,
            headers=adminHeader,
            data={"name": "USB charger"},
        )
        assert response.status_code == 201
        amenityId = response.json()["id"]

        response = client.patch(
            EXECUTIVE + URL_AMENITY,
            headers=adminHeader,
            data={"id": amenityId, "active": False},
        )
        assert response.status_code == 200
        assert response.json()["active"] is False
        assert client.get(PUBLIC + URL_AMENITY).json() == []

        response = client.request(
            "DELETE", EXECUTIVE + URL_AMENITY, headers=adminHeader, data={"id": amenityId}
        )
        assert response.status_code == 204

    def test_seat_with_unknown_amenity(self, client, adminHeader):
        diagramModel = createSeater(client, adminHeader)
        layout = asLayout(fetchSeats(client, adminHeader, diagramModel["id"]))
        layout[0]["amenities"] = [99]

        response = client.put(
            EXECUTIVE + URL_BUS_SEAT_MODEL,
            headers=adminHeader,
            json={"bus_diagram_model_id": diagramModel["id"], "spaces": layout},
        )
        assert response.status_code == 406
