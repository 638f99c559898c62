from types import SimpleNamespace

from inventory.src import reconciler, schemas
from inventory.src.enums import SeatType, SpaceType


def snapshot(**values):
    defaults = {
        "id": 7,
        "bus_diagram_model_id": 1,
        "space_type": SpaceType.SEAT,
        "seat_number": "5",
        "floor_number": 1,
        "seat_type": SeatType.REGULAR,
        "amenities": [1],
        "reclinement_angle": 120,
        "position_x": 0,
        "position_y": 2,
        "meta": {"rowIndex": 1, "colIndex": 0, "isWindow": True, "isLegroom": False},
        "active": True,
    }
    return schemas.SpaceSnapshot(**{**defaults, **values})


def incoming(**values):
    defaults = {
        "seat_number": "5",
        "floor_number": 1,
        "seat_type": SeatType.REGULAR,
        "position": schemas.Position(x=0, y=2),
    }
    return schemas.Space(**{**defaults, **values})


def test_position_keys_agree():
    assert reconciler.incomingPositionKey(incoming()) == "1:0:2"
    assert reconciler.storedPositionKey(snapshot()) == "1:0:2"


def test_temporary_seat_number_never_matches_a_real_one():
    assert reconciler.temporarySeatNumber(42) == "#TMP-42"


class TestNeedsSpaceUpdate:
    def test_identical_space(self):
        assert reconciler.needsSpaceUpdate(incoming(), snapshot()) is False

    def test_omitted_optional_attributes_are_not_changes(self):
        space = incoming(amenities=None, reclinement_angle=None)
        assert reconciler.needsSpaceUpdate(space, snapshot()) is False

    def test_renumbered_seat(self):
        assert reconciler.needsSpaceUpdate(incoming(seat_number="5A"), snapshot())

    def test_changed_amenities(self):
        assert reconciler.needsSpaceUpdate(incoming(amenities=[]), snapshot())

    def test_changed_type(self):
        space = incoming(space_type=SpaceType.STAIRS)
        assert reconciler.needsSpaceUpdate(space, snapshot())

    def test_seat_attributes_of_non_seats_are_ignored(self):
        stored = snapshot(
            space_type=SpaceType.EMPTY, seat_number=None, seat_type=None
        )
        space = incoming(space_type=SpaceType.EMPTY, seat_number="9")
        assert reconciler.needsSpaceUpdate(space, stored) is False

    def test_deactivation_request(self):
        assert reconciler.needsSpaceUpdate(incoming(active=False), snapshot())


class TestMakeSpaceUpdateData:
    def test_seat_to_bathroom_clears_seat_attributes(self, diagramModel):
        values = reconciler.makeSpaceUpdateData(
            incoming(space_type=SpaceType.BATHROOM), snapshot(), diagramModel
        )

        assert values["seat_number"] is None
        assert values["seat_type"] is None
        assert values["amenities"] == []
        assert values["meta"] == {"rowIndex": 1, "colIndex": 0}

    def test_seat_update_keeps_omitted_attributes(self, diagramModel):
        values = reconciler.makeSpaceUpdateData(
            incoming(seat_number="5A", amenities=None), snapshot(), diagramModel
        )

        assert values["seat_number"] == "5A"
        assert "amenities" not in values
        assert "reclinement_angle" not in values
        assert "meta" not in values


def test_index_prefers_the_active_row_at_a_position():
    def row(id, active, x=0):
        return SimpleNamespace(
            id=id, active=active, floor_number=1, position_x=x, position_y=1
        )

    indexed = reconciler.indexSpaces(
        [row(1, False), row(2, True), row(3, False), row(4, False, x=1)]
    )

    assert indexed["1:0:1"].id == 2
    assert indexed["1:1:1"].id == 4
