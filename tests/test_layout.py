"""
Tests for seat layout generation and floor template validation.
"""

import pytest
from types import SimpleNamespace

from inventory.src import exceptions, layout
from inventory.src.constants import DEFAULT_RECLINEMENT_ANGLE
from inventory.src.enums import SeatType, SpaceType


def makeDiagramModel(numFloors, seatsPerFloor, id=1):
    return SimpleNamespace(id=id, num_floors=numFloors, seats_per_floor=seatsPerFloor)


FLOOR_2X2 = {"floor_number": 1, "num_rows": 10, "seats_left": 2, "seats_right": 2}


class TestGenerateAllSpaces:
    def test_single_floor_seater_numbers_forty_seats(self):
        spaces = layout.generateAllSpaces(makeDiagramModel(1, [FLOOR_2X2]))

        assert len(spaces) == 40
        assert [space["seat_number"] for space in spaces] == [
            str(number) for number in range(1, 41)
        ]

    def test_aisle_column_is_skipped(self):
        spaces = layout.generateAllSpaces(makeDiagramModel(1, [FLOOR_2X2]))

        columns = {space["position_x"] for space in spaces}
        assert columns == {0, 1, 3, 4}

    def test_numbering_runs_row_by_row_left_to_right(self):
        spaces = layout.generateAllSpaces(makeDiagramModel(1, [FLOOR_2X2]))

        firstRow = [(s["position_x"], s["seat_number"]) for s in spaces[:4]]
        assert firstRow == [(0, "1"), (1, "2"), (3, "3"), (4, "4")]
        assert spaces[4]["position_y"] == 2

    def test_numbering_continues_across_floors(self):
        floors = [
            {"floor_number": 1, "num_rows": 2, "seats_left": 1, "seats_right": 2},
            {"floor_number": 2, "num_rows": 2, "seats_left": 1, "seats_right": 1},
        ]
        spaces = layout.generateAllSpaces(makeDiagramModel(2, floors))

        upper = [s for s in spaces if s["floor_number"] == 2]
        assert len(spaces) == 10
        assert [s["seat_number"] for s in upper] == ["7", "8", "9", "10"]

    def test_generated_seats_get_defaults(self):
        space = layout.generateAllSpaces(makeDiagramModel(1, [FLOOR_2X2]))[0]

        assert space["space_type"] == SpaceType.SEAT
        assert space["seat_type"] == SeatType.REGULAR
        assert space["reclinement_angle"] == DEFAULT_RECLINEMENT_ANGLE
        assert space["amenities"] == []
        assert space["active"] is True
        assert space["bus_diagram_model_id"] == 1

    def test_meta_marks_window_and_legroom_seats(self):
        spaces = layout.generateAllSpaces(makeDiagramModel(1, [FLOOR_2X2]))
        byPosition = {(s["position_x"], s["position_y"]): s["meta"] for s in spaces}

        assert byPosition[(0, 1)] == {
            "rowIndex": 0,
            "colIndex": 0,
            "isWindow": True,
            "isLegroom": True,
        }
        assert byPosition[(4, 5)]["isWindow"] is True
        assert byPosition[(1, 5)]["isWindow"] is False
        assert byPosition[(3, 2)]["isLegroom"] is False

    def test_missing_floor_configuration(self):
        with pytest.raises(exceptions.ValidationError):
            layout.generateAllSpaces(makeDiagramModel(2, [FLOOR_2X2]))

    @pytest.mark.parametrize("numFloors", [0, None, True])
    def test_invalid_number_of_floors(self, numFloors):
        with pytest.raises(exceptions.ValidationError):
            layout.generateAllSpaces(makeDiagramModel(numFloors, [FLOOR_2X2]))

    @pytest.mark.parametrize("key", ["num_rows", "seats_left", "seats_right"])
    def test_non_positive_floor_values(self, key):
        with pytest.raises(exceptions.ValidationError):
            layout.generateAllSpaces(makeDiagramModel(1, [{**FLOOR_2X2, key: 0}]))

    def test_missing_floor_value(self):
        floor = {k: v for k, v in FLOOR_2X2.items() if k != "seats_right"}
        with pytest.raises(exceptions.ValidationError):
            layout.generateAllSpaces(makeDiagramModel(1, [floor]))


class TestMakeSpacePayload:
    def test_non_seat_spaces_carry_no_seat_attributes(self):
        payload = layout.makeSpacePayload(
            1, "9", 1, {"x": 2, "y": 3}, FLOOR_2X2, SpaceType.HALLWAY
        )

        assert payload["seat_number"] is None
        assert payload["seat_type"] is None
        assert payload["reclinement_angle"] is None
        assert payload["meta"] == {"rowIndex": 2, "colIndex": 2}


class TestValidateDiagramTemplate:
    def test_valid_template(self):
        layout.validateDiagramTemplate(1, [FLOOR_2X2], 40)

    def test_seats_exceed_capacity(self):
        with pytest.raises(exceptions.ValidationError):
            layout.validateDiagramTemplate(1, [FLOOR_2X2], 39)

    def test_duplicate_floor(self):
        with pytest.raises(exceptions.ValidationError):
            layout.validateDiagramTemplate(2, [FLOOR_2X2, FLOOR_2X2], 100)

    def test_extra_floor(self):
        upper = {**FLOOR_2X2, "floor_number": 2}
        with pytest.raises(exceptions.ValidationError):
            layout.validateDiagramTemplate(1, [FLOOR_2X2, upper], 100)

    def test_too_many_floors(self):
        floors = [{**FLOOR_2X2, "floor_number": n, "num_rows": 1} for n in (1, 2, 3)]
        with pytest.raises(exceptions.ValidationError):
            layout.validateDiagramTemplate(3, floors, 100)

    def test_too_many_rows(self):
        with pytest.raises(exceptions.ValidationError):
            layout.validateDiagramTemplate(
                1, [{**FLOOR_2X2, "num_rows": 31, "seats_right": 1}], 120
            )

    def test_too_many_seats_per_side(self):
        with pytest.raises(exceptions.ValidationError):
            layout.validateDiagramTemplate(
                1, [{**FLOOR_2X2, "num_rows": 1, "seats_left": 5}], 120
            )

    def test_count_template_seats(self):
        upper = {"floor_number": 2, "num_rows": 5, "seats_left": 1, "seats_right": 1}
        assert layout.countTemplateSeats([FLOOR_2X2, upper]) == 50
