"""
Tests for seat configuration payload and zone row validation.
"""

import pytest

from inventory.src import exceptions, schemas, validators
from inventory.src.db import Amenity, BusDiagramModelZone
from inventory.src.enums import SeatType, SpaceType


def seat(number, x, y, floorNumber=1, **values):
    return schemas.Space(
        seat_number=number,
        seat_type=SeatType.REGULAR,
        floor_number=floorNumber,
        position=schemas.Position(x=x, y=y),
        **values,
    )


class TestSeatConfigurationPayload:
    def test_valid_payload(self, diagramModel):
        spaces = [
            seat("1A", 0, 1),
            seat("1B", 1, 1),
            schemas.Space(
                space_type=SpaceType.HALLWAY,
                floor_number=1,
                position=schemas.Position(x=2, y=1),
            ),
        ]
        validators.seatConfigurationPayload(spaces, diagramModel)

    def test_missing_position(self):
        space = schemas.Space(seat_number="1", seat_type=SeatType.REGULAR, floor_number=1)
        with pytest.raises(exceptions.ValidationError):
            validators.seatConfigurationPayload([space])

    def test_missing_floor(self):
        space = schemas.Space(
            seat_number="1",
            seat_type=SeatType.REGULAR,
            position=schemas.Position(x=0, y=1),
        )
        with pytest.raises(exceptions.ValidationError):
            validators.seatConfigurationPayload([space])

    def test_seat_without_number(self):
        with pytest.raises(exceptions.ValidationError):
            validators.seatConfigurationPayload([seat(None, 0, 1)])

    def test_seat_without_type(self):
        space = schemas.Space(
            seat_number="1", floor_number=1, position=schemas.Position(x=0, y=1)
        )
        with pytest.raises(exceptions.ValidationError):
            validators.seatConfigurationPayload([space])

    @pytest.mark.parametrize("number", ["#TMP-1", "-1", "A B", "123456789"])
    def test_malformed_seat_number(self, number):
        with pytest.raises(exceptions.ValidationError):
            validators.seatConfigurationPayload([seat(number, 0, 1)])

    def test_duplicate_position(self):
        with pytest.raises(exceptions.ValidationError):
            validators.seatConfigurationPayload([seat("1", 0, 1), seat("2", 0, 1)])

    def test_same_position_on_other_floor_is_allowed(self):
        validators.seatConfigurationPayload(
            [seat("1", 0, 1), seat("2", 0, 1, floorNumber=2)]
        )

    def test_duplicate_seat_number(self):
        with pytest.raises(exceptions.ValidationError):
            validators.seatConfigurationPayload([seat("1", 0, 1), seat("1", 1, 1)])

    def test_non_seats_need_no_number(self):
        spaces = [
            schemas.Space(
                space_type=SpaceType.STAIRS,
                floor_number=1,
                position=schemas.Position(x=x, y=1),
            )
            for x in (0, 1)
        ]
        validators.seatConfigurationPayload(spaces)

    @pytest.mark.parametrize(
        "space",
        [
            seat("1", 0, 11),
            seat("1", 0, 0),
            seat("1", 5, 1),
            seat("1", -1, 1),
            seat("1", 0, 1, floorNumber=2),
        ],
    )
    def test_position_outside_template(self, diagramModel, space):
        with pytest.raises(exceptions.ValidationError):
            validators.seatConfigurationPayload([space], diagramModel)

    def test_aisle_column_is_a_legal_position(self, diagramModel):
        validators.seatConfigurationPayload([seat("41", 2, 10)], diagramModel)


class TestSpaceAmenities:
    def test_known_amenities(self, session):
        amenity = Amenity(name="USB charger")
        session.add(amenity)
        session.commit()

        validators.spaceAmenities([seat("1", 0, 1, amenities=[amenity.id])], session)

    def test_unknown_amenities(self, session):
        with pytest.raises(exceptions.ValidationError):
            validators.spaceAmenities([seat("1", 0, 1, amenities=[99])], session)

    def test_amenities_of_non_seats_are_ignored(self, session):
        space = schemas.Space(
            space_type=SpaceType.EMPTY,
            floor_number=1,
            position=schemas.Position(x=0, y=1),
            amenities=[99],
        )
        validators.spaceAmenities([space], session)


class TestZoneRows:
    def test_valid_rows(self, session, diagramModel):
        validators.zoneRows([1, 2, 3], diagramModel, session)

    @pytest.mark.parametrize("rows", [[], [1, 1], [0], [11]])
    def test_invalid_rows(self, session, diagramModel, rows):
        with pytest.raises(exceptions.ValidationError):
            validators.zoneRows(rows, diagramModel, session)

    def test_overlapping_rows(self, session, diagramModel):
        zone = BusDiagramModelZone(
            bus_diagram_model_id=diagramModel.id, name="Front", row_numbers=[1, 2]
        )
        session.add(zone)
        session.commit()

        with pytest.raises(exceptions.OverlappingZone):
            validators.zoneRows([2, 3], diagramModel, session)
        # The zone being edited does not overlap itself
        validators.zoneRows([2, 3], diagramModel, session, zone.id)
