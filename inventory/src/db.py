from secrets import token_hex
from sqlalchemy import (
    JSON,
    TEXT,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    create_engine,
    func,
    text,
)
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker
from sqlalchemy.dialects.postgresql import JSONB

from inventory.src.constants import (
    DEFAULT_IS_ACTIVE,
    PSQL_DB_DRIVER,
    PSQL_DB_HOST,
    PSQL_DB_PASSWORD,
    PSQL_DB_NAME,
    PSQL_DB_PORT,
    PSQL_DB_USERNAME,
)
from inventory.src.enums import (
    AccountStatus,
    AmenityCategory,
    PlatformType,
    SpaceType,
)


# Global DBMS variables
dbURL = f"{PSQL_DB_DRIVER}://{PSQL_DB_USERNAME}:{PSQL_DB_PASSWORD}@{PSQL_DB_HOST}:{PSQL_DB_PORT}/{PSQL_DB_NAME}"
engine = create_engine(url=dbURL, echo=False)
sessionMaker = sessionmaker(bind=engine, expire_on_commit=False)
ORMbase = declarative_base()

# JSONB on PostgreSQL, plain JSON on every other dialect
JSONType = JSON().with_variant(JSONB(), "postgresql")

# Only active SEAT spaces take part in the seat number uniqueness
ACTIVE_SEAT_CLAUSE = text(f"active AND space_type = {SpaceType.SEAT.value}")


# ----------------------------------- General DB Models ---------------------------------------#
class ExecutiveRole(ORMbase):
    """
    Represents a predefined role assigned to executives of the operations team,
    defining what actions they are permitted to perform on the inventory.

    Each role can be assigned to one or more executive accounts.

    Columns:
        id (Integer):
            Primary key. Unique identifier for the role.

        name (String(32)):
            Name of the role.
            Must be unique and not null.

        manage_token (Boolean):
            Whether this role permits listing and deletion of executive tokens.

        create_diagram_model (Boolean):
            Whether this role permits the creation of bus diagram models.

        update_diagram_model (Boolean):
            Whether this role permits editing bus diagram models, their zones
            and their seat configuration.

        delete_diagram_model (Boolean):
            Whether this role permits deletion of bus diagram models.

        create_amenity (Boolean):
            Whether this role permits the creation of amenities.

        update_amenity (Boolean):
            Whether this role permits editing amenities.

        delete_amenity (Boolean):
            Whether this role permits deletion of amenities.

        updated_on (DateTime):
            Timestamp automatically updated whenever the role record is modified.

        created_on (DateTime):
            Timestamp indicating when the role was initially created.
    """

    __tablename__ = "executive_role"

    id = Column(Integer, primary_key=True)
    name = Column(String(32), nullable=False, unique=True)
    # Token management permission
    manage_token = Column(Boolean, nullable=False)
    # Diagram model management permission
    create_diagram_model = Column(Boolean, nullable=False)
    update_diagram_model = Column(Boolean, nullable=False)
    delete_diagram_model = Column(Boolean, nullable=False)
    # Amenity management permission
    create_amenity = Column(Boolean, nullable=False)
    update_amenity = Column(Boolean, nullable=False)
    delete_amenity = Column(Boolean, nullable=False)
    # Metadata
    updated_on = Column(DateTime(timezone=True), onupdate=func.now())
    created_on = Column(DateTime(timezone=True), nullable=False, default=func.now())


class Executive(ORMbase):
    """
    Represents an executive user of the operations team.

    This model stores authentication credentials, profile details, and status
    metadata necessary to manage access to the inventory.

    Columns:
        id (Integer):
            Primary key. Unique identifier for the executive.

        username (String(32)):
            Unique login name. Must not be null.

        password (TEXT):
            Argon2 hash of the password. Must not be null.

        full_name (TEXT):
            Full name of the executive.

        designation (TEXT):
            Job title of the executive.

        status (Integer):
            Account status, defaults to `AccountStatus.ACTIVE`.

        phone_number (TEXT):
            Contact phone number.

        email_id (TEXT):
            Contact email address.

        updated_on (DateTime):
            Timestamp automatically updated whenever the record is modified.

        created_on (DateTime):
            Timestamp indicating when the record was created.
    """

    __tablename__ = "executive"

    id = Column(Integer, primary_key=True)
    username = Column(String(32), nullable=False, unique=True)
    password = Column(TEXT, nullable=False)
    full_name = Column(TEXT)
    designation = Column(TEXT)
    status = Column(Integer, nullable=False, default=AccountStatus.ACTIVE)
    # Contact details
    phone_number = Column(TEXT)
    email_id = Column(TEXT)
    # Metadata
    updated_on = Column(DateTime(timezone=True), onupdate=func.now())
    created_on = Column(DateTime(timezone=True), nullable=False, default=func.now())


class ExecutiveRoleMap(ORMbase):
    """
    Represents the mapping between executives and their assigned roles.

    Columns:
        id (Integer):
            Primary key.

        role_id (Integer):
            Foreign key to `executive_role.id`. Cascades on delete.

        executive_id (Integer):
            Foreign key to `executive.id`. Cascades on delete.
            An executive has at most one role.

        updated_on (DateTime):
            Timestamp automatically updated whenever the record is modified.

        created_on (DateTime):
            Timestamp indicating when the mapping was created.
    """

    __tablename__ = "executive_role_map"

    id = Column(Integer, primary_key=True)
    role_id = Column(
        Integer, ForeignKey("executive_role.id", ondelete="CASCADE"), nullable=False
    )
    executive_id = Column(
        Integer,
        ForeignKey("executive.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    # Metadata
    updated_on = Column(DateTime(timezone=True), onupdate=func.now())
    created_on = Column(DateTime(timezone=True), nullable=False, default=func.now())


class ExecutiveToken(ORMbase):
    """
    Represents an authentication token issued to an executive.

    Columns:
        id (Integer):
            Primary key.

        executive_id (Integer):
            Foreign key to `executive.id`. Cascades on delete.

        access_token (String(64)):
            Random hex bearer token. Unique and not null.

        expires_in (Integer):
            Validity of the token in seconds.

        expires_at (DateTime):
            Absolute expiry timestamp of the token.

        platform_type (Integer):
            Client platform, defaults to `PlatformType.OTHER`.

        client_details (TEXT):
            Free-form description of the client.

        updated_on (DateTime):
            Timestamp automatically updated whenever the record is modified.

        created_on (DateTime):
            Timestamp indicating when the token was issued.
    """

    __tablename__ = "executive_token"

    id = Column(Integer, primary_key=True)
    executive_id = Column(
        Integer,
        ForeignKey("executive.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    access_token = Column(
        String(64), unique=True, nullable=False, default=lambda: token_hex(32)
    )
    expires_in = Column(Integer, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    # Device related details
    platform_type = Column(Integer, default=PlatformType.OTHER)
    client_details = Column(TEXT)
    # Metadata
    updated_on = Column(DateTime(timezone=True), onupdate=func.now())
    created_on = Column(DateTime(timezone=True), nullable=False, default=func.now())


# ----------------------------------- Fleet DB Models -----------------------------------------#
class Amenity(ORMbase):
    """
    Represents an amenity that can be offered on a seat (USB charger,
    reading light, footrest and so on).

    Seats reference amenities by ID inside their `amenities` JSON list.

    Columns:
        id (Integer):
            Primary key.

        name (String(32)):
            Unique display name of the amenity.

        category (Integer):
            Amenity category, defaults to `AmenityCategory.OTHER`.

        description (TEXT):
            Optional description.

        active (Boolean):
            Whether the amenity can still be assigned.

        updated_on (DateTime):
            Timestamp automatically updated whenever the record is modified.

        created_on (DateTime):
            Timestamp indicating when the amenity was created.
    """

    __tablename__ = "amenity"

    id = Column(Integer, primary_key=True)
    name = Column(String(32), nullable=False, unique=True)
    category = Column(Integer, nullable=False, default=AmenityCategory.OTHER)
    description = Column(TEXT)
    active = Column(Boolean, nullable=False, default=True)
    # Metadata
    updated_on = Column(DateTime(timezone=True), onupdate=func.now())
    created_on = Column(DateTime(timezone=True), nullable=False, default=func.now())


class BusDiagramModel(ORMbase):
    """
    Represents a bus diagram model, the floor based template a bus seat
    layout is generated from.

    The model exclusively owns its spaces (`BusSeatModel`) and zones
    (`BusDiagramModelZone`); deleting it cascades to both.

    Columns:
        id (Integer):
            Primary key.

        name (String(64)):
            Unique name of the template. Indexed for lookup.

        description (TEXT):
            Optional description.

        max_capacity (Integer):
            Maximum passenger capacity of the bus. Must not be null.

        num_floors (Integer):
            Number of floors (decks). Must not be null.

        seats_per_floor (JSON):
            One entry per floor with the keys `floor_number`, `num_rows`,
            `seats_left` and `seats_right`.

        total_seats (Integer):
            Cached count of active SEAT spaces. Recomputed after every
            seat configuration change, never maintained incrementally.

        is_factory_default (Boolean):
            Whether the template ships as a factory default.

        active (Boolean):
            Whether the template can be used for new buses.

        updated_on (DateTime):
            Timestamp automatically updated whenever the record is modified.

        created_on (DateTime):
            Timestamp indicating when the template was created.
    """

    __tablename__ = "bus_diagram_model"

    id = Column(Integer, primary_key=True)
    name = Column(String(64), nullable=False, unique=True, index=True)
    description = Column(TEXT)
    max_capacity = Column(Integer, nullable=False)
    num_floors = Column(Integer, nullable=False)
    seats_per_floor = Column(JSONType, nullable=False)
    total_seats = Column(Integer, nullable=False, default=0)
    is_factory_default = Column(Boolean, nullable=False, default=True)
    active = Column(Boolean, nullable=False, default=True)
    # Metadata
    updated_on = Column(DateTime(timezone=True), onupdate=func.now())
    created_on = Column(DateTime(timezone=True), nullable=False, default=func.now())


class BusDiagramModelZone(ORMbase):
    """
    Represents a pricing zone of a bus diagram model, a named set of rows
    sharing a price multiplier.

    Columns:
        id (Integer):
            Primary key.

        bus_diagram_model_id (Integer):
            Foreign key to `bus_diagram_model.id`. Cascades on delete.

        name (String(32)):
            Zone name, unique within the diagram model.

        row_numbers (JSON):
            List of 1-based row numbers covered by the zone.

        price_multiplier (Numeric(4, 2)):
            Multiplier applied to the base fare for seats in the zone.

        updated_on (DateTime):
            Timestamp automatically updated whenever the record is modified.

        created_on (DateTime):
            Timestamp indicating when the zone was created.
    """

    __tablename__ = "bus_diagram_model_zone"
    __table_args__ = (UniqueConstraint("bus_diagram_model_id", "name"),)

    id = Column(Integer, primary_key=True)
    bus_diagram_model_id = Column(
        Integer,
        ForeignKey("bus_diagram_model.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(32), nullable=False)
    row_numbers = Column(JSONType, nullable=False)
    price_multiplier = Column(Numeric(4, 2), nullable=False, default=1)
    # Metadata
    updated_on = Column(DateTime(timezone=True), onupdate=func.now())
    created_on = Column(DateTime(timezone=True), nullable=False, default=func.now())


class BusSeatModel(ORMbase):
    """
    Represents a single space of a bus diagram model: a seat, stairs,
    hallway, bathroom or an empty placeholder.

    A space is identified across edits by its position
    (`floor_number`, `position_x`, `position_y`), never by its seat number,
    which is mutable business data. Spaces removed from a configuration are
    deactivated, not deleted, so historical seat numbers stay resolvable.

    Columns:
        id (Integer):
            Primary key.

        bus_diagram_model_id (Integer):
            Foreign key to `bus_diagram_model.id`. Immutable. Cascades on delete.

        space_type (Integer):
            Type of the space (`SpaceType`). Defaults to `SpaceType.SEAT`.

        seat_number (String(32)):
            Seat label. Required for SEAT spaces, null otherwise.
            Unique per diagram model among active SEAT spaces only.

        floor_number (Integer):
            1-based floor (deck) number.

        seat_type (Integer):
            Seat category (`SeatType`). SEAT spaces only.

        amenities (JSON):
            List of amenity IDs. Empty for non SEAT spaces.

        reclinement_angle (Integer):
            Reclinement angle in degrees. SEAT spaces only.

        position_x (Integer):
            0-based column of the space within the floor. The aisle column is
            `seats_left` of the floor configuration.

        position_y (Integer):
            1-based row of the space within the floor.

        meta (JSON):
            Free-form extension attributes (`rowIndex`, `colIndex`,
            `isWindow`, `isLegroom`, ...).

        active (Boolean):
            Whether the space is part of the current configuration.

        updated_on (DateTime):
            Timestamp automatically updated whenever the record is modified.

        created_on (DateTime):
            Timestamp indicating when the space was created.
    """

    __tablename__ = "bus_seat_model"
    __table_args__ = (
        Index(
            "uq_bus_seat_model_active_seat_number",
            "bus_diagram_model_id",
            "seat_number",
            unique=True,
            postgresql_where=ACTIVE_SEAT_CLAUSE,
            sqlite_where=ACTIVE_SEAT_CLAUSE,
        ),
        Index(
            "ix_bus_seat_model_position",
            "bus_diagram_model_id",
            "floor_number",
            "position_x",
            "position_y",
        ),
    )

    id = Column(Integer, primary_key=True)
    bus_diagram_model_id = Column(
        Integer,
        ForeignKey("bus_diagram_model.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    space_type = Column(Integer, nullable=False, default=SpaceType.SEAT)
    seat_number = Column(String(32))
    floor_number = Column(Integer, nullable=False, default=1)
    seat_type = Column(Integer)
    amenities = Column(JSONType, nullable=False, default=list)
    reclinement_angle = Column(Integer)
    position_x = Column(Integer, nullable=False)
    position_y = Column(Integer, nullable=False)
    meta = Column(JSONType, nullable=False, default=dict)
    active = Column(Boolean, nullable=False, default=DEFAULT_IS_ACTIVE)
    # Metadata
    updated_on = Column(DateTime(timezone=True), onupdate=func.now())
    created_on = Column(DateTime(timezone=True), nullable=False, default=func.now())

    @property
    def position(self) -> dict:
        return {"x": self.position_x, "y": self.position_y}
