from enum import IntEnum


class AppID(IntEnum):
    EXECUTIVE = 1
    PUBLIC = 2


class OrderIn(IntEnum):
    ASC = 1
    DESC = 2


class AccountStatus(IntEnum):
    ACTIVE = 1
    SUSPENDED = 2


class PlatformType(IntEnum):
    OTHER = 1
    WEB = 2
    NATIVE = 3
    SERVER = 4


class SpaceType(IntEnum):
    SEAT = 1
    STAIRS = 2
    HALLWAY = 3
    BATHROOM = 4
    EMPTY = 5


class SeatType(IntEnum):
    REGULAR = 1
    PREMIUM = 2
    VIP = 3
    EXECUTIVE = 4
    SLEEPER = 5
    SEMI_BED = 6


class AmenityCategory(IntEnum):
    OTHER = 1
    COMFORT = 2
    TECHNOLOGY = 3
    ACCESSIBILITY = 4
    SERVICE = 5
