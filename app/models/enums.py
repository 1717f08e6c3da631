from enum import Enum


class UserRole(str, Enum):
    ADMIN = "Admin"
    USER = "User"


class VehicleStatus(str, Enum):
    AVAILABLE = "Available"
    IN_USE = "InUse"
    MAINTENANCE = "Maintenance"
    RETIRED = "Retired"
