from app.models.enums import UserRole, VehicleStatus
from app.models.user import User
from app.models.vehicle import Vehicle

__all__ = ["User", "UserRole", "Vehicle", "VehicleStatus"]
