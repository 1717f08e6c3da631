from app.client.api import ApiError, FleetApiClient, SessionExpiredError
from app.client.session import ClientSession

__all__ = ["ApiError", "ClientSession", "FleetApiClient", "SessionExpiredError"]
