import logging
from typing import Any

import httpx

from app.client.session import ClientSession

logger = logging.getLogger(__name__)

VEHICLE_FIELDS = (
    "license_plate", "brand", "model", "year", "color", "vin_number",
    "engine_type", "fuel_type", "mileage", "status", "notes",
)


class ApiError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class SessionExpiredError(ApiError):
    """Server rejected the bearer token; the session has been cleared."""


class FleetApiClient:
    """Async client for the fleet vehicle API.

    Event hooks attach the session's bearer token to every request and clear
    the session whenever a response comes back 401.
    """

    def __init__(
        self,
        base_url: str,
        session: ClientSession | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        api_prefix: str = "/api",
    ):
        self.session = session or ClientSession()
        self.base_url = base_url.rstrip("/")
        self.api_prefix = api_prefix
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            transport=transport,
            headers={"Accept": "application/json"},
            event_hooks={
                "request": [self._attach_token],
                "response": [self._clear_on_unauthorized],
            },
        )

    async def __aenter__(self) -> "FleetApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _attach_token(self, request: httpx.Request) -> None:
        if self.session.token:
            request.headers["Authorization"] = f"Bearer {self.session.token}"

    async def _clear_on_unauthorized(self, response: httpx.Response) -> None:
        if response.status_code == 401 and self.session.token:
            logger.info("Session for '%s' rejected by server, clearing", self.session.username)
            self.session.clear()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        response = await self._http.request(method, f"{self.api_prefix}{path}", **kwargs)
        if response.status_code == 204:
            return None

        try:
            body = response.json()
        except ValueError:
            body = {}
        message = body.get("message") if isinstance(body, dict) else None

        if response.status_code == 401 and "Authorization" in response.request.headers:
            raise SessionExpiredError(401, message or "Authentication required.")
        if response.is_error:
            raise ApiError(response.status_code, message or response.reason_phrase)
        return body.get("data")

    # ---- auth ----

    async def register(self, username: str, password: str, full_name: str | None = None) -> dict:
        payload = {"username": username, "password": password}
        if full_name:
            payload["fullName"] = full_name
        bundle = await self._request("POST", "/auth/register", json=payload)
        self.session.store(bundle)
        return bundle

    async def login(self, username: str, password: str) -> dict:
        bundle = await self._request("POST", "/auth/login", json={"username": username, "password": password})
        self.session.store(bundle)
        return bundle

    def logout(self) -> None:
        self.session.clear()

    async def me(self) -> dict:
        return await self._request("GET", "/auth/me")

    # ---- vehicles ----

    async def list_vehicles(
        self,
        search: str | None = None,
        status: str | None = None,
        brand: str | None = None,
        page: int = 1,
        page_size: int = 10,
        sort_by: str = "id",
        sort_direction: str = "asc",
    ) -> dict:
        params = {
            "page": page,
            "pageSize": page_size,
            "sortBy": sort_by,
            "sortDirection": sort_direction,
        }
        if search:
            params["search"] = search
        if status:
            params["status"] = status
        if brand:
            params["brand"] = brand
        return await self._request("GET", "/vehicles", params=params)

    async def get_vehicle(self, vehicle_id: int) -> dict:
        return await self._request("GET", f"/vehicles/{vehicle_id}")

    async def create_vehicle(self, fields: dict, image: tuple[str, bytes, str] | None = None) -> dict:
        return await self._request("POST", "/vehicles", **self._multipart(fields, image))

    async def update_vehicle(self, vehicle_id: int, fields: dict, image: tuple[str, bytes, str] | None = None) -> dict:
        return await self._request("PUT", f"/vehicles/{vehicle_id}", **self._multipart(fields, image))

    async def delete_vehicle(self, vehicle_id: int) -> None:
        await self._request("DELETE", f"/vehicles/{vehicle_id}")

    def image_url(self, path: str | None) -> str | None:
        """Turn a stored image path into an absolute URL."""
        if not path:
            return None
        if path.startswith("http"):
            return path
        return f"{self.base_url}{path}"

    @staticmethod
    def _multipart(fields: dict, image: tuple[str, bytes, str] | None) -> dict:
        unknown = set(fields) - set(VEHICLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown vehicle fields: {', '.join(sorted(unknown))}")
        data = {k: str(v) for k, v in fields.items() if v is not None}
        kwargs: dict = {"data": data}
        if image is not None:
            kwargs["files"] = {"image": image}
        return kwargs
