from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass
class ClientSession:
    """Bearer session held by an API client.

    Replaces browser storage: the client reads the token from here when
    sending requests and clears it when the server answers 401.
    """

    token: str | None = None
    expiration: datetime | None = None
    username: str | None = None
    role: str | None = None

    @property
    def is_authenticated(self) -> bool:
        if not self.token:
            return False
        if self.expiration is not None and self.expiration <= datetime.now(timezone.utc):
            return False
        return True

    def store(self, bundle: dict) -> None:
        expiration = datetime.fromisoformat(bundle["expiration"].replace("Z", "+00:00"))
        if expiration.tzinfo is None:
            expiration = expiration.replace(tzinfo=timezone.utc)
        self.token = bundle["token"]
        self.expiration = expiration
        self.username = bundle["username"]
        self.role = bundle["role"]

    def clear(self) -> None:
        self.token = None
        self.expiration = None
        self.username = None
        self.role = None

    def authorization_header(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}
