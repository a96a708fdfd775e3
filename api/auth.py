"""Authentication endpoints and the startup gate."""
from __future__ import annotations
from pydantic import BaseModel, ConfigDict

from api.client import ApiClient, parse_body
from core.config import config
from core.errors import AuthorizationError, LedgerError, NetworkError, ResponseInvalid, ValidationFailure
from core.logger import get_logger

log = get_logger("api/auth")


class AuthStatus(BaseModel):
    model_config = ConfigDict(extra="ignore")

    setup_required: bool = False


class AuthApi:
    def __init__(self, client: ApiClient):
        self.client = client
        self.session = client.session

    def check(self) -> AuthStatus:
        status = parse_body(AuthStatus, self.client.get("/auth/check") or {}, "/auth/check")
        self.session.setup_required = status.setup_required
        return status

    def setup(self, password: str, confirm: str) -> str:
        """First-run password creation. Returns the new token."""
        if password != confirm:
            raise ValidationFailure("Passwords do not match")
        if len(password) < config.min_password_length:
            raise ValidationFailure(f"Password must be at least {config.min_password_length} characters")
        token = self._token_from(self.client.post("/auth/setup", json={"password": password}), "/auth/setup")
        self.session.setup_required = False
        self.session.set(token)
        log.info("Initial password set up")
        return token

    def login(self, password: str) -> str:
        token = self._token_from(self.client.post("/auth/login", json={"password": password}), "/auth/login")
        self.session.set(token)
        log.info("Logged in")
        return token

    def logout(self) -> None:
        """Invalidate the token server-side if possible; always log out locally."""
        if self.session.token:
            try:
                self.client.post("/auth/logout")
            except LedgerError as e:
                log.warning(f"Server-side logout failed, clearing locally anyway: {e}")
        self.session.clear()

    def change_password(self, current_password: str, new_password: str, confirm: str) -> None:
        if new_password != confirm:
            raise ValidationFailure("New passwords do not match")
        if len(new_password) < config.min_password_length:
            raise ValidationFailure(f"Password must be at least {config.min_password_length} characters")
        self.client.post(
            "/auth/change-password",
            json={"current_password": current_password, "new_password": new_password},
        )
        log.info("Password changed")

    def reset_all_data(self) -> None:
        self.client.post("/auth/reset-all-data")
        log.warning("All ledger data reset on the server")

    def verify(self) -> bool:
        """Probe the stored token; a 401 clears it through the interceptor."""
        if not self.session.token:
            return False
        try:
            self.client.get("/reports/dashboard")
        except AuthorizationError:
            return False
        return True

    @staticmethod
    def _token_from(body, path: str) -> str:
        token = body.get("token") if isinstance(body, dict) else None
        if not token:
            raise ResponseInvalid(path, "no session token in the response")
        return str(token)


def bootstrap(auth: AuthApi) -> AuthStatus:
    """
    Startup gate: learn whether setup is needed and validate any stored token.

    A network failure is treated as "login required" rather than leaving the
    app waiting forever.
    """
    session = auth.session
    if not session.initialized:
        session.init()

    try:
        status = auth.check()
    except LedgerError as e:
        log.error(f"Auth status check failed, assuming login required: {e}")
        session.login_required = True
        return AuthStatus(setup_required=False)

    if session.token and not status.setup_required:
        try:
            auth.verify()
        except NetworkError as e:
            log.warning(f"Could not verify stored token: {e}")
        except LedgerError as e:
            log.warning(f"Stored token probe failed: {e}")
    return status
