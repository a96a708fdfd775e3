"""HTTP client for the LedgerOS backend, with the session token and 401 interceptor."""
from __future__ import annotations
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from api.session import Session
from core.config import config as cfg
from core.errors import AuthorizationError, NetworkError, RequestRejected, ResponseInvalid, extract_detail
from core.logger import get_logger

log = get_logger("api/client")

M = TypeVar("M", bound=BaseModel)


class ApiClient:
    """
    Thin wrapper over one configured ``httpx.Client``.

    The session token is sent as the ``token`` query parameter on every
    call. Non-2xx answers are raised as ``core.errors`` exceptions; a 401
    additionally expires the session before the error reaches the caller.
    Nothing is retried.
    """

    def __init__(
        self,
        session: Session,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.session = session
        self.base_url = (base_url or cfg.api_base_url).rstrip("/")
        self._http = httpx.Client(
            base_url=self.base_url,
            timeout=timeout or cfg.request_timeout,
            transport=transport,
        )
        log.info(f"API client initialized: base_url={self.base_url}")

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def _params(self, params: Optional[Mapping[str, Any]], token: Optional[str]) -> Dict[str, Any]:
        merged: Dict[str, Any] = {}
        for key, value in (params or {}).items():
            # Unset filters are left out of the query entirely
            if value is None:
                continue
            if isinstance(value, bool):
                value = "true" if value else "false"
            merged[key] = value
        if token:
            merged["token"] = token
        return merged

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        files: Any = None,
    ) -> httpx.Response:
        token = self.session.token
        try:
            response = self._http.request(
                method,
                path,
                params=self._params(params, token),
                json=json,
                files=files,
            )
        except httpx.HTTPError as e:
            log.error(f"{method} {path} failed: {type(e).__name__}: {e}")
            raise NetworkError(f"Could not reach the server: {e}") from e

        self._intercept(response, method, path, token)
        log.debug(f"{method} {path} -> {response.status_code}")
        return response

    def _intercept(self, response: httpx.Response, method: str, path: str, token_used: Optional[str]) -> None:
        if response.is_success:
            return

        detail = extract_detail(_safe_json(response))
        if response.status_code == 401:
            if self.session.expire(token_used):
                log.warning(f"{method} {path} -> 401, session expired")
            raise AuthorizationError(401, detail, path)

        log.warning(f"{method} {path} -> {response.status_code}: {detail or 'no detail'}")
        raise RequestRejected(response.status_code, detail, path)

    def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return _safe_json(self.request("GET", path, params=params))

    def post(self, path: str, json: Any = None, params: Optional[Mapping[str, Any]] = None) -> Any:
        return _safe_json(self.request("POST", path, params=params, json=json))

    def put(self, path: str, json: Any = None, params: Optional[Mapping[str, Any]] = None) -> Any:
        return _safe_json(self.request("PUT", path, params=params, json=json))

    def delete(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return _safe_json(self.request("DELETE", path, params=params))

    def upload(
        self,
        path: str,
        file_name: str,
        content: bytes,
        params: Optional[Mapping[str, Any]] = None,
        content_type: str = "application/octet-stream",
    ) -> Any:
        """Multipart POST with the payload in the ``file`` field."""
        files = {"file": (file_name, content, content_type)}
        return _safe_json(self.request("POST", path, params=params, files=files))

    def download(self, path: str, params: Optional[Mapping[str, Any]] = None) -> bytes:
        return self.request("GET", path, params=params).content


def _safe_json(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def parse_body(model: Type[M], body: Any, path: str) -> M:
    """
    Read one response body into ``model``.

    Raises:
        ResponseInvalid: If the body does not validate
    """
    try:
        return model.model_validate(body)
    except ValidationError as e:
        problem = "; ".join(f"{'.'.join(str(p) for p in err['loc']) or 'body'}: {err['msg']}" for err in e.errors()[:3])
        log.error(f"Malformed {model.__name__} from {path}: {problem}")
        raise ResponseInvalid(path, problem) from e


def parse_list(model: Type[M], body: Any, path: str) -> List[M]:
    """Like ``parse_body`` for a JSON array; a missing body reads as empty."""
    if body is None:
        return []
    if not isinstance(body, list):
        log.error(f"Expected a list of {model.__name__} from {path}, got {type(body).__name__}")
        raise ResponseInvalid(path, f"expected a list, got {type(body).__name__}")
    return [parse_body(model, item, path) for item in body]
