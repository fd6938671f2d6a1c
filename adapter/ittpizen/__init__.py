"""
ITTPizen API Adapter.

Typed client for the ITTPizen backend: one method per endpoint, each
returning a NetworkResponse instead of raising for expected failures.
"""

from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, List, Optional, Type

import requests
from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError

from monitoring import monitor, EventType

from ..models import (
    CommonErrorResponse,
    CommonResponse,
    CreatePostCommentResponse,
    LoginRequest,
    LoginResponse,
    PagedCommonResponse,
    PostCommentResponse,
    PostResponse,
    RegisterRequest,
    RegisterResponse,
)
from .endpoints import Endpoint, ENDPOINTS
from .responses import (
    NetworkError,
    NetworkResponse,
    ServerError,
    Success,
    UnexpectedError,
    UnknownError,
    error_message,
)

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10


def bearer(token: str) -> str:
    """Format a session token as an Authorization header value."""
    if token.startswith("Bearer "):
        return token
    return f"Bearer {token}"


class IttpizenAdapter:
    """
    Adapter for the ITTPizen REST API.

    Usage:
        adapter = IttpizenAdapter()  # Uses ITTPIZEN_BASE_URL env var
        response = adapter.login(LoginRequest(email="...", password="..."))
        if response.is_success:
            token = response.success.data.access_token
    """

    BASE_URL = "https://api.ittpizen.com/api/v1"
    DEFAULT_TIMEOUT = 15

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None
    ):
        """
        Initialize the adapter.

        Args:
            base_url: Backend root (or set ITTPIZEN_BASE_URL env var)
            timeout: Per-request timeout in seconds (or set ITTPIZEN_TIMEOUT)
        """
        self.base_url = (base_url or os.environ.get("ITTPIZEN_BASE_URL") or self.BASE_URL).rstrip("/")
        self.timeout = timeout or float(os.environ.get("ITTPIZEN_TIMEOUT", self.DEFAULT_TIMEOUT))

    def _url(self, endpoint: Endpoint, path_params: Dict[str, str]) -> str:
        return f"{self.base_url}/{endpoint.build_path(**path_params)}"

    def _call(
        self,
        name: str,
        success_model: Type[BaseModel],
        token: Optional[str] = None,
        path_params: Optional[Dict[str, str]] = None,
        query: Optional[Dict[str, Any]] = None,
        body: Optional[BaseModel] = None,
        form: Optional[Dict[str, str]] = None,
    ) -> NetworkResponse:
        """
        Perform one endpoint call and classify its outcome.

        Token presence is the caller's responsibility; a missing token is
        sent as-is and rejected by the server.
        """
        endpoint = ENDPOINTS[name]
        url = self._url(endpoint, path_params or {})

        headers = {"Accept": "application/json"}
        if endpoint.auth:
            headers["Authorization"] = bearer(token or "")

        kwargs: Dict[str, Any] = {"headers": headers, "timeout": self.timeout}
        if query:
            kwargs["params"] = {k: v for k, v in query.items() if v is not None}
        if endpoint.form:
            kwargs["data"] = form or {}
        elif body is not None:
            kwargs["json"] = body.model_dump()

        start_time_ms = time.time() * 1000
        try:
            response = requests.request(endpoint.method, url, **kwargs)
        except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
            latency_ms = (time.time() * 1000) - start_time_ms
            logger.error(f"{endpoint.method} {endpoint.path} failed to reach backend: {e}")
            self._record(name, latency_ms, error=True, transport_failure=True, reason=str(e)[:200])
            return NetworkError(e)
        except requests.exceptions.RequestException as e:
            latency_ms = (time.time() * 1000) - start_time_ms
            logger.error(f"{endpoint.method} {endpoint.path} request error: {e}")
            self._record(name, latency_ms, error=True, transport_failure=True, reason=str(e)[:200])
            return UnknownError(e)

        latency_ms = (time.time() * 1000) - start_time_ms
        result = self._parse(endpoint, response, success_model)

        self._record(
            name,
            latency_ms,
            error=not result.is_success,
            transport_failure=isinstance(result, UnexpectedError),
            status_code=response.status_code,
        )
        return result

    def _parse(
        self,
        endpoint: Endpoint,
        response: requests.Response,
        success_model: Type[BaseModel]
    ) -> NetworkResponse:
        """Turn an HTTP response into Success, ServerError or UnknownError."""
        status_code = response.status_code

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"{endpoint.method} {endpoint.path} returned non-JSON body ({status_code})")
            return UnknownError(e, status_code=status_code)

        if 200 <= status_code < 300:
            try:
                body = success_model.model_validate(payload)
            except ValidationError as e:
                logger.error(f"{endpoint.method} {endpoint.path} returned malformed payload: {e.error_count()} errors")
                return UnknownError(e, status_code=status_code)
            logger.info(f"{endpoint.method} {endpoint.path} -> {status_code}")
            return Success(body=body, status_code=status_code)

        try:
            error_body = CommonErrorResponse.model_validate(payload)
        except ValidationError as e:
            logger.error(f"{endpoint.method} {endpoint.path} returned {status_code} without error envelope")
            return UnknownError(e, status_code=status_code)

        logger.warning(f"{endpoint.method} {endpoint.path} -> {status_code}: {error_body.message}")
        return ServerError(body=error_body, status_code=status_code)

    def _record(self, name: str, latency_ms: float, error: bool, transport_failure: bool = False, **details) -> None:
        monitor.metrics.record_api_call(name, latency_ms, error=error, transport_failure=transport_failure)
        event_type = EventType.ERROR if error else EventType.API_CALL
        monitor.activity.add_event(event_type, endpoint=name, latency_ms=round(latency_ms, 1), **details)

    # -------------------------------------------------------------------------
    # Auth
    # -------------------------------------------------------------------------

    def login(self, request: LoginRequest) -> NetworkResponse:
        """POST user/login -> CommonResponse[LoginResponse]"""
        return self._call("login", CommonResponse[LoginResponse], body=request)

    def register(self, request: RegisterRequest) -> NetworkResponse:
        """POST user/register -> CommonResponse[RegisterResponse]"""
        return self._call("register", CommonResponse[RegisterResponse], body=request)

    # -------------------------------------------------------------------------
    # Posts
    # -------------------------------------------------------------------------

    def get_all_post(
        self,
        token: str,
        type: Optional[str] = None,
        page: int = DEFAULT_PAGE,
        size: int = DEFAULT_PAGE_SIZE
    ) -> NetworkResponse:
        """
        GET post -> PagedCommonResponse[List[PostResponse]]

        Args:
            token: Session access token
            type: Post category filter; omitted from the query when None
            page: Page number (1-based)
            size: Page size
        """
        return self._call(
            "get_all_post",
            PagedCommonResponse[List[PostResponse]],
            token=token,
            query={"type": type, "page": page, "size": size},
        )

    def get_post_by_user(self, token: str, user_id: str) -> NetworkResponse:
        """GET post/user/{userId} -> PagedCommonResponse[List[PostResponse]]"""
        return self._call(
            "get_post_by_user",
            PagedCommonResponse[List[PostResponse]],
            token=token,
            path_params={"userId": user_id},
        )

    def get_post_by_id(self, token: str, post_id: str) -> NetworkResponse:
        """GET post/{postId} -> CommonResponse[PostResponse]"""
        return self._call(
            "get_post_by_id",
            CommonResponse[PostResponse],
            token=token,
            path_params={"postId": post_id},
        )

    # -------------------------------------------------------------------------
    # Comments and likes
    # -------------------------------------------------------------------------

    def get_post_comment(self, token: str, post_id: str) -> NetworkResponse:
        """GET post/comment/{postId} -> CommonResponse[List[PostCommentResponse]]"""
        return self._call(
            "get_post_comment",
            CommonResponse[List[PostCommentResponse]],
            token=token,
            path_params={"postId": post_id},
        )

    def create_post_comment(self, token: str, post_id: str, comment: str) -> NetworkResponse:
        """POST post/comment/{postId} (form-encoded) -> CommonResponse[CreatePostCommentResponse]"""
        return self._call(
            "create_post_comment",
            CommonResponse[CreatePostCommentResponse],
            token=token,
            path_params={"postId": post_id},
            form={"comment": comment},
        )

    def create_post_like(self, token: str, post_id: str) -> NetworkResponse:
        """POST post/like/{postId} -> CommonResponse[str]"""
        return self._call(
            "create_post_like",
            CommonResponse[str],
            token=token,
            path_params={"postId": post_id},
        )

    def delete_post_like(self, token: str, post_id: str) -> NetworkResponse:
        """DELETE post/like/{postId} -> CommonResponse[str]"""
        return self._call(
            "delete_post_like",
            CommonResponse[str],
            token=token,
            path_params={"postId": post_id},
        )


__all__ = [
    "IttpizenAdapter",
    "Endpoint",
    "ENDPOINTS",
    "DEFAULT_PAGE",
    "DEFAULT_PAGE_SIZE",
    "bearer",
    "NetworkResponse",
    "Success",
    "ServerError",
    "UnexpectedError",
    "NetworkError",
    "UnknownError",
    "error_message",
]
