"""HTTPX-based client implementing every remote collaborator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

import httpx
from pydantic import ValidationError

from legallens.backend.schemas import (
    AnalysisModel,
    ChatReplyResponse,
    ChatRequest,
    CredentialsRequest,
    HistoryResponse,
    ProfileUpdateRequest,
    SessionModel,
    UploadResponse,
)
from legallens.errors import InvalidCredentials, NotFound, TransportFailure
from legallens.metrics.observability import get_correlation_id, get_logger
from legallens.models import Analysis, DocumentSummary, Session, UploadFile, UploadResult


@dataclass
class BackendClient:
    """Async client for the LegalLens backend.

    Implements the auth provider, upload transport and reply generator
    contracts directly; see :class:`BackendAnalysisFetch` and
    :class:`BackendHistoryFetch` for the two ``fetch`` contracts.
    """

    base_url: str = "http://localhost:8000"
    timeout: float = 30.0
    transport: httpx.AsyncBaseTransport | None = None

    def __post_init__(self) -> None:
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self.transport)
        self._logger = get_logger("backend")

    # -- auth ----------------------------------------------------------

    async def sign_in(self, email: str, password: str) -> Session:
        payload = CredentialsRequest(email=email, password=password).model_dump()
        response = await self._request("POST", "/auth/signin", json=payload)
        if response.status_code == 401:
            raise InvalidCredentials("Invalid credentials")
        self._raise_for_status(response, "Sign-in")
        return self._parse(SessionModel, response).to_domain()

    async def sign_up(self, email: str, password: str) -> Session:
        payload = CredentialsRequest(email=email, password=password).model_dump()
        response = await self._request("POST", "/auth/signup", json=payload)
        self._raise_for_status(response, "Sign-up")
        return self._parse(SessionModel, response).to_domain()

    async def sign_out(self) -> None:
        response = await self._request("POST", "/auth/signout")
        self._raise_for_status(response, "Sign-out")

    async def update_profile(self, session: Session, fields: Mapping[str, object]) -> None:
        payload = ProfileUpdateRequest.model_validate(dict(fields)).model_dump(by_alias=True)
        response = await self._request("PATCH", f"/users/{session.id}/profile", json=payload)
        self._raise_for_status(response, "Profile update")

    # -- documents -----------------------------------------------------

    async def submit(self, file: UploadFile) -> UploadResult:
        data = file.data if file.data or file.path is None else file.path.read_bytes()
        files = {"file": (file.name, data, file.content_type)}
        response = await self._request("POST", "/documents", files=files)
        self._raise_for_status(response, "Upload")
        return self._parse(UploadResponse, response).to_domain()

    async def fetch_analysis(self, document_id: str) -> Analysis:
        response = await self._request("GET", f"/documents/{document_id}/analysis")
        if response.status_code == 404:
            raise NotFound(document_id)
        self._raise_for_status(response, "Analysis fetch")
        return self._parse(AnalysisModel, response).to_domain()

    async def fetch_history(self) -> Sequence[DocumentSummary]:
        response = await self._request("GET", "/documents")
        self._raise_for_status(response, "History fetch")
        history = self._parse(HistoryResponse, response)
        return [item.to_domain() for item in history.documents]

    async def reply(self, document_id: str, text: str) -> str:
        payload = ChatRequest(message=text).model_dump()
        response = await self._request("POST", f"/documents/{document_id}/chat", json=payload)
        self._raise_for_status(response, "Chat")
        return self._parse(ChatReplyResponse, response).reply

    async def aclose(self) -> None:
        await self._client.aclose()

    # -- plumbing ------------------------------------------------------

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        headers = {"X-Request-ID": get_correlation_id()}
        try:
            return await self._client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            self._logger.warning("backend.request_failed", method=method, url=url, error=str(exc))
            raise TransportFailure(f"{method} {url} failed: {exc}") from exc

    @staticmethod
    def _raise_for_status(response: httpx.Response, action: str) -> None:
        if response.status_code >= 400:
            cid = response.headers.get("X-Correlation-ID", "-")
            raise TransportFailure(f"{action} failed ({response.status_code}) [cid={cid}]: {response.text}")

    @staticmethod
    def _parse(model: type, response: httpx.Response):
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise TransportFailure(f"Malformed response from {response.request.url}: {exc}") from exc


class BackendAnalysisFetch:
    def __init__(self, client: BackendClient) -> None:
        self._client = client

    async def fetch(self, document_id: str) -> Analysis:
        return await self._client.fetch_analysis(document_id)


class BackendHistoryFetch:
    def __init__(self, client: BackendClient) -> None:
        self._client = client

    async def fetch(self) -> Sequence[DocumentSummary]:
        return await self._client.fetch_history()
