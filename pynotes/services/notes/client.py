"""
Low-level Firestore REST client for the notes collection.

This "escape hatch" is also used internally by FirestoreNoteStore. It returns
typed Pydantic models from pynotes.services.notes.models.firestore and hides
HTTP details. Calls are blocking; the async store runs them in threads.
"""

from __future__ import annotations

import json
import logging
import os
import time
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from pydantic import TypeAdapter, ValidationError

from .models.firestore import FSDocument, FSRunQueryItem, FSRunQueryRequest

LOGGER = logging.getLogger(__name__)

FIRESTORE_URL = "https://firestore.googleapis.com/v1"

TokenProvider = Callable[[], Optional[str]]


# ------------------------------- Errors --------------------------------------


class NotesError(Exception):
    """Base Notes transport error."""


class NotesAuthError(NotesError):
    """Missing or rejected credentials (401/403)."""


class NoteNotFound(NotesError):
    """The addressed note does not exist (404)."""


class NotesRateLimited(NotesError):
    """429 Too Many Requests."""

    def __init__(self, message: str, retry_after: Optional[float] = None):
        super().__init__(message)
        self.retry_after = retry_after


class NotesApiError(NotesError):
    """Catch-all API error."""

    def __init__(self, message: str, payload: Optional[object] = None):
        super().__init__(message)
        self.payload = payload


# ------------------------------- Transport -----------------------------------


def _error_message(body: object) -> Optional[str]:
    # Google APIs: {"error": {"code": 404, "message": "...", "status": "NOT_FOUND"}}
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict):
            return err.get("message") or err.get("status")
    return None


class _RestClient:
    """
    Minimal HTTP transport:
      - JSON requests via `json=payload`
      - Bearer token from a provider, re-read on every call
      - Bounded debug dumps (PYNOTES_DEBUG_MAX_BYTES)
    """

    def __init__(
        self,
        base_url: str,
        session,
        token_provider: Optional[TokenProvider] = None,
        base_params: Optional[Dict[str, str]] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._session = session
        self._token_provider = token_provider
        self._params: List[Tuple[str, str]] = list((base_params or {}).items())
        LOGGER.debug("Initialized _RestClient with base_url: %s", self._base_url)

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self._token_provider() if self._token_provider else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def request(
        self,
        method: str,
        path: str,
        *,
        payload: Optional[Dict] = None,
        params: Sequence[Tuple[str, str]] = (),
    ) -> Any:
        url = f"{self._base_url}{path}"
        LOGGER.info("%s %s", method, url)
        resp = self._session.request(
            method,
            url,
            json=payload,
            params=[*self._params, *params] or None,
            headers=self._headers(),
        )
        code = getattr(resp, "status_code", 0)
        LOGGER.debug("%s %s returned status %d", method, url, code)
        if code >= 400:
            self._dump_http_debug(method.lower(), url, payload, resp)
            try:
                body = resp.json()
            except ValueError:
                body = getattr(resp, "text", None)
            detail = _error_message(body) or f"HTTP {code}"
            if code in (401, 403):
                LOGGER.error("%s %s failed with auth error: %d", method, url, code)
                raise NotesAuthError(f"HTTP {code}: {detail}")
            if code == 404:
                LOGGER.warning("%s %s: not found", method, url)
                raise NoteNotFound(detail)
            if code == 429:
                retry_after = None
                hdr = resp.headers.get("Retry-After")
                if hdr:
                    try:
                        retry_after = float(hdr)
                    except ValueError:
                        retry_after = None
                LOGGER.warning(
                    "%s %s was rate-limited. Retry after: %s", method, url, retry_after
                )
                raise NotesRateLimited("HTTP 429: rate limited", retry_after=retry_after)
            LOGGER.error("%s %s failed with code %d", method, url, code)
            raise NotesApiError(f"HTTP {code}: {detail}", payload=body)
        if method == "DELETE" or not getattr(resp, "content", b"{}"):
            return None
        try:
            return resp.json()
        except ValueError:
            self._dump_http_debug(method.lower(), url, payload, resp)
            LOGGER.error("Failed to parse JSON response from %s", url)
            raise NotesApiError(
                "Invalid JSON response", payload=getattr(resp, "text", None)
            )

    @staticmethod
    def _dump_http_debug(op: str, url: str, payload: Optional[Dict], resp) -> None:
        if not os.getenv("PYNOTES_DEBUG"):
            return
        ts = time.strftime("%Y%m%d-%H%M%S")
        out_dir = os.path.join("workspace", "notes_debug")
        try:
            os.makedirs(out_dir, exist_ok=True)
            with open(
                os.path.join(out_dir, f"{ts}_{op}_http_request.json"),
                "w",
                encoding="utf-8",
            ) as f:
                json.dump(
                    {"url": url, "payload": payload}, f, ensure_ascii=False, indent=2
                )
            body_text = getattr(resp, "text", None) or ""
            max_bytes = int(os.getenv("PYNOTES_DEBUG_MAX_BYTES", "524288"))
            with open(
                os.path.join(out_dir, f"{ts}_{op}_http_response.txt"),
                "w",
                encoding="utf-8",
            ) as f:
                f.write(f"status={getattr(resp, 'status_code', None)}\nurl={url}\n\n")
                if len(body_text) > max_bytes:
                    f.write(body_text[:max_bytes] + "\n[truncated]\n")
                else:
                    f.write(body_text)
        except OSError as exc:
            LOGGER.debug("Could not write HTTP debug dump: %s", exc)


# ------------------------------ Raw client -----------------------------------


class FirestoreNotesClient:
    """
    Raw Firestore service for the notes collection.

    Methods map 1:1 to REST endpoints:
      - POST   documents/{collection}
      - GET    documents/{collection}/{id}
      - PATCH  documents/{collection}/{id}
      - DELETE documents/{collection}/{id}
      - POST   documents:runQuery
    """

    def __init__(
        self,
        project_id: str,
        session,
        *,
        database: str = "(default)",
        collection: str = "notes",
        token_provider: Optional[TokenProvider] = None,
        api_key: Optional[str] = None,
        base_url: str = FIRESTORE_URL,
    ):
        self.collection = collection
        root = f"{base_url}/projects/{project_id}/databases/{database}/documents"
        self._http = _RestClient(
            root,
            session,
            token_provider=token_provider,
            base_params={"key": api_key} if api_key else None,
        )
        LOGGER.info("FirestoreNotesClient initialized for project %s.", project_id)

    # ----- Documents -----

    def create(self, fields: Dict[str, Any]) -> FSDocument:
        LOGGER.info("Creating document in %s", self.collection)
        data = self._http.request(
            "POST", f"/{self.collection}", payload={"fields": fields}
        )
        return self._document("documents.create", data)

    def get(self, document_id: str) -> FSDocument:
        data = self._http.request("GET", f"/{self.collection}/{document_id}")
        return self._document("documents.get", data)

    def patch(
        self,
        document_id: str,
        fields: Dict[str, Any],
        *,
        must_exist: bool = True,
    ) -> FSDocument:
        """Overwrite only the given fields (update mask = their names)."""
        params: List[Tuple[str, str]] = [
            ("updateMask.fieldPaths", name) for name in fields
        ]
        if must_exist:
            params.append(("currentDocument.exists", "true"))
        LOGGER.info("Patching %s/%s fields=%s", self.collection, document_id, list(fields))
        data = self._http.request(
            "PATCH",
            f"/{self.collection}/{document_id}",
            payload={"fields": fields},
            params=params,
        )
        return self._document("documents.patch", data)

    def delete(self, document_id: str) -> None:
        LOGGER.info("Deleting %s/%s", self.collection, document_id)
        self._http.request("DELETE", f"/{self.collection}/{document_id}")

    # ----- Query -----

    def run_query(self, request: FSRunQueryRequest) -> List[FSDocument]:
        payload = request.model_dump(mode="json", by_alias=True, exclude_none=True)
        data = self._http.request("POST", ":runQuery", payload=payload)
        try:
            items = TypeAdapter(List[FSRunQueryItem]).validate_python(data or [])
        except ValidationError as e:
            self._log_validation("documents.runQuery", data, e)
            LOGGER.error("runQuery response validation failed.")
            raise NotesApiError("runQuery response validation failed", payload=data)
        docs = [item.document for item in items if item.document is not None]
        LOGGER.debug("runQuery returned %d documents.", len(docs))
        return docs

    # ----- Helpers -----

    def _document(self, op: str, data: Any) -> FSDocument:
        try:
            return FSDocument.model_validate(data)
        except ValidationError as e:
            self._log_validation(op, data, e)
            LOGGER.error("%s response validation failed.", op)
            raise NotesApiError(f"{op} response validation failed", payload=data)

    @staticmethod
    def _log_validation(op: str, data: Any, err: ValidationError) -> None:
        if not os.getenv("PYNOTES_DEBUG"):
            return
        ts = time.strftime("%Y%m%d-%H%M%S")
        out_dir = os.path.join("workspace", "notes_debug")
        try:
            os.makedirs(out_dir, exist_ok=True)
            with open(
                os.path.join(out_dir, f"{ts}_{op}_validation.json"),
                "w",
                encoding="utf-8",
            ) as f:
                json.dump(
                    {"op": op, "errors": err.errors(), "data": data},
                    f,
                    ensure_ascii=False,
                    indent=2,
                    default=str,
                )
        except OSError as exc:
            LOGGER.debug("Could not write validation dump: %s", exc)
