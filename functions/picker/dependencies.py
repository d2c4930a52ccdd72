"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import json
import logging

from fastapi import Depends, Header, Request

from picker.auth import CredentialChecker, credential_from_header
from picker.catalog import Catalog
from picker.config import get_settings
from picker.errors import MalformedRequest, StoreUnavailable
from picker.store import DocumentStore, GitHubDocumentStore, InMemoryDocumentStore

logger = logging.getLogger(__name__)

_document_store: DocumentStore | None = None


def get_document_store() -> DocumentStore:
    """
    Return a singleton store client.

    The GitHub client only holds connection settings; the document itself is
    fetched fresh on every read. The in-memory store keeps data for the life
    of the process only and is used solely when explicitly enabled.

    Raises:
        StoreUnavailable: if neither backend is configured.
    """
    global _document_store
    if _document_store:
        return _document_store

    settings = get_settings()
    if settings.use_in_memory_backends:
        logger.warning("Using in-memory document store; data will not persist")
        _document_store = InMemoryDocumentStore()
    elif settings.github_token and settings.github_repo:
        _document_store = GitHubDocumentStore(
            token=settings.github_token,
            repo=settings.github_repo,
            branch=settings.github_branch,
            path=settings.data_file_path,
            api_url=settings.github_api_url,
            timeout=settings.request_timeout,
        )
    else:
        logger.error("GITHUB_TOKEN and GITHUB_REPO must be set to reach the data file")
        raise StoreUnavailable(
            "Document store is not configured",
            "Set GITHUB_TOKEN and GITHUB_REPO",
        )
    return _document_store


def get_credential_checker() -> CredentialChecker:
    settings = get_settings()
    return CredentialChecker(
        admin_password=settings.admin_password,
        token_ttl_seconds=settings.token_ttl_seconds,
    )


def get_catalog(
    store: DocumentStore = Depends(get_document_store),
    credentials: CredentialChecker = Depends(get_credential_checker),
) -> Catalog:
    return Catalog(store=store, credentials=credentials)


def get_bearer_credential(authorization: str | None = Header(None)) -> str | None:
    return credential_from_header(authorization)


def get_admin_credential(
    credential: str | None = Depends(get_bearer_credential),
    credentials: CredentialChecker = Depends(get_credential_checker),
) -> str:
    """Verified bearer credential; rejects the request before its body is read."""
    credentials.require(credential)
    return credential


async def get_json_object(request: Request) -> dict:
    """Parse the request body as a JSON object."""
    raw = await request.body()
    try:
        payload = json.loads(raw)
    except (ValueError, UnicodeDecodeError) as e:
        raise MalformedRequest(details=str(e)) from e
    if not isinstance(payload, dict):
        raise MalformedRequest(details="Request body must be a JSON object")
    return payload
