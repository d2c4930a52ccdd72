"""
Single-document store backed by a file in a GitHub repository.

The store reads and replaces one JSON document. Every read returns the
document together with a version token (the file's blob SHA); every write
must present the token from the read it is based on, and is rejected if the
file changed in between. There is no local locking and no retry: a rejected
write surfaces as ``VersionConflict`` and the caller starts over.
"""

from __future__ import annotations

import base64
import binascii
import copy
import hashlib
import json
import logging
import threading
from dataclasses import dataclass, field
from typing import Optional, Protocol

import requests

from picker.errors import CorruptDocument, StoreUnavailable, VersionConflict

logger = logging.getLogger(__name__)

USER_AGENT = "Restaurant-Picker-App"
GITHUB_ACCEPT = "application/vnd.github.v3+json"

COLLECTION_KEYS = ("restaurants", "profiles")


@dataclass
class VersionedDocument:
    """A document snapshot and the version token it was read at."""

    document: dict
    version: str


class DocumentStore(Protocol):
    """Defines the operations the API needs from the document store."""

    def read(self) -> VersionedDocument:
        ...

    def write(self, document: dict, version: str, change_description: str) -> str:
        ...


def serialize_document(document: dict) -> str:
    return json.dumps(document, indent=2)


def parse_document(raw: bytes | str) -> dict:
    """
    Parse stored content into a document dict.

    Raises:
        CorruptDocument: if the content is not a JSON object whose collections
            are lists.
    """
    try:
        document = json.loads(raw)
    except (ValueError, UnicodeDecodeError) as e:
        raise CorruptDocument("Stored document is not valid JSON", str(e)) from e

    if not isinstance(document, dict):
        raise CorruptDocument("Stored document is not a JSON object")
    for key in COLLECTION_KEYS:
        if key in document and not isinstance(document[key], list):
            raise CorruptDocument(f"Stored document field '{key}' is not a list")
    return document


def _require_version(version: str) -> None:
    if not version:
        raise ValueError("A version token from a previous read is required")


@dataclass
class InMemoryDocumentStore:
    """
    Process-local store with the same revision semantics as GitHub.

    Used for local development and tests. The version token is the SHA-1 of
    the serialized document.
    """

    document: dict = field(
        default_factory=lambda: {"restaurants": [], "profiles": []}
    )
    history: list[str] = field(default_factory=list)

    def __post_init__(self):
        self.document = copy.deepcopy(self.document)
        self._version = self._hash(self.document)
        # Held across the version check and the update so they act as one commit.
        self._lock = threading.Lock()

    @staticmethod
    def _hash(document: dict) -> str:
        return hashlib.sha1(serialize_document(document).encode("utf-8")).hexdigest()

    @property
    def version(self) -> str:
        return self._version

    def read(self) -> VersionedDocument:
        with self._lock:
            return VersionedDocument(copy.deepcopy(self.document), self._version)

    def write(self, document: dict, version: str, change_description: str) -> str:
        _require_version(version)
        with self._lock:
            if version != self._version:
                raise VersionConflict(details=f"stale version {version[:7]}")
            # Round-trip through JSON to mimic what a real commit would store.
            self.document = json.loads(serialize_document(document))
            self._version = self._hash(self.document)
            self.history.append(change_description)
            return self._version

    def reset(self, document: Optional[dict] = None) -> None:
        """Replace the stored document (useful in tests)."""
        with self._lock:
            self.document = copy.deepcopy(
                document if document is not None else {"restaurants": [], "profiles": []}
            )
            self._version = self._hash(self.document)
            self.history.clear()


@dataclass
class GitHubDocumentStore:
    """
    Stores the document as a file through the GitHub Contents API.
    """

    token: str
    repo: str
    branch: str = "main"
    path: str = "restaurants.json"
    api_url: str = "https://api.github.com"
    timeout: float = 30.0

    def __post_init__(self):
        self._session = requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"token {self.token}",
                "Accept": GITHUB_ACCEPT,
                "User-Agent": USER_AGENT,
            }
        )

    @property
    def contents_url(self) -> str:
        return f"{self.api_url.rstrip('/')}/repos/{self.repo}/contents/{self.path}"

    def read(self) -> VersionedDocument:
        try:
            response = self._session.get(
                self.contents_url,
                params={"ref": self.branch},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("GitHub read of %s failed: %s", self.path, e)
            raise StoreUnavailable("Failed to reach GitHub", str(e)) from e

        if not response.ok:
            logger.error(
                "GitHub read of %s returned %s", self.path, response.status_code
            )
            raise StoreUnavailable(
                "Failed to fetch document", f"GitHub API error: {response.status_code}"
            )

        try:
            payload = response.json()
            sha = payload["sha"]
            raw = base64.b64decode(payload["content"])
        except (ValueError, KeyError, TypeError, binascii.Error) as e:
            raise CorruptDocument("Unexpected GitHub contents response", str(e)) from e

        document = parse_document(raw)
        logger.debug("Read %s@%s (sha %s)", self.path, self.branch, sha[:7])
        return VersionedDocument(document, sha)

    def write(self, document: dict, version: str, change_description: str) -> str:
        _require_version(version)
        content = base64.b64encode(
            serialize_document(document).encode("utf-8")
        ).decode("ascii")
        body = {
            "message": change_description,
            "content": content,
            "sha": version,
            "branch": self.branch,
        }
        try:
            response = self._session.put(
                self.contents_url, json=body, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error("GitHub write of %s failed: %s", self.path, e)
            raise StoreUnavailable("Failed to reach GitHub", str(e)) from e

        if response.status_code == 409:
            logger.warning(
                "GitHub rejected write of %s: sha %s is stale", self.path, version[:7]
            )
            raise VersionConflict(details=response.text)
        if not response.ok:
            logger.error(
                "GitHub write of %s returned %s", self.path, response.status_code
            )
            raise StoreUnavailable(
                "Failed to update document",
                f"GitHub update failed: {response.status_code} - {response.text}",
            )

        try:
            new_sha = response.json()["content"]["sha"]
        except (ValueError, KeyError, TypeError):
            new_sha = ""
        logger.info(
            "Committed %s to %s@%s: %s", self.path, self.repo, self.branch,
            change_description,
        )
        return new_sha
