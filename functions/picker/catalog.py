"""
Restaurant and profile operations over the stored document.

Every mutating call runs its own read -> mutate -> write cycle against the
store and commits with a one-line change description. Nothing is cached
between calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from picker.auth import CredentialChecker
from picker.errors import Conflict, InvalidInput, NotFound
from picker.store import DocumentStore

logger = logging.getLogger(__name__)

SERVICE_TYPES = ("takeout", "delivery", "dine-in", "at-home")

DEFAULT_PROFILE_ID = "all"
DEFAULT_PROFILE = {"id": DEFAULT_PROFILE_ID, "name": "All Restaurants"}


def default_profiles() -> list[dict]:
    return [dict(DEFAULT_PROFILE)]


def validate_restaurant(record) -> dict:
    """
    Check a restaurant payload and return it unchanged.

    Raises:
        InvalidInput: naming the first problem found.
    """
    if not isinstance(record, dict):
        raise InvalidInput("Restaurant must be a JSON object")
    if (
        not record.get("name")
        or record.get("foodTypes") is None
        or record.get("serviceTypes") is None
    ):
        raise InvalidInput("Missing required fields")
    if not isinstance(record["name"], str):
        raise InvalidInput("name must be a string")
    if not isinstance(record["foodTypes"], list) or not isinstance(
        record["serviceTypes"], list
    ):
        raise InvalidInput("foodTypes and serviceTypes must be arrays")

    invalid = [st for st in record["serviceTypes"] if st not in SERVICE_TYPES]
    if invalid:
        raise InvalidInput(
            f"Invalid service types: {', '.join(str(st) for st in invalid)}"
        )

    if record.get("profiles") is not None and not isinstance(
        record["profiles"], list
    ):
        raise InvalidInput("profiles must be an array")
    return record


def validate_profile(record) -> dict:
    if not isinstance(record, dict):
        raise InvalidInput("Profile must be a JSON object")
    if not record.get("id") or not record.get("name"):
        raise InvalidInput("Missing required fields")
    if not isinstance(record["id"], str) or not isinstance(record["name"], str):
        raise InvalidInput("id and name must be strings")
    return record


def _find_index(items: list[dict], item_id) -> Optional[int]:
    for index, item in enumerate(items):
        if isinstance(item, dict) and item.get("id") == item_id:
            return index
    return None


@dataclass
class Catalog:
    """Typed operations over the restaurants and profiles collections."""

    store: DocumentStore
    credentials: CredentialChecker

    def get_document(self) -> dict:
        """Return the whole stored document, as stored."""
        return self.store.read().document

    def list_restaurants(self) -> list[dict]:
        return self.store.read().document.get("restaurants") or []

    def add_restaurant(self, record, credential: Optional[str]) -> dict:
        self.credentials.require(credential)
        validate_restaurant(record)

        snapshot = self.store.read()
        restaurants = snapshot.document.setdefault("restaurants", [])
        if "id" in record and _find_index(restaurants, record["id"]) is not None:
            # Restaurant ids are assigned by the client and not enforced here.
            logger.warning("Adding restaurant with duplicate id %r", record["id"])
        restaurants.append(record)

        self.store.write(
            snapshot.document, snapshot.version, f"Add restaurant: {record['name']}"
        )
        return record

    def delete_restaurant(self, restaurant_id: int, credential: Optional[str]) -> dict:
        self.credentials.require(credential)

        snapshot = self.store.read()
        restaurants = snapshot.document.get("restaurants") or []
        index = _find_index(restaurants, restaurant_id)
        if index is None:
            raise NotFound("Restaurant not found")
        deleted = restaurants.pop(index)

        self.store.write(
            snapshot.document,
            snapshot.version,
            f"Delete restaurant: {deleted.get('name')}",
        )
        return deleted

    def list_profiles(self) -> list[dict]:
        return self.store.read().document.get("profiles") or default_profiles()

    def add_profile(self, record, credential: Optional[str]) -> dict:
        self.credentials.require(credential)
        validate_profile(record)

        snapshot = self.store.read()
        if not snapshot.document.get("profiles"):
            snapshot.document["profiles"] = default_profiles()
        profiles = snapshot.document["profiles"]
        if _find_index(profiles, record["id"]) is not None:
            raise Conflict("Profile with this ID already exists")
        profiles.append(record)

        self.store.write(
            snapshot.document, snapshot.version, f"Add profile: {record['name']}"
        )
        return record

    def delete_profile(self, profile_id: str, credential: Optional[str]) -> dict:
        self.credentials.require(credential)
        if profile_id == DEFAULT_PROFILE_ID:
            raise InvalidInput('Cannot delete the default "All Restaurants" profile')

        snapshot = self.store.read()
        profiles = snapshot.document.get("profiles")
        if not profiles:
            raise NotFound("No profiles found")
        index = _find_index(profiles, profile_id)
        if index is None:
            raise NotFound("Profile not found")
        deleted = profiles.pop(index)

        self.store.write(
            snapshot.document,
            snapshot.version,
            f"Delete profile: {deleted.get('name')}",
        )
        return deleted
