"""
HTTP routes for the picker API.

Mutating routes resolve the bearer credential before the request body, so an
unauthenticated caller gets a 401 whatever it sent.
"""

from __future__ import annotations

import logging
import re

from fastapi import APIRouter, Depends, Response

from picker.auth import CredentialChecker
from picker.catalog import Catalog
from picker.dependencies import (
    get_admin_credential,
    get_catalog,
    get_credential_checker,
    get_json_object,
)
from picker.errors import NotFound
from picker.schemas import (
    AuthResponse,
    DeletedResponse,
    ProfileCreatedResponse,
    ProfilesResponse,
    RestaurantCreatedResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

READ_CACHE_CONTROL = "public, max-age=60"
ALLOW_HEADERS = "Content-Type, Authorization"
RESTAURANT_ID_PATTERN = re.compile(r"-?[0-9]+")


def _preflight(methods: str) -> Response:
    return Response(
        status_code=200,
        headers={
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Methods": methods,
            "Access-Control-Allow-Headers": ALLOW_HEADERS,
        },
    )


@router.post("/auth", response_model=AuthResponse)
def login(
    payload: dict = Depends(get_json_object),
    credentials: CredentialChecker = Depends(get_credential_checker),
):
    """Exchange the admin password for a bearer token."""
    token = credentials.authenticate(payload.get("password"))
    return AuthResponse(authenticated=True, token=token)


@router.options("/auth")
def login_options():
    return _preflight("POST, OPTIONS")


@router.get("/restaurants")
def get_restaurants(response: Response, catalog: Catalog = Depends(get_catalog)):
    document = catalog.get_document()
    response.headers["Cache-Control"] = READ_CACHE_CONTROL
    return document


@router.post("/restaurants", response_model=RestaurantCreatedResponse)
def add_restaurant(
    credential: str = Depends(get_admin_credential),
    payload: dict = Depends(get_json_object),
    catalog: Catalog = Depends(get_catalog),
):
    restaurant = catalog.add_restaurant(payload, credential)
    return RestaurantCreatedResponse(success=True, restaurant=restaurant)


@router.options("/restaurants")
def restaurants_options():
    return _preflight("GET, POST, DELETE, OPTIONS")


@router.delete("/restaurants/{restaurant_id}", response_model=DeletedResponse)
def delete_restaurant(
    restaurant_id: str,
    credential: str = Depends(get_admin_credential),
    catalog: Catalog = Depends(get_catalog),
):
    if not RESTAURANT_ID_PATTERN.fullmatch(restaurant_id):
        raise NotFound("Restaurant not found")
    deleted = catalog.delete_restaurant(int(restaurant_id), credential)
    return DeletedResponse(success=True, deleted=deleted)


@router.options("/restaurants/{restaurant_id}")
def restaurant_options(restaurant_id: str):
    return _preflight("DELETE, OPTIONS")


@router.get("/profiles", response_model=ProfilesResponse)
def get_profiles(response: Response, catalog: Catalog = Depends(get_catalog)):
    profiles = catalog.list_profiles()
    response.headers["Cache-Control"] = READ_CACHE_CONTROL
    return ProfilesResponse(profiles=profiles)


@router.post("/profiles", response_model=ProfileCreatedResponse)
def add_profile(
    credential: str = Depends(get_admin_credential),
    payload: dict = Depends(get_json_object),
    catalog: Catalog = Depends(get_catalog),
):
    profile = catalog.add_profile(payload, credential)
    return ProfileCreatedResponse(success=True, profile=profile)


@router.options("/profiles")
def profiles_options():
    return _preflight("GET, POST, DELETE, OPTIONS")


@router.delete("/profiles/{profile_id}", response_model=DeletedResponse)
def delete_profile(
    profile_id: str,
    credential: str = Depends(get_admin_credential),
    catalog: Catalog = Depends(get_catalog),
):
    deleted = catalog.delete_profile(profile_id, credential)
    return DeletedResponse(success=True, deleted=deleted)


@router.options("/profiles/{profile_id}")
def profile_options(profile_id: str):
    return _preflight("DELETE, OPTIONS")
