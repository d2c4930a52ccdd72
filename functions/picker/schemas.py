"""
Pydantic schemas for the picker API responses.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class AuthResponse(BaseModel):
    authenticated: Literal[True]
    token: str


class RestaurantCreatedResponse(BaseModel):
    success: Literal[True]
    restaurant: dict


class ProfileCreatedResponse(BaseModel):
    success: Literal[True]
    profile: dict


class DeletedResponse(BaseModel):
    success: Literal[True]
    deleted: dict


class ProfilesResponse(BaseModel):
    profiles: list[dict]


class HealthResponse(BaseModel):
    status: Literal["ok"]
