from __future__ import annotations

import re
from typing import Any, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from recipegen.app.domain.models import UserProfile

_PASSWORD_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


class RegisterRequest(BaseModel):
    name: str
    email: EmailStr
    password: str

    @field_validator("name")
    @classmethod
    def _name_length(cls, value: str) -> str:
        name = value.strip()
        if not 2 <= len(name) <= 50:
            raise ValueError("Name must be between 2 and 50 characters")
        return name

    @field_validator("email", mode="before")
    @classmethod
    def _strip_email(cls, value: Any) -> Any:
        return _strip(value)

    @field_validator("email", mode="after")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("password")
    @classmethod
    def _strong_password(cls, value: str) -> str:
        if len(value) < 6:
            raise ValueError("Password must be at least 6 characters long")
        if not _PASSWORD_RE.match(value):
            raise ValueError(
                "Password must contain at least one uppercase letter, one lowercase letter, and one number"
            )
        return value


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def _strip_email(cls, value: Any) -> Any:
        return _strip(value)

    @field_validator("email", mode="after")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.lower()


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=50)
    bio: Optional[str] = Field(default=None, max_length=500)
    favoritesCuisine: Optional[str] = Field(default=None, max_length=200)


class ProfilePictureUpload(BaseModel):
    profilePicture: Optional[str] = None


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    bio: Optional[str] = None
    favoritesCuisine: Optional[str] = None
    profilePicture: Optional[str] = None
    dietaryRestrictions: Optional[str] = None
    skillLevel: Optional[str] = None
    preferredCookingTime: Optional[str] = None
    recipesGenerated: int = 0
    favoriteRecipes: int = 0
    isActive: bool = True
    lastLogin: Optional[str] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None

    @classmethod
    def from_domain(cls, profile: UserProfile) -> "UserResponse":
        return cls(
            id=profile.id,
            name=profile.name,
            email=profile.email,
            bio=profile.bio,
            favoritesCuisine=profile.favorites_cuisine,
            profilePicture=profile.profile_picture,
            dietaryRestrictions=profile.dietary_restrictions,
            skillLevel=profile.skill_level,
            preferredCookingTime=profile.preferred_cooking_time,
            recipesGenerated=profile.recipes_generated,
            favoriteRecipes=profile.favorite_recipes,
            isActive=profile.is_active,
            lastLogin=profile.last_login.isoformat() if profile.last_login else None,
            createdAt=profile.created_at.isoformat() if profile.created_at else None,
            updatedAt=profile.updated_at.isoformat() if profile.updated_at else None,
        )


class UserData(BaseModel):
    user: UserResponse


class AuthData(BaseModel):
    user: UserResponse
    token: str
