from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from starlette.concurrency import run_in_threadpool

from recipegen.app.deps import get_auth_service, get_current_user, get_user_service
from recipegen.app.domain.errors import (
    AuthenticationError,
    EmailAlreadyRegisteredError,
    InvalidProfilePictureError,
    UserNotFoundError,
)
from recipegen.app.domain.models import UserProfile
from recipegen.app.schemas.auth import (
    AuthData,
    LoginRequest,
    ProfilePictureUpload,
    ProfileUpdate,
    RegisterRequest,
    UserData,
    UserResponse,
)
from recipegen.app.schemas.common import ApiResponse
from recipegen.app.services.auth_service import AuthService
from recipegen.app.services.user_service import UserService

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=ApiResponse[AuthData], status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    auth: AuthService = Depends(get_auth_service),
) -> ApiResponse[AuthData]:
    try:
        session = await run_in_threadpool(auth.register, body.name, body.email, body.password)
    except EmailAlreadyRegisteredError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return ApiResponse(
        message="User registered successfully",
        data=AuthData(user=UserResponse.from_domain(session.user), token=session.token),
    )


@router.post("/login", response_model=ApiResponse[AuthData])
async def login(
    body: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
) -> ApiResponse[AuthData]:
    try:
        session = await run_in_threadpool(auth.login, body.email, body.password)
    except AuthenticationError as exc:
        raise HTTPException(status_code=401, detail=str(exc))
    return ApiResponse(
        message="Login successful",
        data=AuthData(user=UserResponse.from_domain(session.user), token=session.token),
    )


@router.get("/profile", response_model=ApiResponse[UserData])
async def get_profile(user: UserProfile = Depends(get_current_user)) -> ApiResponse[UserData]:
    return ApiResponse(data=UserData(user=UserResponse.from_domain(user)))


@router.put("/profile", response_model=ApiResponse[UserData])
async def update_profile(
    body: ProfileUpdate,
    user: UserProfile = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
) -> ApiResponse[UserData]:
    try:
        profile = await run_in_threadpool(
            users.update_profile, user.id, body.name, body.bio, body.favoritesCuisine
        )
    except UserNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return ApiResponse(
        message="Profile updated successfully",
        data=UserData(user=UserResponse.from_domain(profile)),
    )


@router.post("/profile/picture", response_model=ApiResponse[UserData])
async def upload_profile_picture(
    body: ProfilePictureUpload,
    user: UserProfile = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
) -> ApiResponse[UserData]:
    try:
        profile = await run_in_threadpool(users.set_profile_picture, user.id, body.profilePicture or "")
    except InvalidProfilePictureError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except UserNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return ApiResponse(
        message="Profile picture updated successfully",
        data=UserData(user=UserResponse.from_domain(profile)),
    )


@router.delete("/profile/picture", response_model=ApiResponse[UserData])
async def remove_profile_picture(
    user: UserProfile = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
) -> ApiResponse[UserData]:
    try:
        profile = await run_in_threadpool(users.remove_profile_picture, user.id)
    except UserNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return ApiResponse(
        message="Profile picture removed successfully",
        data=UserData(user=UserResponse.from_domain(profile)),
    )


@router.post("/logout", response_model=ApiResponse[None])
async def logout(user: UserProfile = Depends(get_current_user)) -> ApiResponse[None]:
    # Tokens are held by the client; nothing to revoke server-side.
    return ApiResponse(message="Logout successful")
