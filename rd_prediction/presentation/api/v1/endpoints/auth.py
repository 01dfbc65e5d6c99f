"""
Authentication endpoints.

Registration, login, the current-user profile and password changes.
"""

from fastapi import APIRouter, status

from rd_prediction.core.utils.logging import get_logger
from rd_prediction.presentation.api.dependencies import AuthServiceDep, CurrentUserDep
from rd_prediction.presentation.api.schemas.auth import (
    AuthData,
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
    UpdateProfileRequest,
    UserData,
    UserResponse,
)
from rd_prediction.presentation.api.schemas.common import ApiResponse, MessageResponse

router = APIRouter()
logger = get_logger(__name__)


@router.post(
    "/register",
    response_model=ApiResponse[AuthData],
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
)
async def register(payload: RegisterRequest, auth_service: AuthServiceDep) -> ApiResponse[AuthData]:
    user, token = await auth_service.register(
        username=payload.username,
        email=str(payload.email),
        password=payload.password,
        role=payload.role,
    )
    return ApiResponse(
        message="User registered successfully",
        data=AuthData(user=UserResponse.model_validate(user), token=token),
    )


@router.post("/login", response_model=ApiResponse[AuthData], summary="Log in with e-mail and password")
async def login(payload: LoginRequest, auth_service: AuthServiceDep) -> ApiResponse[AuthData]:
    user, token = await auth_service.login(str(payload.email), payload.password)
    return ApiResponse(
        message="Login successful",
        data=AuthData(user=UserResponse.model_validate(user), token=token),
    )


@router.get("/me", response_model=ApiResponse[UserData], summary="Current user")
async def me(current_user: CurrentUserDep) -> ApiResponse[UserData]:
    return ApiResponse(data=UserData(user=UserResponse.model_validate(current_user)))


@router.get("/profile", response_model=ApiResponse[UserData], summary="Current user profile")
async def get_profile(current_user: CurrentUserDep) -> ApiResponse[UserData]:
    return ApiResponse(data=UserData(user=UserResponse.model_validate(current_user)))


@router.put("/profile", response_model=ApiResponse[UserData], summary="Update username or e-mail")
async def update_profile(
    payload: UpdateProfileRequest,
    current_user: CurrentUserDep,
    auth_service: AuthServiceDep,
) -> ApiResponse[UserData]:
    user = await auth_service.update_profile(
        current_user,
        username=payload.username,
        email=str(payload.email) if payload.email else None,
    )
    return ApiResponse(
        message="Profile updated successfully",
        data=UserData(user=UserResponse.model_validate(user)),
    )


@router.put("/change-password", response_model=MessageResponse, summary="Change the account password")
async def change_password(
    payload: ChangePasswordRequest,
    current_user: CurrentUserDep,
    auth_service: AuthServiceDep,
) -> MessageResponse:
    await auth_service.change_password(current_user, payload.current_password, payload.new_password)
    return MessageResponse(message="Password changed successfully")
