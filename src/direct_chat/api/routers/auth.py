from __future__ import annotations

from fastapi import APIRouter

from direct_chat.api.deps import CurrentPrincipal, HasherDep, TokensDep, UoWDep
from direct_chat.api.schemas.common import Envelope
from direct_chat.api.schemas.user import (
    ChangePasswordRequest,
    LoginRequest,
    ProfileResponse,
    ProfileUpdateRequest,
    RegisterRequest,
    TokenResponse,
)
from direct_chat.application.dto.user import ProfileUpdateDTO, RegisterUserDTO
from direct_chat.services import auth_service, user_service

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=Envelope[TokenResponse], status_code=201)
async def register(
    body: RegisterRequest,
    uow: UoWDep,
    hasher: HasherDep,
    tokens: TokensDep,
) -> Envelope[TokenResponse]:
    token = await auth_service.register(
        RegisterUserDTO(
            username=body.username,
            fullname=body.fullname,
            email=body.email,
            password=body.password,
        ),
        uow,
        hasher,
        tokens,
    )
    return Envelope(message="User registered successfully", data=TokenResponse(token=token))


@router.post("/login", response_model=Envelope[TokenResponse])
async def login(
    body: LoginRequest,
    uow: UoWDep,
    hasher: HasherDep,
    tokens: TokensDep,
) -> Envelope[TokenResponse]:
    token = await auth_service.login(body.username, body.password, uow, hasher, tokens)
    return Envelope(message="Login successful", data=TokenResponse(token=token))


@router.get("/profile", response_model=Envelope[ProfileResponse])
async def get_profile(principal: CurrentPrincipal, uow: UoWDep) -> Envelope[ProfileResponse]:
    user = await user_service.get_profile(principal, uow)
    return Envelope(
        message="Profile retrieved successfully",
        data=ProfileResponse.model_validate(user, from_attributes=True),
    )


@router.post("/profile/update", response_model=Envelope[ProfileResponse])
async def update_profile(
    body: ProfileUpdateRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> Envelope[ProfileResponse]:
    user = await user_service.update_profile(
        principal,
        ProfileUpdateDTO(username=body.username, fullname=body.fullname, email=body.email),
        uow,
    )
    return Envelope(
        message="Profile updated successfully",
        data=ProfileResponse.model_validate(user, from_attributes=True),
    )


@router.post("/profile/change-password", response_model=Envelope[None])
async def change_password(
    body: ChangePasswordRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
    hasher: HasherDep,
) -> Envelope[None]:
    await user_service.change_password(
        principal,
        body.old_password,
        body.new_password,
        body.confirm_password,
        uow,
        hasher,
    )
    return Envelope(message="Password updated successfully")
