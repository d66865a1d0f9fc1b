"""Team member endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Header, Query, status

from salesdesk.api.v1._authz import authorize_or_raise, not_found, unprocessable
from salesdesk.core.exceptions import ValidationError
from salesdesk.database.db import get_db_session
from salesdesk.schemas.profiles import ProfileCreateRequest, ProfileResponse, ProfileUpdateRequest, TeamStatsResponse
from salesdesk.services.profile_service import ProfileService

router = APIRouter(prefix="/members", tags=["members"])


@router.get("", response_model=list[ProfileResponse])
def list_members(
    role: str | None = Query(default=None),
    active: bool | None = Query(default=None),
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> list[ProfileResponse]:
    authorize_or_raise(authorization, scopes=["members.read"])
    with get_db_session() as session:
        try:
            profiles = ProfileService(db=session).list_profiles(role=role, active=active)
        except ValueError as exc:
            raise unprocessable(exc) from exc
        return [ProfileResponse.model_validate(profile) for profile in profiles]


@router.get("/stats", response_model=TeamStatsResponse)
def member_stats(authorization: str | None = Header(default=None, alias="Authorization")) -> TeamStatsResponse:
    authorize_or_raise(authorization, scopes=["members.read"])
    with get_db_session() as session:
        return TeamStatsResponse(**ProfileService(db=session).team_stats())


@router.post("", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
def create_member(payload: ProfileCreateRequest, authorization: str | None = Header(default=None, alias="Authorization")) -> ProfileResponse:
    authorize_or_raise(authorization, scopes=["members.write"])
    with get_db_session() as session:
        try:
            profile = ProfileService(db=session).create_profile(
                full_name=payload.full_name,
                email=payload.email,
                role=payload.role.value,
                department=payload.department,
                phone=payload.phone,
            )
        except ValidationError as exc:
            raise unprocessable(exc) from exc
        return ProfileResponse.model_validate(profile)


@router.get("/{profile_id}", response_model=ProfileResponse)
def get_member(profile_id: str, authorization: str | None = Header(default=None, alias="Authorization")) -> ProfileResponse:
    authorize_or_raise(authorization, scopes=["members.read"])
    with get_db_session() as session:
        profile = ProfileService(db=session).get_profile(profile_id)
        if profile is None:
            raise not_found("Member", profile_id)
        return ProfileResponse.model_validate(profile)


@router.patch("/{profile_id}", response_model=ProfileResponse)
def update_member(
    profile_id: str,
    payload: ProfileUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> ProfileResponse:
    authorize_or_raise(authorization, scopes=["members.write"])
    with get_db_session() as session:
        try:
            profile = ProfileService(db=session).update_profile(profile_id, payload.model_dump(exclude_unset=True))
        except ValidationError as exc:
            raise unprocessable(exc) from exc
        if profile is None:
            raise not_found("Member", profile_id)
        return ProfileResponse.model_validate(profile)


@router.post("/{profile_id}/promote", response_model=ProfileResponse)
def promote_member(profile_id: str, authorization: str | None = Header(default=None, alias="Authorization")) -> ProfileResponse:
    authorize_or_raise(authorization, scopes=["members.write"])
    with get_db_session() as session:
        profile = ProfileService(db=session).promote(profile_id)
        if profile is None:
            raise not_found("Member", profile_id)
        return ProfileResponse.model_validate(profile)


@router.delete("/{profile_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_member(profile_id: str, authorization: str | None = Header(default=None, alias="Authorization")) -> None:
    authorize_or_raise(authorization, scopes=["members.write"])
    with get_db_session() as session:
        if not ProfileService(db=session).delete_profile(profile_id):
            raise not_found("Member", profile_id)
