"""
HTTP routes for the StoreIt API.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile
from fastapi.responses import RedirectResponse

from storeit.actions import files as file_actions
from storeit.actions import users as user_actions
from storeit.config import get_settings
from storeit.dependencies import (
    get_current_user_optional,
    get_gateway,
    get_session_secret,
    require_current_user,
)
from storeit.gateway import BackendGateway
from storeit.results import DomainError, DomainErrorKind, InfrastructureError
from storeit.schemas import (
    AccountIdResponse,
    CurrentUserResponse,
    FileListResponse,
    FileResponse,
    RenameFileRequest,
    SessionResponse,
    ShareFileRequest,
    SignInRequest,
    SignUpRequest,
    UsageResponse,
    VerifyRequest,
)
from storeit.utils import FILE_TYPES, convert_file_size, get_file_types_params

router = APIRouter()

_DOMAIN_ERROR_STATUS = {
    DomainErrorKind.USER_ALREADY_EXISTS: 409,
    DomainErrorKind.USER_NOT_FOUND: 404,
}


def _raise_for_domain_error(result) -> None:
    if isinstance(result, DomainError):
        raise HTTPException(
            status_code=_DOMAIN_ERROR_STATUS[result.kind], detail=result.message
        )


@router.post("/auth/sign-up", response_model=AccountIdResponse)
def sign_up(payload: SignUpRequest, gateway: BackendGateway = Depends(get_gateway)):
    result = user_actions.create_account(
        gateway, full_name=payload.full_name, email=payload.email
    )
    _raise_for_domain_error(result)
    return AccountIdResponse(account_id=result.value)


@router.post("/auth/sign-in", response_model=AccountIdResponse)
def sign_in(payload: SignInRequest, gateway: BackendGateway = Depends(get_gateway)):
    result = user_actions.sign_in_user(gateway, email=payload.email)
    _raise_for_domain_error(result)
    return AccountIdResponse(account_id=result.value)


@router.post("/auth/verify", response_model=SessionResponse)
def verify(
    payload: VerifyRequest,
    response: Response,
    gateway: BackendGateway = Depends(get_gateway),
):
    try:
        session_id = user_actions.verify_secret(
            gateway, response, account_id=payload.account_id, password=payload.password
        )
    except InfrastructureError as exc:
        if exc.code in (400, 401, 404):
            raise HTTPException(status_code=401, detail="Invalid or expired OTP")
        raise
    return SessionResponse(session_id=session_id)


@router.get("/auth/me", response_model=CurrentUserResponse)
def me(current_user: dict = Depends(require_current_user)):
    return CurrentUserResponse.from_record(current_user)


@router.post("/auth/sign-out")
def sign_out(
    gateway: BackendGateway = Depends(get_gateway),
    session_secret: Optional[str] = Depends(get_session_secret),
):
    return user_actions.sign_out_user(gateway, session_secret)


@router.get("/files/{type_}", response_model=None)
def list_files(
    type_: str,
    query: str = Query("", max_length=100),
    sort: str = Query(""),
    limit: Optional[int] = Query(None, ge=1, le=100),
    gateway: BackendGateway = Depends(get_gateway),
    current_user: Optional[dict] = Depends(get_current_user_optional),
):
    if not current_user:
        return RedirectResponse(get_settings().sign_in_path, status_code=307)

    types = get_file_types_params(type_)
    files = file_actions.get_files(
        gateway,
        current_user,
        types=types,
        search_text=query,
        sort=sort or None,
        limit=limit,
    )
    total_size = sum(doc.get("size", 0) for doc in files["documents"])
    return FileListResponse(
        type=type_,
        types=types,
        total=files["total"],
        total_size=convert_file_size(total_size),
        documents=files["documents"],
        user=CurrentUserResponse.from_record(current_user),
    )


@router.post("/files", response_model=FileResponse, status_code=201)
async def upload(
    file: UploadFile = File(...),
    gateway: BackendGateway = Depends(get_gateway),
    current_user: dict = Depends(require_current_user),
):
    if not file.filename:
        raise HTTPException(status_code=400, detail="File name required")

    content = await file.read()
    max_size = get_settings().max_file_size
    if len(content) > max_size:
        raise HTTPException(
            status_code=413,
            detail=f"File is too large. Max size is {convert_file_size(max_size)}",
        )

    document = file_actions.upload_file(
        gateway,
        filename=file.filename,
        content=content,
        owner_id=current_user["$id"],
        account_id=current_user["accountId"],
    )
    return FileResponse(file=document)


@router.patch("/files/{file_id}", response_model=FileResponse)
def rename(
    file_id: str,
    payload: RenameFileRequest,
    gateway: BackendGateway = Depends(get_gateway),
    current_user: dict = Depends(require_current_user),
):
    document = file_actions.rename_file(
        gateway, file_id=file_id, name=payload.name, extension=payload.extension
    )
    return FileResponse(file=document)


@router.put("/files/{file_id}/users", response_model=FileResponse)
def share(
    file_id: str,
    payload: ShareFileRequest,
    gateway: BackendGateway = Depends(get_gateway),
    current_user: dict = Depends(require_current_user),
):
    document = file_actions.update_file_users(
        gateway, file_id=file_id, emails=payload.emails
    )
    return FileResponse(file=document)


@router.delete("/files/{file_id}", status_code=204)
def delete(
    file_id: str,
    bucket_file_id: str = Query(...),
    gateway: BackendGateway = Depends(get_gateway),
    current_user: dict = Depends(require_current_user),
):
    file_actions.delete_file(gateway, file_id=file_id, bucket_file_id=bucket_file_id)
    return Response(status_code=204)


@router.get("/files-usage", response_model=UsageResponse)
def usage(
    gateway: BackendGateway = Depends(get_gateway),
    current_user: dict = Depends(require_current_user),
):
    total_space = file_actions.get_total_space_used(gateway, current_user)
    for file_type in FILE_TYPES:
        bucket = total_space[file_type]
        bucket["readable_size"] = convert_file_size(bucket["size"])
    return UsageResponse(**total_space)
