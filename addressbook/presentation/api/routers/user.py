"""API router for user registration, login and password reset."""

from fastapi import APIRouter, Depends, HTTPException, status

from ....application.services.auth_service import AuthService
from ....core.dependencies import get_auth_service, get_token_service
from ....domain.models import ErrorKind, OperationResult
from ....services.token_service import TokenService
from ..schemas.common import ResponseModel
from ..schemas.user_schemas import (
    ForgotPasswordRequest,
    ResetPasswordRequest,
    UserLoginRequest,
    UserLoginResponse,
    UserProfileResponse,
    UserRegisterRequest,
)

router = APIRouter(prefix="/user", tags=["users"])

_STATUS_BY_ERROR = {
    ErrorKind.VALIDATION_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_400_BAD_REQUEST,
    ErrorKind.DUPLICATE_USER: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.INVALID_OR_EXPIRED_TOKEN: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _raise_for_failure(result: OperationResult) -> None:
    if result.success:
        return
    status_code = _STATUS_BY_ERROR.get(result.error, status.HTTP_400_BAD_REQUEST)
    raise HTTPException(status_code=status_code, detail=result.message)


@router.post(
    "/register",
    response_model=ResponseModel[UserProfileResponse],
    status_code=status.HTTP_201_CREATED,
)
async def register(
    request: UserRegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> ResponseModel[UserProfileResponse]:
    """Register a new user."""
    result = auth_service.register_user(
        name=request.name,
        email=request.email,
        password=request.password,
        role=request.role,
    )
    _raise_for_failure(result)

    return ResponseModel(
        message=result.message,
        data=UserProfileResponse.model_validate(result.data),
    )


@router.post("/login", response_model=ResponseModel[UserLoginResponse])
async def login(
    request: UserLoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
    token_service: TokenService = Depends(get_token_service),
) -> ResponseModel[UserLoginResponse]:
    """Login and get access token."""
    result = auth_service.login_user(request.email, request.password)
    _raise_for_failure(result)

    token = token_service.create_access_token(result.data)
    return ResponseModel(
        message=result.message,
        data=UserLoginResponse(token=token, user=UserProfileResponse.model_validate(result.data)),
    )


@router.post("/forgot-password", response_model=ResponseModel[None])
async def forgot_password(
    request: ForgotPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> ResponseModel[None]:
    """Send a password reset link to the user's email."""
    result = auth_service.forgot_password(request.email)
    _raise_for_failure(result)
    return ResponseModel(message=result.message)


@router.post("/reset-password", response_model=ResponseModel[None])
async def reset_password(
    request: ResetPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> ResponseModel[None]:
    """Set a new password using a reset token."""
    result = auth_service.reset_password(request.token, request.new_password)
    _raise_for_failure(result)
    return ResponseModel(message=result.message)
