"""
Authentication Endpoints.

Signup, login and logout, token refresh, and password change and reset.
Every endpoint that issues a token returns it in the body and also sets the
``jwt`` cookie.
"""

from fastapi import APIRouter, Depends, Response

from travel_buddy.core.logging_config import get_logger
from travel_buddy.core.models.io.auth import (
    AuthResponse,
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    LoginRequest,
    MessageResponse,
    ResetPasswordRequest,
    SignupRequest,
    UpdatePasswordRequest,
)
from travel_buddy.core.models.io.users import UserRead
from travel_buddy.server.core.config import settings
from travel_buddy.server.services.auth import clear_token_cookie, issue_token
from travel_buddy.server.services.deps import AccountServiceDep, CurrentUserDep
from travel_buddy.server.services.rate_limit import auth_rate_limit, sensitive_rate_limit

logger = get_logger(__name__)
router = APIRouter()

FORGOT_PASSWORD_MESSAGE = "If an account with that email exists, a password reset token has been issued."


def _auth_response(user, response: Response) -> AuthResponse:
    token = issue_token(user, response)
    return AuthResponse(token=token, user=UserRead.model_validate(user))


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=201,
    summary="Sign Up",
    description="Create an account and log it in.",
    response_description="The access token and the new user.",
    responses={400: {"description": "Missing or invalid fields, or the email is already registered"}},
)
async def signup(payload: SignupRequest, response: Response, accounts: AccountServiceDep) -> AuthResponse:
    """
    Create an account.

    - **name**, **email**, **password**, **password_confirm**: required
    - **travel_preferences**: merged over the default preferences
    - **languages**: spoken languages
    """
    user = await accounts.signup(payload)
    return _auth_response(user, response)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Log In",
    description="Log in with email and password. Repeated failures lock the account for a few minutes.",
    response_description="The access token and the user.",
    responses={401: {"description": "Invalid credentials"}, 423: {"description": "Account locked"}},
    dependencies=[Depends(auth_rate_limit)],
)
async def login(payload: LoginRequest, response: Response, accounts: AccountServiceDep) -> AuthResponse:
    user = await accounts.login(payload.email, payload.password)
    return _auth_response(user, response)


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Log Out",
    description="Replace the token cookie with a short-lived placeholder.",
)
async def logout(response: Response) -> MessageResponse:
    clear_token_cookie(response)
    return MessageResponse(message="Logged out successfully")


@router.post(
    "/refresh-token",
    response_model=AuthResponse,
    summary="Refresh Token",
    description="Issue a fresh token for the authenticated user.",
)
async def refresh_token(user: CurrentUserDep, response: Response) -> AuthResponse:
    return _auth_response(user, response)


@router.get(
    "/me",
    response_model=UserRead,
    summary="Current User",
    description="Return the authenticated user's account.",
)
async def me(user: CurrentUserDep) -> UserRead:
    return UserRead.model_validate(user)


@router.patch(
    "/update-password",
    response_model=AuthResponse,
    summary="Update Password",
    description="Change the password of the authenticated user. Tokens issued before the change stop working.",
    responses={400: {"description": "New passwords mismatch or too short"}, 401: {"description": "Wrong password"}},
    dependencies=[Depends(sensitive_rate_limit)],
)
async def update_password(
    payload: UpdatePasswordRequest, user: CurrentUserDep, response: Response, accounts: AccountServiceDep
) -> AuthResponse:
    user = await accounts.update_password(
        user, payload.current_password, payload.new_password, payload.password_confirm
    )
    return _auth_response(user, response)


@router.post(
    "/forgot-password",
    response_model=ForgotPasswordResponse,
    summary="Forgot Password",
    description="Start a password reset. The response is the same whether or not the email is registered.",
    dependencies=[Depends(sensitive_rate_limit)],
)
async def forgot_password(payload: ForgotPasswordRequest, accounts: AccountServiceDep) -> ForgotPasswordResponse:
    """
    Request a password reset token.

    Outside production the raw token is echoed back as **reset_token** so the
    reset can be completed without mail delivery.
    """
    raw = await accounts.forgot_password(payload.email)
    return ForgotPasswordResponse(
        message=FORGOT_PASSWORD_MESSAGE,
        reset_token=None if settings.is_production else raw,
    )


@router.patch(
    "/reset-password/{token}",
    response_model=AuthResponse,
    summary="Reset Password",
    description="Set a new password with a reset token and log in.",
    responses={400: {"description": "Passwords mismatch or the token is invalid or expired"}},
)
async def reset_password(
    token: str, payload: ResetPasswordRequest, response: Response, accounts: AccountServiceDep
) -> AuthResponse:
    user = await accounts.reset_password(token, payload.password, payload.password_confirm)
    return _auth_response(user, response)
