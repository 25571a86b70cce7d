from fastapi import APIRouter, Depends

from medgram.core.security import Identity
from medgram.dependencies.auth import get_auth_service, get_current_identity
from medgram.schemas.user import (
    LoginResponse,
    RegisterResponse,
    UserCreate,
    UserLogin,
    UserOut,
    UserSummary,
)
from medgram.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse)
async def register(
    data: UserCreate,
    auth: AuthService = Depends(get_auth_service),
):
    """Register a new user and sign them in"""
    user, token = await auth.register(
        username=data.username,
        password=data.password,
        full_name=data.full_name,
        role=data.role,
        npi_number=data.npi_number,
    )
    return RegisterResponse(
        user=UserSummary(id=user.id, username=user.username, role=user.role),
        token=token,
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    data: UserLogin,
    auth: AuthService = Depends(get_auth_service),
):
    """Authenticate user and return a fresh token"""
    user, token = await auth.login(data.username, data.password)
    return LoginResponse(user=UserOut.model_validate(user), token=token)


@router.get("/me", response_model=UserOut)
async def me(
    identity: Identity = Depends(get_current_identity),
    auth: AuthService = Depends(get_auth_service),
):
    """Get current authenticated user info"""
    user = await auth.current_user(identity)
    return UserOut.model_validate(user)
