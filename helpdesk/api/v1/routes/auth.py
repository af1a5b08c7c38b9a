"""
API routes for login and account registration
"""
from fastapi import APIRouter, Depends, status

from helpdesk.api.deps import get_auth_context, get_identity
from helpdesk.schemas.auth import (
    IdentityResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    UserResponse,
)
from helpdesk.schemas.tickets import CreatedResponse
from helpdesk.services.identity import AuthContext, IdentityService


router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=LoginResponse)
def login(credentials: LoginRequest, identity: IdentityService = Depends(get_identity)):
    """Exchange username/password for an access token"""
    token, user = identity.authenticate(credentials.username, credentials.password)
    return LoginResponse(token=token, usuario=UserResponse.model_validate(user))


@router.post("/registro", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
def register(
    request: RegisterRequest,
    caller: AuthContext = Depends(get_auth_context),
    identity: IdentityService = Depends(get_identity),
):
    """Create a new account (technicians only)"""
    user = identity.register(
        caller,
        username=request.username,
        password=request.password,
        nombre=request.nombre,
        rol=request.rol,
        email=request.email,
    )
    return CreatedResponse(mensaje="User created successfully", id=user.id)


@router.get("/me", response_model=IdentityResponse)
def me(caller: AuthContext = Depends(get_auth_context)):
    return IdentityResponse(id=caller.caller_id, username=caller.username, rol=caller.role)
