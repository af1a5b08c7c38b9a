"""
Schemas for login and account registration
"""
from pydantic import BaseModel, ConfigDict
from typing import Optional

from helpdesk.core.enums import Role


class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""


class RegisterRequest(BaseModel):
    username: str = ""
    password: str = ""
    nombre: str = ""
    rol: str = ""
    email: Optional[str] = None


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    nombre: str
    rol: Role
    email: Optional[str] = None


class LoginResponse(BaseModel):
    token: str
    usuario: UserResponse


class IdentityResponse(BaseModel):
    id: int
    username: str
    rol: Role
