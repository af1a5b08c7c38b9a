"""
Identity context: who is calling.

Turns credentials into a signed token and a token back into an AuthContext.
The ticket core only ever sees the resulting AuthContext; password hashing
and token mechanics stay in helpdesk.core.security.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from helpdesk.core.config import Settings
from helpdesk.core.enums import Role, utcnow
from helpdesk.core.errors import (
    AuthenticationError,
    ConflictError,
    InvalidTokenError,
    NotFoundError,
    ValidationError,
)
from helpdesk.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from helpdesk.core.validation import require_text
from helpdesk.db.models import Usuario
from helpdesk.db.session import atomic
from helpdesk.services.access_policy import Action, require

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthContext:
    """Resolved caller identity attached to every core operation."""
    caller_id: int
    username: str
    role: Role

    @property
    def is_technician(self) -> bool:
        return self.role == Role.TECHNICIAN


def context_from_token(token: str, settings: Settings) -> AuthContext:
    """Verify `token` and rebuild the caller identity from its claims."""
    claims = decode_access_token(token, settings)
    try:
        return AuthContext(
            caller_id=int(claims["id"]),
            username=str(claims["username"]),
            role=Role(claims["rol"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidTokenError() from e


class IdentityService:
    """Login, account registration and user lookups."""

    def __init__(self, session: Session, settings: Settings):
        self.session = session
        self.settings = settings

    def get_user(self, user_id: int) -> Usuario:
        user = self.session.get(Usuario, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def find_by_username(self, username: str) -> Optional[Usuario]:
        query = select(Usuario).where(Usuario.username == username)
        return self.session.scalars(query).one_or_none()

    def authenticate(self, username: str, password: str) -> Tuple[str, Usuario]:
        """
        Check credentials of an active account and issue an access token.

        Unknown user, inactive user and wrong password are indistinguishable
        to the caller.
        """
        if not username or not password:
            raise ValidationError("Username and password required")

        user = self.find_by_username(username)
        if user is None or not user.activo or not verify_password(password, user.password):
            logger.warning(f"Failed login for '{username}'")
            raise AuthenticationError("Invalid credentials")

        token = create_access_token(
            {"id": user.id, "username": user.username, "rol": user.rol},
            self.settings,
        )
        logger.info(f"User '{username}' logged in")
        return token, user

    def register(
        self,
        caller: AuthContext,
        username: str,
        password: str,
        nombre: str,
        rol: str,
        email: Optional[str] = None
    ) -> Usuario:
        """Create a new account. Technicians only."""
        require(caller, Action.REGISTER_ACCOUNT)
        return self._create_user(username, password, nombre, rol, email)

    def ensure_admin(self) -> bool:
        """Create the configured technician account if it does not exist yet."""
        if self.find_by_username(self.settings.ADMIN_USERNAME) is not None:
            return False
        self._create_user(
            self.settings.ADMIN_USERNAME,
            self.settings.ADMIN_PASSWORD,
            self.settings.ADMIN_NOMBRE,
            Role.TECHNICIAN.value,
            self.settings.ADMIN_EMAIL,
        )
        return True

    def _create_user(
        self,
        username: str,
        password: str,
        nombre: str,
        rol: str,
        email: Optional[str]
    ) -> Usuario:
        require_text(username=username, nombre=nombre, rol=rol)
        if not password:
            raise ValidationError("Incomplete data: password required")
        try:
            role = Role(rol)
        except ValueError as e:
            raise ValidationError(f"Invalid role: {rol}") from e

        user = Usuario(
            username=username.strip(),
            password=hash_password(password),
            nombre=nombre.strip(),
            rol=role.value,
            email=email or None,
            activo=True,
            fecha_creacion=utcnow(),
        )
        try:
            with atomic(self.session):
                self.session.add(user)
                self.session.flush()
        except ConflictError as e:
            raise ConflictError("User already exists") from e

        logger.info(f"Account '{user.username}' created with role {role.value}")
        return user
