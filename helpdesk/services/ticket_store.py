"""
Ticket store: owns ticket rows and their invariants.

Identity, owner and creation time are written once by `create` and never
again; `update` only reaches the fields listed in TicketChanges.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from helpdesk.core.enums import EstadoTicket, Prioridad, Role, utcnow
from helpdesk.core.errors import NotFoundError, ValidationError
from helpdesk.core.validation import require_text
from helpdesk.db.models import ComentarioTicket, Ticket, Usuario
from helpdesk.db.session import atomic
from helpdesk.services.identity import AuthContext
from helpdesk.services.lifecycle import TicketChanges, apply_changes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TicketFilters:
    """Equality filters for listing; empty values are ignored."""
    estado: Optional[str] = None
    prioridad: Optional[str] = None
    asignado_a: Optional[int] = None
    usuario_id: Optional[int] = None


class TicketStore:
    def __init__(self, session: Session, clock: Callable = utcnow):
        self.session = session
        self.clock = clock

    def create(
        self,
        owner_id: int,
        tipo: str,
        titulo: str,
        descripcion: str,
        ubicacion: str
    ) -> Ticket:
        require_text(tipo=tipo, titulo=titulo, descripcion=descripcion, ubicacion=ubicacion)

        now = self.clock()
        ticket = Ticket(
            tipo=tipo,
            titulo=titulo,
            descripcion=descripcion,
            ubicacion=ubicacion,
            usuario_id=owner_id,
            estado=EstadoTicket.PENDING.value,
            prioridad=Prioridad.MEDIUM.value,
            asignado_a=None,
            fecha_creacion=now,
            fecha_actualizacion=now,
            fecha_resolucion=None,
        )
        with atomic(self.session):
            self.session.add(ticket)
            self.session.flush()

        logger.info(f"Ticket {ticket.id} created by user {owner_id} ({tipo})")
        return ticket

    def get(self, ticket_id: int) -> Ticket:
        ticket = self.session.get(Ticket, ticket_id)
        if ticket is None:
            raise NotFoundError("Ticket not found")
        return ticket

    def list(self, filters: TicketFilters, caller: AuthContext) -> List[Ticket]:
        """Newest first. Plain users only ever see their own tickets."""
        query = select(Ticket).options(
            selectinload(Ticket.usuario),
            selectinload(Ticket.tecnico),
        )

        if filters.estado:
            query = query.where(Ticket.estado == filters.estado)
        if filters.prioridad:
            query = query.where(Ticket.prioridad == filters.prioridad)
        if filters.asignado_a is not None:
            query = query.where(Ticket.asignado_a == filters.asignado_a)
        if filters.usuario_id is not None:
            query = query.where(Ticket.usuario_id == filters.usuario_id)

        if caller.role == Role.USER:
            query = query.where(Ticket.usuario_id == caller.caller_id)

        query = query.order_by(Ticket.fecha_creacion.desc(), Ticket.id.desc())
        return list(self.session.scalars(query))

    def update(self, ticket_id: int, changes: TicketChanges) -> Ticket:
        """Partial update through the lifecycle rules, as one transaction."""
        with atomic(self.session):
            ticket = self._get_for_update(ticket_id)
            if changes.asignado_a is not None:
                self._check_assignee(changes.asignado_a)
            apply_changes(ticket, changes, self.clock())
            self.session.flush()

        logger.info(f"Ticket {ticket_id} updated: {changes}")
        return ticket

    def delete(self, ticket_id: int) -> None:
        """Remove a ticket; its comments go with it."""
        with atomic(self.session):
            ticket = self._get_for_update(ticket_id)
            self.session.delete(ticket)
            self.session.flush()

        logger.info(f"Ticket {ticket_id} deleted")

    def comment_counts(self, ticket_ids: Iterable[int]) -> Dict[int, int]:
        ids = list(ticket_ids)
        if not ids:
            return {}
        query = (
            select(ComentarioTicket.ticket_id, func.count(ComentarioTicket.id))
            .where(ComentarioTicket.ticket_id.in_(ids))
            .group_by(ComentarioTicket.ticket_id)
        )
        return {ticket_id: count for ticket_id, count in self.session.execute(query)}

    def _get_for_update(self, ticket_id: int) -> Ticket:
        query = (
            select(Ticket)
            .where(Ticket.id == ticket_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        ticket = self.session.scalars(query).one_or_none()
        if ticket is None:
            raise NotFoundError("Ticket not found")
        return ticket

    def _check_assignee(self, user_id: int) -> None:
        user = self.session.get(Usuario, user_id)
        if user is None:
            raise NotFoundError("Technician not found")
        if user.rol != Role.TECHNICIAN.value:
            raise ValidationError("Tickets can only be assigned to technicians")
