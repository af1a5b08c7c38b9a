"""
Comment store: append-only comments scoped to one ticket.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List

from sqlalchemy import select
from sqlalchemy.orm import Session

from helpdesk.core.enums import utcnow
from helpdesk.core.errors import NotFoundError
from helpdesk.core.validation import require_text
from helpdesk.db.models import ComentarioTicket, Ticket, Usuario
from helpdesk.db.session import atomic
from helpdesk.services.lifecycle import touch

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommentView:
    """A comment as read, with its author's display name joined in."""
    id: int
    ticket_id: int
    usuario_id: int
    texto: str
    fecha_creacion: datetime
    autor_nombre: str


class CommentStore:
    def __init__(self, session: Session, clock: Callable = utcnow):
        self.session = session
        self.clock = clock

    def add(self, ticket_id: int, author_id: int, texto: str) -> ComentarioTicket:
        """
        Append a comment and refresh the parent's fecha_actualizacion.

        Existence check, insert and timestamp bump share one transaction. The
        parent row is locked where the engine supports it, and a parent
        deleted in between still fails the foreign key, which atomic() turns
        into NotFoundError. Either way no comment is left without its ticket.
        """
        require_text(texto=texto)

        with atomic(self.session):
            query = (
                select(Ticket)
                .where(Ticket.id == ticket_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            ticket = self.session.scalars(query).one_or_none()
            if ticket is None:
                raise NotFoundError("Ticket not found")

            now = self.clock()
            comment = ComentarioTicket(
                ticket_id=ticket_id,
                usuario_id=author_id,
                texto=texto,
                fecha_creacion=now,
            )
            self.session.add(comment)
            touch(ticket, now)
            self.session.flush()

        logger.info(f"Comment {comment.id} added to ticket {ticket_id} by user {author_id}")
        return comment

    def list_by_ticket(self, ticket_id: int) -> List[CommentView]:
        """Oldest first. An unknown ticket simply has no comments."""
        query = (
            select(ComentarioTicket, Usuario.nombre)
            .join(Usuario, ComentarioTicket.usuario_id == Usuario.id)
            .where(ComentarioTicket.ticket_id == ticket_id)
            .order_by(ComentarioTicket.fecha_creacion.asc(), ComentarioTicket.id.asc())
        )
        return [
            CommentView(
                id=comment.id,
                ticket_id=comment.ticket_id,
                usuario_id=comment.usuario_id,
                texto=comment.texto,
                fecha_creacion=comment.fecha_creacion,
                autor_nombre=nombre,
            )
            for comment, nombre in self.session.execute(query)
        ]
