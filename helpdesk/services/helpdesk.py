"""
HelpdeskService: one entry point per ticket operation.

Each method gates the action through the access policy, then delegates the
persistent effect to the stores and the lifecycle engine.
"""
from typing import Callable, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from helpdesk.core.enums import utcnow
from helpdesk.db.models import ComentarioTicket, Ticket
from helpdesk.services.access_policy import Action, require
from helpdesk.services.comment_store import CommentStore, CommentView
from helpdesk.services.identity import AuthContext
from helpdesk.services.lifecycle import TicketChanges, TicketLifecycle
from helpdesk.services.statistics import StatisticsService
from helpdesk.services.ticket_store import TicketFilters, TicketStore


class HelpdeskService:
    def __init__(self, session: Session, clock: Callable = utcnow):
        self.tickets = TicketStore(session, clock)
        self.comments = CommentStore(session, clock)
        self.lifecycle = TicketLifecycle(self.tickets)
        self.statistics = StatisticsService(session)

    # -------------------- tickets --------------------

    def list_tickets(
        self,
        caller: AuthContext,
        filters: Optional[TicketFilters] = None
    ) -> List[Tuple[Ticket, int]]:
        """Visible tickets with their comment totals."""
        require(caller, Action.LIST_TICKETS)
        tickets = self.tickets.list(filters or TicketFilters(), caller)
        counts = self.tickets.comment_counts(t.id for t in tickets)
        return [(t, counts.get(t.id, 0)) for t in tickets]

    def get_ticket(self, caller: AuthContext, ticket_id: int) -> Tuple[Ticket, List[CommentView]]:
        ticket = self.tickets.get(ticket_id)
        require(caller, Action.READ_TICKET, ticket.usuario_id)
        return ticket, self.comments.list_by_ticket(ticket_id)

    def create_ticket(
        self,
        caller: AuthContext,
        tipo: str,
        titulo: str,
        descripcion: str,
        ubicacion: str
    ) -> Ticket:
        require(caller, Action.CREATE_TICKET)
        return self.tickets.create(caller.caller_id, tipo, titulo, descripcion, ubicacion)

    def update_ticket(self, caller: AuthContext, ticket_id: int, changes: TicketChanges) -> Ticket:
        require(caller, Action.UPDATE_TICKET)
        return self.tickets.update(ticket_id, changes)

    def assign_ticket(
        self,
        caller: AuthContext,
        ticket_id: int,
        technician_id: Optional[int] = None
    ) -> Ticket:
        return self.lifecycle.assign(ticket_id, caller, technician_id)

    def delete_ticket(self, caller: AuthContext, ticket_id: int) -> None:
        require(caller, Action.DELETE_TICKET)
        self.tickets.delete(ticket_id)

    # -------------------- comentarios --------------------

    def add_comment(self, caller: AuthContext, ticket_id: int, texto: str) -> ComentarioTicket:
        require(caller, Action.ADD_COMMENT)
        return self.comments.add(ticket_id, caller.caller_id, texto)

    def list_comments(self, caller: AuthContext, ticket_id: int) -> List[CommentView]:
        ticket = self.tickets.get(ticket_id)
        require(caller, Action.READ_COMMENTS, ticket.usuario_id)
        return self.comments.list_by_ticket(ticket_id)

    # -------------------- estadisticas --------------------

    def summary(self, caller: AuthContext) -> Dict[str, int]:
        require(caller, Action.VIEW_STATISTICS)
        return self.statistics.summary()

    def by_type(self, caller: AuthContext) -> List[Tuple[str, int]]:
        require(caller, Action.VIEW_STATISTICS)
        return self.statistics.by_type()
