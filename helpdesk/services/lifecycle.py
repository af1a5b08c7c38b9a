"""
Ticket lifecycle engine.

State machine over `estado` (pending, in-progress, resolved). Any transition
is allowed; the engine only derives the secondary fields:

- setting estado=resolved stamps fecha_resolucion with the update time
- any other estado leaves fecha_resolucion as it was (it is never cleared)
- every update refreshes fecha_actualizacion, even when no value changed
- assigning a technician forces estado=in-progress, whatever the prior state
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from helpdesk.core.enums import EstadoTicket, Prioridad
from helpdesk.core.errors import ValidationError
from helpdesk.db.models import Ticket
from helpdesk.services.access_policy import Action, require

if TYPE_CHECKING:
    from helpdesk.services.identity import AuthContext
    from helpdesk.services.ticket_store import TicketStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TicketChanges:
    """
    Partial update of the mutable ticket fields.

    None means "not supplied". Clearing the assignee is explicit via
    `unassign=True` so it cannot be confused with an omitted field.
    """
    estado: Optional[EstadoTicket] = None
    prioridad: Optional[Prioridad] = None
    asignado_a: Optional[int] = None
    unassign: bool = False

    def __post_init__(self):
        if self.unassign and self.asignado_a is not None:
            raise ValidationError("Cannot assign and unassign in the same update")

    @property
    def touches_assignee(self) -> bool:
        return self.unassign or self.asignado_a is not None


def touch(ticket: Ticket, now: datetime) -> None:
    # fecha_actualizacion never goes below fecha_creacion
    if ticket.fecha_creacion is not None and now < ticket.fecha_creacion:
        now = ticket.fecha_creacion
    ticket.fecha_actualizacion = now


def apply_changes(ticket: Ticket, changes: TicketChanges, now: datetime) -> Ticket:
    """Apply `changes` to `ticket` in place, deriving the timestamp fields."""
    if changes.estado is not None:
        ticket.estado = changes.estado.value
        if changes.estado == EstadoTicket.RESOLVED:
            ticket.fecha_resolucion = now
        # TODO: decide whether reopening a resolved ticket should clear fecha_resolucion

    if changes.prioridad is not None:
        ticket.prioridad = changes.prioridad.value

    if changes.unassign:
        ticket.asignado_a = None
    elif changes.asignado_a is not None:
        ticket.asignado_a = changes.asignado_a

    touch(ticket, now)
    return ticket


class TicketLifecycle:
    """Assignment workflow on top of TicketStore.update."""

    def __init__(self, store: "TicketStore"):
        self.store = store

    def assign(
        self,
        ticket_id: int,
        caller: "AuthContext",
        technician_id: Optional[int] = None
    ) -> Ticket:
        """
        Assign a ticket to a technician (the caller when none is given).

        Goes through the same persistence path as a generic update, so the
        assignee is validated and fecha_actualizacion refreshed the same way.
        """
        require(caller, Action.ASSIGN_TICKET)
        if not technician_id:
            technician_id = caller.caller_id

        ticket = self.store.update(
            ticket_id,
            TicketChanges(estado=EstadoTicket.IN_PROGRESS, asignado_a=technician_id),
        )
        logger.info(f"Ticket {ticket_id} assigned to technician {technician_id} by {caller.username}")
        return ticket
