"""
Statistics derived from the ticket table at call time (no caching).
"""
from typing import Dict, List, Tuple

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from helpdesk.core.enums import EstadoTicket
from helpdesk.db.models import Ticket


def _count_estado(estado: EstadoTicket):
    return func.coalesce(func.sum(case((Ticket.estado == estado.value, 1), else_=0)), 0)


class StatisticsService:
    def __init__(self, session: Session):
        self.session = session

    def summary(self) -> Dict[str, int]:
        """Totals partitioned by estado, from one aggregate query."""
        query = select(
            func.count(Ticket.id),
            _count_estado(EstadoTicket.PENDING),
            _count_estado(EstadoTicket.IN_PROGRESS),
            _count_estado(EstadoTicket.RESOLVED),
        )
        total, pending, in_progress, resolved = self.session.execute(query).one()
        return {
            "total": int(total),
            "pending_count": int(pending),
            "in_progress_count": int(in_progress),
            "resolved_count": int(resolved),
        }

    def by_type(self) -> List[Tuple[str, int]]:
        """(tipo, count) pairs, most frequent first."""
        cantidad = func.count(Ticket.id).label("cantidad")
        query = (
            select(Ticket.tipo, cantidad)
            .group_by(Ticket.tipo)
            .order_by(cantidad.desc(), Ticket.tipo.asc())
        )
        return [(tipo, int(count)) for tipo, count in self.session.execute(query)]
