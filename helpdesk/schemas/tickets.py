"""
Schemas for tickets and their comments
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from datetime import datetime

from helpdesk.core.enums import EstadoTicket, Prioridad
from helpdesk.db.models import Ticket
from helpdesk.services.comment_store import CommentView
from helpdesk.services.lifecycle import TicketChanges


# Required text is checked by TicketStore so that a missing and an empty
# field are reported the same way.
class TicketCreate(BaseModel):
    tipo: str = ""
    titulo: str = ""
    descripcion: str = ""
    ubicacion: str = ""


class TicketUpdate(BaseModel):
    estado: Optional[EstadoTicket] = None
    prioridad: Optional[Prioridad] = None
    asignado_a: Optional[int] = None

    @field_validator("estado", "prioridad", mode="before")
    @classmethod
    def blank_is_missing(cls, value):
        if value == "":
            return None
        return value

    def to_changes(self) -> TicketChanges:
        # asignado_a sent explicitly as null clears the assignee
        unassign = "asignado_a" in self.model_fields_set and self.asignado_a is None
        return TicketChanges(
            estado=self.estado,
            prioridad=self.prioridad,
            asignado_a=self.asignado_a,
            unassign=unassign,
        )


class AssignRequest(BaseModel):
    tecnico_id: Optional[int] = None


class CommentCreate(BaseModel):
    texto: str = ""


class TicketResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tipo: str
    titulo: str
    descripcion: str
    ubicacion: str
    usuario_id: int
    estado: EstadoTicket
    prioridad: Prioridad
    asignado_a: Optional[int] = None
    fecha_creacion: datetime
    fecha_actualizacion: datetime
    fecha_resolucion: Optional[datetime] = None


class TicketListItem(TicketResponse):
    usuario_nombre: Optional[str] = None
    tecnico_nombre: Optional[str] = None
    total_comentarios: int = 0

    @classmethod
    def from_ticket(cls, ticket: Ticket, total_comentarios: int) -> "TicketListItem":
        base = TicketResponse.model_validate(ticket).model_dump()
        return cls(
            **base,
            usuario_nombre=ticket.usuario.nombre if ticket.usuario else None,
            tecnico_nombre=ticket.tecnico.nombre if ticket.tecnico else None,
            total_comentarios=total_comentarios,
        )


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    ticket_id: int
    usuario_id: int
    texto: str
    fecha_creacion: datetime
    autor_nombre: str


class TicketDetail(TicketResponse):
    usuario_nombre: Optional[str] = None
    usuario_email: Optional[str] = None
    tecnico_nombre: Optional[str] = None
    tecnico_email: Optional[str] = None
    comentarios: List[CommentResponse] = Field(default_factory=list)

    @classmethod
    def from_ticket(cls, ticket: Ticket, comentarios: List[CommentView]) -> "TicketDetail":
        base = TicketResponse.model_validate(ticket).model_dump()
        return cls(
            **base,
            usuario_nombre=ticket.usuario.nombre if ticket.usuario else None,
            usuario_email=ticket.usuario.email if ticket.usuario else None,
            tecnico_nombre=ticket.tecnico.nombre if ticket.tecnico else None,
            tecnico_email=ticket.tecnico.email if ticket.tecnico else None,
            comentarios=[CommentResponse.model_validate(c) for c in comentarios],
        )


class CreatedResponse(BaseModel):
    mensaje: str
    id: int


class TicketMutationResponse(BaseModel):
    mensaje: str
    ticket: TicketResponse
