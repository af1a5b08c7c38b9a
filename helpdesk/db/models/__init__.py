from .usuario import Usuario
from .ticket import Ticket
from .comentario_ticket import ComentarioTicket

__all__ = [
    "Usuario",
    "Ticket",
    "ComentarioTicket",
]
