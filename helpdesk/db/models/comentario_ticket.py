from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from helpdesk.db.base import Base
from helpdesk.core.enums import utcnow

class ComentarioTicket(Base):
    """
    Modelo para los comentarios de tickets.

    Solo se agregan, nunca se editan ni se borran por separado:
    desaparecen únicamente junto con su ticket (ON DELETE CASCADE).
    """
    __tablename__ = "comentarios"

    id = Column(Integer, primary_key=True, index=True)
    ticket_id = Column(Integer, ForeignKey("tickets.id", ondelete="CASCADE"), nullable=False)
    usuario_id = Column(Integer, ForeignKey("usuarios.id"), nullable=False)  # autor
    texto = Column(Text, nullable=False)
    fecha_creacion = Column(DateTime, nullable=False, default=utcnow)

    # Relaciones
    ticket = relationship("Ticket", back_populates="comentarios")
    usuario = relationship("Usuario", back_populates="comentarios")

    __table_args__ = (
        Index("ix_comentarios_ticket", "ticket_id", "fecha_creacion"),
    )
