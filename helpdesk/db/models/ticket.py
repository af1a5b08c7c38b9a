from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship
from helpdesk.db.base import Base
from helpdesk.core.enums import EstadoTicket, Prioridad, utcnow

class Ticket(Base):
    __tablename__ = "tickets"

    # -------------------- atributos --------------------
    id = Column(Integer, primary_key=True, index=True)
    tipo = Column(String(50), nullable=False)
    titulo = Column(String(200), nullable=False)
    descripcion = Column(Text, nullable=False)
    ubicacion = Column(String(100), nullable=False)
    estado = Column(String(20), nullable=False, default=EstadoTicket.PENDING.value)
    prioridad = Column(String(20), nullable=False, default=Prioridad.MEDIUM.value)

    # -------------------- fks --------------------
    usuario_id = Column(Integer, ForeignKey("usuarios.id"), nullable=False)  # creador, inmutable
    asignado_a = Column(Integer, ForeignKey("usuarios.id"), nullable=True)   # técnico

    # -------------------- auditoria --------------------
    fecha_creacion = Column(DateTime, nullable=False, default=utcnow)
    fecha_actualizacion = Column(DateTime, nullable=False, default=utcnow)
    fecha_resolucion = Column(DateTime, nullable=True)

    # -------------------- relaciones --------------------
    usuario = relationship("Usuario", back_populates="tickets", foreign_keys=[usuario_id])
    tecnico = relationship("Usuario", back_populates="tickets_asignados", foreign_keys=[asignado_a])
    comentarios = relationship(
        "ComentarioTicket",
        back_populates="ticket",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ComentarioTicket.id",
    )

    __table_args__ = (
        CheckConstraint(
            "estado IN ('pending', 'in-progress', 'resolved')", name="ck_tickets_estado"
        ),
        CheckConstraint(
            "prioridad IN ('low', 'medium', 'high')", name="ck_tickets_prioridad"
        ),
        Index("ix_tickets_usuario", "usuario_id"),
        Index("ix_tickets_estado", "estado"),
        Index("ix_tickets_asignado", "asignado_a"),
    )
