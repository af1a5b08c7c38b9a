from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship
from helpdesk.db.base import Base
from helpdesk.core.enums import utcnow

class Usuario(Base):
    __tablename__ = "usuarios"

    # -------------------- atributos --------------------
    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)  # hash bcrypt
    nombre = Column(String(100), nullable=False)
    rol = Column(String(20), nullable=False)
    email = Column(String(100), nullable=True)
    activo = Column(Boolean, default=True, nullable=False)

    # -------------------- auditoria --------------------
    fecha_creacion = Column(DateTime, default=utcnow, nullable=False)

    # -------------------- relaciones --------------------
    # Tickets creados por este usuario
    tickets = relationship(
        "Ticket",
        back_populates="usuario",
        foreign_keys="Ticket.usuario_id",
    )

    # Tickets asignados a este técnico
    tickets_asignados = relationship(
        "Ticket",
        back_populates="tecnico",
        foreign_keys="Ticket.asignado_a",
    )

    comentarios = relationship("ComentarioTicket", back_populates="usuario")

    __table_args__ = (
        CheckConstraint("rol IN ('user', 'technician')", name="ck_usuarios_rol"),
    )
