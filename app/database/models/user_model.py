from database.init import Base
from utils.id_generator import generate_entity_id

from sqlalchemy import Column, String, Boolean
from sqlalchemy.orm import relationship


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_entity_id)
    name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    is_active = Column(Boolean, default=True)

    memberships = relationship("Membership", back_populates="user", cascade="all, delete-orphan")
