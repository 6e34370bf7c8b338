"""
Modèle SQLAlchemy pour la table students.
L'email (normalisé en minuscules) est la seule clé d'identité métier.
"""

from sqlalchemy import Column, Date, DateTime, Integer, Numeric, String, func

from app.database import Base


class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False)
    name = Column(String(255), nullable=True)
    phone_number = Column(String(50), nullable=True)
    student_class = Column(String(50), nullable=True)
    sub_exp_date = Column(Date, nullable=True)
    amount = Column(Numeric(10, 2), nullable=True)
    payment_time = Column(DateTime, nullable=True)
    updated_by = Column(String(255), nullable=True)
    role = Column(String(20), nullable=True)  # NULL, admin, super
    payment_status = Column(String(20), nullable=True)  # PAID, UNPAID
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
