"""
Student directory model.
"""

from sqlalchemy import Column, Integer, Text

from domain.models.database import Base


class Student(Base):
    """Student identity and display data"""

    __tablename__ = "students"

    id = Column(Integer, primary_key=True, autoincrement=True)
    registration_code = Column(Text, unique=True, nullable=False)
    name = Column(Text, nullable=False)
    photo_ref = Column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<Student(id={self.id}, registration_code={self.registration_code})>"
