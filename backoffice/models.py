import enum

from sqlalchemy import Column, Integer, String, Text, Float, DateTime, func, text
from backoffice.database import Base

# range of a signed 64-bit SQL INTEGER
SQL_INTEGER_MIN = -(2 ** 63)
SQL_INTEGER_MAX = 2 ** 63 - 1


class RegistrationStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Registration(Base):
    __tablename__ = "registrations"
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    # points at courses.id, not enforced: a deleted course leaves the value dangling
    course_id = Column(Integer, index=True, nullable=True)
    full_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    phone = Column(Text, nullable=True)
    status = Column(String(20), default=RegistrationStatus.PENDING.value,
                    server_default=text("'pending'"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class Setting(Base):
    __tablename__ = "settings"
    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)


# Read-only here: course and team management live outside this service.

class Course(Base):
    __tablename__ = "courses"
    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    description = Column(Text)
    duration = Column(Text)
    price = Column(Float)
    # copy of the category name, not a reference to categories
    category = Column(Text)
    image_url = Column(Text)


class TeamMember(Base):
    __tablename__ = "team"
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    role = Column(Text)
    bio = Column(Text)
    image_url = Column(Text)
