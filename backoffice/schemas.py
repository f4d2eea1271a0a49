# backoffice/schemas.py
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

from backoffice.models import SQL_INTEGER_MAX, SQL_INTEGER_MIN


class RegistrationCreate(BaseModel):
    # extra keys such as status or created_at are ignored
    course_id: Optional[int] = Field(default=None, ge=SQL_INTEGER_MIN, le=SQL_INTEGER_MAX,
                                     validation_alias=AliasChoices("course_id", "course_reference"))
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class RegistrationCreated(BaseModel):
    id: int


class RegistrationStatusUpdate(BaseModel):
    status: str


class RegistrationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    course_id: Optional[int] = None
    full_name: str
    email: str
    phone: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None
    course_title: Optional[str] = None


class SuccessOut(BaseModel):
    success: bool = True


class StatsOut(BaseModel):
    totalCourses: int
    totalRegistrations: int
    pendingRegistrations: int
    teamMembers: int
