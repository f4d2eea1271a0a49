import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backoffice import models
from backoffice.errors import NotFound, StorageError, ValidationError
from backoffice.models import RegistrationStatus, SQL_INTEGER_MAX, SQL_INTEGER_MIN

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = {
    "site_name": "Surplus Consultancy",
    "contact_email": "info@surplus.com",
    "contact_phone": "+1 234 567 890",
    "address": "123 Business Ave, Suite 100",
    "hero_title": "Empowering Your Future with Surplus",
    "hero_subtitle": "Expert consultancy services for students and professionals.",
}

RegistrationRow = Tuple[models.Registration, Optional[str]]


@contextmanager
def _storage_errors(db: Session, action: str):
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Database error while %s", action)
        raise StorageError(f"Database error while {action}") from exc


def _fits_sql_integer(value: int) -> bool:
    return SQL_INTEGER_MIN <= value <= SQL_INTEGER_MAX


def parse_status(value: Union[str, RegistrationStatus]) -> RegistrationStatus:
    if isinstance(value, RegistrationStatus):
        return value
    try:
        return RegistrationStatus(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(s.value for s in RegistrationStatus)
        raise ValidationError(f"Invalid status {value!r}, expected one of: {allowed}")


def setting_to_text(key: str, value: Any) -> str:
    # booleans as "true"/"false", integral floats without ".0"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ValidationError(f"Setting {key!r} must be a text, number or boolean value")


class RegistrationStore:
    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return (
            self.db.query(models.Registration, models.Course.title)
            .outerjoin(models.Course, models.Registration.course_id == models.Course.id)
        )

    def create(self, course_id: Optional[int], full_name: Optional[str], email: Optional[str],
               phone: Optional[str] = None) -> int:
        full_name = (full_name or "").strip()
        email = (email or "").strip()
        if not full_name:
            raise ValidationError("full_name is required")
        if not email:
            raise ValidationError("email is required")
        if course_id is not None and not _fits_sql_integer(course_id):
            raise ValidationError(f"course_id {course_id} is out of range")

        registration = models.Registration(
            course_id=course_id,
            full_name=full_name,
            email=email,
            phone=(phone or "").strip() or None,
            status=RegistrationStatus.PENDING.value,
        )
        with _storage_errors(self.db, "creating registration"):
            self.db.add(registration)
            self.db.commit()
            self.db.refresh(registration)
        logger.info("Created registration id=%s course=%s status=pending", registration.id, course_id)
        return registration.id

    def list(self, status: Optional[Union[str, RegistrationStatus]] = None) -> List[RegistrationRow]:
        # newest first; same-tick rows in reverse insertion order
        q = self._query()
        if status is not None:
            q = q.filter(models.Registration.status == parse_status(status).value)
        q = q.order_by(models.Registration.created_at.desc(), models.Registration.id.desc())
        with _storage_errors(self.db, "listing registrations"):
            return [(registration, title) for registration, title in q.all()]

    def get(self, registration_id: int) -> RegistrationRow:
        if not _fits_sql_integer(registration_id):
            raise NotFound("Registration", registration_id)
        with _storage_errors(self.db, "loading registration"):
            row = self._query().filter(models.Registration.id == registration_id).first()
        if row is None:
            raise NotFound("Registration", registration_id)
        return row[0], row[1]

    def transition(self, registration_id: int, status: Union[str, RegistrationStatus]) -> models.Registration:
        new_status = parse_status(status)
        if not _fits_sql_integer(registration_id):
            raise NotFound("Registration", registration_id)
        with _storage_errors(self.db, "updating registration status"):
            updated = (
                self.db.query(models.Registration)
                .filter(models.Registration.id == registration_id)
                .update({models.Registration.status: new_status.value}, synchronize_session=False)
            )
            self.db.commit()
        if updated == 0:
            raise NotFound("Registration", registration_id)
        logger.info("Registration id=%s status=%s", registration_id, new_status.value)
        with _storage_errors(self.db, "loading registration"):
            return self.db.get(models.Registration, registration_id, populate_existing=True)

    def count(self, status: Optional[Union[str, RegistrationStatus]] = None) -> int:
        q = self.db.query(models.Registration)
        if status is not None:
            q = q.filter(models.Registration.status == parse_status(status).value)
        with _storage_errors(self.db, "counting registrations"):
            return q.count()


class SettingsStore:
    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> Dict[str, str]:
        with _storage_errors(self.db, "reading settings"):
            return {row.key: row.value for row in self.db.query(models.Setting).all()}

    def bulk_set(self, updates: Mapping[str, Any]) -> None:
        """Upsert every submitted key in one transaction; a rejected pair rolls back the batch."""
        if not isinstance(updates, Mapping):
            raise ValidationError("Settings must be submitted as a key/value object")
        try:
            for key, value in updates.items():
                if not isinstance(key, str) or not key.strip():
                    raise ValidationError("Setting keys must be non-empty text")
                self.db.merge(models.Setting(key=key, value=setting_to_text(key, value)))
            self.db.commit()
        except ValidationError:
            self.db.rollback()
            raise
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Database error while saving settings")
            raise StorageError("Database error while saving settings") from exc
        logger.info("Saved %d setting(s): %s", len(updates), ", ".join(sorted(updates)))

    def ensure_defaults(self, per_key: bool = False) -> int:
        # only into an empty table unless per_key is set
        with _storage_errors(self.db, "seeding default settings"):
            if per_key:
                existing = {key for (key,) in self.db.query(models.Setting.key).all()}
                missing = {k: v for k, v in DEFAULT_SETTINGS.items() if k not in existing}
            elif self.db.query(models.Setting).count() > 0:
                logger.debug("Settings already present, skipping defaults")
                return 0
            else:
                missing = dict(DEFAULT_SETTINGS)
            for key, value in missing.items():
                self.db.add(models.Setting(key=key, value=value))
            self.db.commit()
        if missing:
            logger.info("Seeded default settings: %s", ", ".join(missing))
        return len(missing)


class DashboardStats:
    def __init__(self, db: Session):
        self.db = db

    def collect(self) -> Dict[str, int]:
        registrations = RegistrationStore(self.db)
        with _storage_errors(self.db, "collecting dashboard stats"):
            total_courses = self.db.query(models.Course).count()
            team_members = self.db.query(models.TeamMember).count()
        return {
            "totalCourses": total_courses,
            "totalRegistrations": registrations.count(),
            "pendingRegistrations": registrations.count(RegistrationStatus.PENDING),
            "teamMembers": team_members,
        }
