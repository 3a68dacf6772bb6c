"""
Shared fixtures: an in-memory SQLite database, an API client with get_db
overridden, HS256 access tokens, and an in-memory object store.
"""

import os

# Configure the app before any geekcare module is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret"
os.environ["SUPABASE_JWT_AUDIENCE"] = "authenticated"
os.environ["PAYMENT_GATEWAY_KEY_SECRET"] = "test-gateway-secret"
os.environ["CLINIC_TIMEZONE"] = "UTC"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"
os.environ.pop("REDIS_URL", None)

import time  # noqa: E402
from datetime import date, timedelta  # noqa: E402
from datetime import time as clock  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from jose import jwt  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from geekcare import storage  # noqa: E402
from geekcare.database import Base, get_db  # noqa: E402
from geekcare.main import app  # noqa: E402
from geekcare.models import Member, Physician, PhysicianLanguage, PhysicianSpecialty, ScheduleSlot  # noqa: E402
from geekcare.rate_limiter import reset_rate_limits  # noqa: E402
from geekcare.shared.timeutils import clinic_today, day_of_week  # noqa: E402

JWT_SECRET = "test-jwt-secret"


def make_token(uid, email=None, role=None, full_name=None, expires_in=3600, audience="authenticated"):
    """Mint an access token shaped like the hosted auth service's"""
    now = int(time.time())
    claims = {
        "sub": uid,
        "email": email or f"{uid}@example.com",
        "aud": audience,
        "iat": now,
        "exp": now + expires_in,
        "role": "authenticated",
        "user_metadata": {"role": role, "full_name": full_name},
    }
    return jwt.encode(claims, JWT_SECRET, algorithm="HS256")


def auth_headers(uid, **kwargs):
    return {"Authorization": f"Bearer {make_token(uid, **kwargs)}"}


class FakeStorageClient:
    """In-memory stand-in for the boto3 S3 client"""

    def __init__(self):
        self.objects = {}

    def put_object(self, Bucket, Key, Body, ContentType=None):
        self.objects[Key] = {"body": Body, "content_type": ContentType}

    def delete_object(self, Bucket, Key):
        self.objects.pop(Key, None)

    def generate_presigned_url(self, operation, Params, ExpiresIn):
        return f"https://storage.test/{Params['Bucket']}/{Params['Key']}?expires={ExpiresIn}"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    reset_rate_limits()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def fake_storage(monkeypatch):
    fake = FakeStorageClient()
    monkeypatch.setattr(storage, "get_storage_client", lambda: fake)
    return fake


@pytest.fixture
def booking_day():
    """A date one week out, far enough that no slot on it is in the past"""
    return clinic_today() + timedelta(days=7)


@pytest.fixture
def seed(session_factory):
    """Helpers that insert rows in short-lived sessions and return their ids"""

    class Seeder:
        def physician(
            self,
            uid="doc-1",
            full_name="Dr. Ada Lovelace",
            fee=50.0,
            duration=30,
            gender="female",
            specialties=("Cardiology",),
            languages=("English",),
        ):
            with session_factory() as db:
                physician = Physician(
                    id=uid,
                    email=f"{uid}@example.com",
                    full_name=full_name,
                    gender=gender,
                    consultation_fee=fee,
                    consultation_duration=duration,
                )
                physician.specialties = [PhysicianSpecialty(specialty=s) for s in specialties]
                physician.languages = [PhysicianLanguage(language=lang) for lang in languages]
                db.add(physician)
                db.commit()
            return uid

        def member(self, uid="member-1", full_name="Grace Hopper"):
            with session_factory() as db:
                db.add(Member(id=uid, email=f"{uid}@example.com", full_name=full_name))
                db.commit()
            return uid

        def weekly_slot(self, physician_id, day: date, start="09:00", end="12:00", is_available=True):
            return self._slot(
                physician_id,
                day_of_week=day_of_week(day),
                start=start,
                end=end,
                is_available=is_available,
            )

        def date_slot(self, physician_id, day: date, start="09:00", end="12:00", is_available=True):
            return self._slot(
                physician_id, specific_date=day, start=start, end=end, is_available=is_available
            )

        def _slot(self, physician_id, start, end, is_available, **where):
            with session_factory() as db:
                slot = ScheduleSlot(
                    physician_id=physician_id,
                    start_time=clock.fromisoformat(start),
                    end_time=clock.fromisoformat(end),
                    is_available=is_available,
                    **where,
                )
                db.add(slot)
                db.commit()
                return slot.id

    return Seeder()


@pytest.fixture
def doctor_headers():
    return auth_headers("doc-1", role="physician")


@pytest.fixture
def member_headers():
    return auth_headers("member-1", role="member")


@pytest.fixture
def headers_for():
    """Build Authorization headers for any uid/role"""
    return auth_headers
