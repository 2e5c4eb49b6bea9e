"""Test configuration."""
import os
from collections.abc import AsyncIterator, Callable, Iterator
from decimal import Decimal
from pathlib import Path
from uuid import uuid4

from alembic import command
from alembic.config import Config
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

# --- Default env for the test run
os.environ.setdefault("DATABASE_URL", "sqlite:///./roadtrack_test.db")
os.environ.setdefault("ROADTRACK_ENV", "test")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")

from roadtrack import db as db_module  # noqa: E402
from roadtrack.core.logging import setup_logging  # noqa: E402
from roadtrack.db import get_db  # noqa: E402
from roadtrack.main import app  # noqa: E402
from roadtrack.models import (  # noqa: E402
    Contractor,
    Project,
    ProjectSection,
    ProjectStatus,
    Province,
    User,
    UserProjectAccess,
    UserRole,
)
from roadtrack.security import create_access_token, get_password_hash  # noqa: E402
from roadtrack.services.lookups import lookup_service  # noqa: E402

DB_PATH = Path("./roadtrack_test.db")
DEFAULT_PASSWORD = "Sup3r-secret!"
# Hashing is deliberately slow; reuse one hash for every fixture user.
_PASSWORD_HASH = get_password_hash(DEFAULT_PASSWORD)


def _run_migrations() -> None:
    cfg = Config(str(Path(__file__).resolve().parents[1] / "alembic.ini"))
    cfg.set_main_option("script_location", str(Path(__file__).resolve().parents[1] / "alembic"))
    cfg.set_main_option("sqlalchemy.url", os.environ["DATABASE_URL"])
    command.upgrade(cfg, "head")


# --- (1) Fresh DB file per session
if DB_PATH.exists():
    DB_PATH.unlink()

engine = create_engine(
    os.environ["DATABASE_URL"],
    connect_args={"check_same_thread": False},
    future=True,
)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True, expire_on_commit=False)

# --- (2) Schema comes from Alembic only
_run_migrations()


@pytest.fixture(scope="session", autouse=True)
def startup_app() -> Iterator[None]:
    setup_logging("WARNING")
    db_module.init_engine()
    yield
    db_module.close_engine()


@pytest.fixture
def db_session() -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


@pytest.fixture(autouse=True)
def override_db_dependency(db_session: Session) -> Iterator[None]:
    def _get_db() -> Iterator[Session]:
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    yield
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture(autouse=True)
def reset_lookup_cache() -> Iterator[None]:
    lookup_service.invalidate()
    yield
    lookup_service.invalidate()


@pytest.fixture
async def client() -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as async_client:
        yield async_client


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def make_user(db_session: Session) -> Callable[..., User]:
    def _factory(role: UserRole = UserRole.ENGINEER, *, email: str | None = None, is_active: bool = True) -> User:
        user = User(
            name=f"{role.value.title()} {uuid4().hex[:6]}",
            email=email or f"{role.value.lower()}-{uuid4().hex[:8]}@example.com",
            password_hash=_PASSWORD_HASH,
            role=role,
            is_active=is_active,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _factory


def bearer(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def headers_for() -> Callable[[User], dict[str, str]]:
    return bearer


@pytest.fixture
def admin_user(make_user: Callable[..., User]) -> User:
    return make_user(UserRole.ADMIN)


@pytest.fixture
def admin_headers(admin_user: User) -> dict[str, str]:
    return bearer(admin_user)


@pytest.fixture
def engineer_headers(make_user: Callable[..., User]) -> dict[str, str]:
    return bearer(make_user(UserRole.ENGINEER))


@pytest.fixture
def grant_access(db_session: Session) -> Callable[[User, Project], UserProjectAccess]:
    def _grant(user: User, project: Project) -> UserProjectAccess:
        grant = UserProjectAccess(user_id=user.id, project_id=project.id, access_level="EDITOR", is_active=True)
        db_session.add(grant)
        db_session.commit()
        return grant

    return _grant


@pytest.fixture
def make_province(db_session: Session) -> Callable[..., Province]:
    def _factory(name: str | None = None, *, region: str = "Momase", population: int | None = 100000) -> Province:
        suffix = uuid4().hex[:4].upper()
        province = Province(
            name=name or f"Province {suffix}",
            code=suffix,
            region=region,
            capital="Capital",
            population=population,
        )
        db_session.add(province)
        db_session.commit()
        db_session.refresh(province)
        return province

    return _factory


@pytest.fixture
def make_project(db_session: Session) -> Callable[..., Project]:
    def _factory(
        name: str | None = None,
        *,
        province: Province | None = None,
        status: ProjectStatus = ProjectStatus.IN_PROGRESS,
        **extra,
    ) -> Project:
        project = Project(
            name=name or f"Highway {uuid4().hex[:6]}",
            province_id=province.id if province else None,
            status=status,
            **extra,
        )
        db_session.add(project)
        db_session.commit()
        db_session.refresh(project)
        return project

    return _factory


@pytest.fixture
def make_section(db_session: Session) -> Callable[..., ProjectSection]:
    def _factory(
        project: Project,
        *,
        start_km: float = 0.0,
        end_km: float = 1.0,
        progress: float = 0.0,
        budget_allocated: str = "0",
        budget_spent: str = "0",
        contractor: Contractor | None = None,
    ) -> ProjectSection:
        section = ProjectSection(
            project_id=project.id,
            section_name=f"Section {start_km:g}-{end_km:g}",
            start_km=start_km,
            end_km=end_km,
            length=(end_km - start_km) * 1000,
            progress_percentage=progress,
            budget_allocated=Decimal(budget_allocated),
            budget_spent=Decimal(budget_spent),
            assigned_contractor_id=contractor.id if contractor else None,
        )
        db_session.add(section)
        db_session.commit()
        db_session.refresh(section)
        return section

    return _factory


@pytest.fixture
def make_contractor(db_session: Session) -> Callable[..., Contractor]:
    def _factory(name: str | None = None, *, certification_level: str | None = "A", is_active: bool = True) -> Contractor:
        contractor = Contractor(
            name=name or f"Builders {uuid4().hex[:6]}",
            license_number=f"LIC-{uuid4().hex[:8]}",
            certification_level=certification_level,
            specializations=["roads"],
            is_active=is_active,
        )
        db_session.add(contractor)
        db_session.commit()
        db_session.refresh(contractor)
        return contractor

    return _factory


@pytest.fixture
def default_password() -> str:
    return DEFAULT_PASSWORD
