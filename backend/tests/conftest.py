"""Pytest fixtures for the declaration request backend.

Provides reusable test fixtures for:
- Database session (in-memory SQLite unless DATABASE_URL is set)
- Users: an admin and two requesters with full address profiles
- A declaration template
- A fake blob publisher and a fixed clock
- Test clients authenticated with JWT tokens

Usage:
    def test_list_requests(admin_client):
        response = admin_client.get("/api/v1/requests")
        assert response.status_code == 200
"""

import sys
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

# Set environment variables BEFORE any imports to ensure they take effect
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-key-256-bits-minimum-length-required-for-security")
os.environ.setdefault("SCRATCH_DIR", tempfile.mkdtemp(prefix="declara-scratch-"))
os.environ.setdefault("LOG_JSON", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from typing import Generator, List

backend_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(backend_src))

# Import directly from modules (avoid relative import issues)
from models import Base, User, Declaration, DeclarationRequest, AuditLog  # noqa: F401
from auth.jwt import create_access_token
from config import Settings
from domain.documents.ports import BlobPublisherPort, PublishedBlob
from infrastructure.rendering.pdf_renderer import ReportLabDocumentRenderer
from infrastructure.storage.s3_blob_publisher import StorageError


TEST_DATABASE_URL = os.environ["DATABASE_URL"]

if TEST_DATABASE_URL.startswith("sqlite"):
    # One shared connection so every session sees the same in-memory database
    test_engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
else:
    test_engine = create_engine(TEST_DATABASE_URL)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

# Fixed "now" for clock-dependent behavior (recent window, data_atual)
FIXED_NOW = datetime(2026, 3, 5, 12, 0, 0, tzinfo=timezone.utc)


# Import the actual get_db from database to use for dependency override
from database import get_db as database_get_db


class FakeBlobPublisher(BlobPublisherPort):
    """In-memory blob publisher recording every upload.

    Uploads whose file name starts with one of fail_prefixes raise
    StorageError.
    """

    def __init__(self):
        self.uploads: List[dict] = []
        self.fail_prefixes: List[str] = []

    async def upload(self, namespace: str, file_name: str, data: bytes, content_type: str) -> PublishedBlob:
        if any(file_name.startswith(prefix) for prefix in self.fail_prefixes):
            raise StorageError(f"Failed to upload document: {file_name}")

        storage_key = f"{namespace}/{file_name}"
        self.uploads.append({
            "namespace": namespace,
            "file_name": file_name,
            "data": data,
            "content_type": content_type,
        })
        return PublishedBlob(
            storage_key=storage_key,
            signed_url=f"https://blobs.test/{storage_key}?X-Amz-Signature=test",
            size_bytes=len(data),
        )

    async def check_health(self) -> bool:
        return True


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test.

    Creates all tables before the test and drops them after.
    Each test gets a clean database state.
    """
    Base.metadata.create_all(bind=test_engine)

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def fixed_clock():
    """Clock callable returning FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def scratch_dir(tmp_path: Path) -> Path:
    return tmp_path / "scratch"


@pytest.fixture
def test_settings(scratch_dir: Path) -> Settings:
    """Settings pointing the scratch directory at a per-test folder."""
    return Settings(SCRATCH_DIR=str(scratch_dir), DECLARATION_NAMESPACE="declaration")


@pytest.fixture
def fake_publisher() -> FakeBlobPublisher:
    return FakeBlobPublisher()


@pytest.fixture
def renderer() -> ReportLabDocumentRenderer:
    return ReportLabDocumentRenderer(letterhead_lines=["Rua Teste, 1 - São Paulo - SP", "E-mail: adm@test.org"])


def _make_user(db_session: Session, **fields) -> User:
    user = User(**fields)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture(scope="function")
def admin_user(db_session: Session) -> User:
    """Create an admin user for testing."""
    return _make_user(
        db_session,
        email="admin@test.com",
        name="Admin User",
        is_admin=True,
    )


@pytest.fixture(scope="function")
def requester_user(db_session: Session) -> User:
    """Create a requester with a complete profile."""
    return _make_user(
        db_session,
        email="maria@test.com",
        name="Maria Souza",
        is_admin=False,
        street="Rua das Flores",
        house_number="120",
        complement="Apto 12",
        neighborhood="Santana",
        city="São Paulo",
        state="SP",
        postal_code="2403010",
        rg="12.345.678-9",
        cpf="123.456.789-00",
        issuing_agency="SSP/SP",
    )


@pytest.fixture(scope="function")
def other_requester(db_session: Session) -> User:
    """Create a second requester without a complement."""
    return _make_user(
        db_session,
        email="joao@test.com",
        name="João Lima",
        is_admin=False,
        street="Av. Paulista",
        house_number="1000",
        neighborhood="Bela Vista",
        city="São Paulo",
        state="SP",
        postal_code="01310-100",
        rg="98.765.432-1",
        cpf="987.654.321-00",
        issuing_agency="SSP/SP",
    )


@pytest.fixture(scope="function")
def declaration(db_session: Session) -> Declaration:
    """Create a residence declaration template."""
    declaration = Declaration(
        type="Declaração de Residência",
        title="DECLARAÇÃO DE RESIDÊNCIA",
        content=(
            "Declaramos que {{nome}}, RG {{rg}} ({{orgao_emissor}}), CPF {{cpf}}, reside à "
            "{{rua}}, nº {{numero_casa}}{{complemento}}, {{bairro}}, {{cidade}} - {{estado}}, "
            "CEP {{cep}}.\\nPor ser verdade, firmamos a presente."
        ),
        footer="São Paulo, {{data_atual}}.\n\n_____________________\nSecretaria",
    )
    db_session.add(declaration)
    db_session.commit()
    db_session.refresh(declaration)
    return declaration


@pytest.fixture(scope="function")
def app(db_session: Session, fake_publisher: FakeBlobPublisher, renderer: ReportLabDocumentRenderer):
    """FastAPI app wired to the test database, fake publisher and renderer."""
    from main import app
    from declaration_requests.dependencies import get_blob_publisher, get_document_renderer

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[database_get_db] = override_get_db
    app.dependency_overrides[get_blob_publisher] = lambda: fake_publisher
    app.dependency_overrides[get_document_renderer] = lambda: renderer

    yield app

    app.dependency_overrides.clear()


def _client_for(app, user: User) -> TestClient:
    token = create_access_token(
        user_id=user.id,
        is_admin=user.is_admin,
        email=user.email
    )

    client = TestClient(app)
    client.headers = {
        "Authorization": f"Bearer {token}"
    }
    return client


@pytest.fixture(scope="function")
def client(app):
    """Create an unauthenticated test client."""
    return TestClient(app)


@pytest.fixture(scope="function")
def admin_client(app, admin_user: User):
    """Create a test client authenticated as the admin user."""
    return _client_for(app, admin_user)


@pytest.fixture(scope="function")
def requester_client(app, requester_user: User):
    """Create a test client authenticated as the requester."""
    return _client_for(app, requester_user)
