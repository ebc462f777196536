"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory async database, session factory, settings and
sample legal texts
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import uuid

import pytest


LEGISLATION_TEXT = (
    "LAW OF THE REPUBLIC OF ARMENIA\n"
    "ON PUBLIC REGISTERS\n"
    "\n"
    "Article 1. Subject matter\n"
    "This statute sets out how public registers are kept, which bodies keep them "
    "and how entries are made, corrected and archived by the responsible authority.\n"
    "\n"
    "Article 2. Terms used\n"
    "For the purposes of this statute a register means an ordered set of entries kept "
    "in electronic form and an entry means a record made by an authorised official.\n"
    "\n"
    "Article 3. Entry into force\n"
    "This statute enters into force on the tenth day following its official publication "
    "and applies to every register opened after that day.\n"
)

APPEAL_TEXT = (
    "COURT OF APPEAL OF THE REPUBLIC OF ARMENIA\n"
    "Case No. CA-1234-2024\n"
    "Composition: presiding judge and two judges sitting in open session.\n"
    "\n"
    "FACTS\n"
    "The applicant bought a flat in Yerevan in 2019 and paid the full price to the seller. "
    "The seller later refused to register the transfer and the applicant went to the first "
    "instance tribunal, which dismissed the claim without hearing witnesses.\n"
    "\n"
    "REASONING\n"
    "The tribunal below failed to examine the payment records submitted by the applicant. "
    "Those records show that the price was paid in full and on time, so the refusal to "
    "register the transfer had no lawful basis under the applicable provisions.\n"
    "\n"
    "THE COURT DECIDED:\n"
    "The appeal is allowed. The judgment of the first instance tribunal is quashed and the "
    "seller is ordered to register the transfer within thirty days.\n"
)

ECHR_TEXT = (
    "EUROPEAN COURT OF HUMAN RIGHTS\n"
    "CASE OF PETROSYAN v. ARMENIA\n"
    "(Application no. 12345/06)\n"
    "\n"
    "PROCEDURE\n"
    "The case originated in an application against the Republic of Armenia lodged with the "
    "Court by an Armenian national on 3 March 2006.\n"
    "\n"
    "THE FACTS\n"
    "The applicant was arrested in 2005 and held in pre-trial detention for fourteen months "
    "without a periodic review of the grounds for his detention.\n"
    "\n"
    "THE LAW\n"
    "The relevant provisions of the Code of Criminal Procedure in force at the material time "
    "are summarised below for the purposes of this application.\n"
    "\n"
    "I. ALLEGED VIOLATION OF ARTICLE 5 OF THE CONVENTION\n"
    "The applicant complained that his detention had not been reviewed speedily and that the "
    "domestic courts had failed to give relevant and sufficient reasons.\n"
)


@pytest.fixture
def legislation_text() -> str:
    """Three-article statute with a short heading and no preamble."""
    return LEGISLATION_TEXT


@pytest.fixture
def appeal_text() -> str:
    """Appeal ruling with facts, reasoning and resolution sections."""
    return APPEAL_TEXT


@pytest.fixture
def echr_text() -> str:
    """ECHR judgment with an article-keyed violation section."""
    return ECHR_TEXT


@pytest.fixture
async def db_engine():
    """
    Create in-memory SQLite async engine with all tables.

    Yields:
        AsyncEngine: Engine sharing one connection across sessions
    """
    from sqlalchemy.ext.asyncio import create_async_engine
    from sqlalchemy.pool import StaticPool

    import legal_pipeline.boundary.db.models  # noqa: F401
    from legal_pipeline.boundary.db.base import Base

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    """Session factory bound to the test engine, configured like production."""
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest.fixture
async def test_async_db(session_factory):
    """
    Create a session on the in-memory SQLite database.

    Yields:
        AsyncSession: Test database session rolled back on teardown
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def job_settings():
    """
    Job settings processing one job at a time.

    The in-memory database shares a single connection, so jobs must not
    interleave their transactions.
    """
    from legal_pipeline.configs.jobs import JobSettings

    return JobSettings(parallel_batch=1)


@pytest.fixture
def settings(job_settings):
    """Application settings with an internal key and no table renderer."""
    from legal_pipeline.configs import Settings
    from legal_pipeline.configs.notifications import NotificationSettings
    from legal_pipeline.configs.security import SecuritySettings

    return Settings(
        jobs=job_settings,
        security=SecuritySettings(internal_ingest_key="test-key", allow_unauth_ingest=False),
        notifications=NotificationSettings(url=None),
    )


@pytest.fixture
def document_factory(session_factory):
    """
    Insert committed legal_documents rows.

    Returns:
        Async callable accepting column overrides
    """
    from legal_pipeline.boundary.db.CRUD import document_crud
    from legal_pipeline.models.enums import Branch, DocType

    async def create(content_text: str = LEGISLATION_TEXT, **overrides):
        values = {
            "doc_type": DocType.LAW,
            "branch": Branch.OTHER,
            "title": "LAW OF THE REPUBLIC OF ARMENIA",
            "content_text": content_text,
            "source_hash": uuid.uuid4().hex,
            "ingestion": {"pipeline": "test", "schema_version": "1.0"},
        }
        values.update(overrides)
        async with session_factory() as session:
            document = await document_crud.create(session, **values)
            await session.commit()
        return document

    return create
