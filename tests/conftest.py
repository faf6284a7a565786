"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory async database, account factory, session factory,
test settings, file-backed database for two-connection races
Dependencies: pytest, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import uuid

import pytest


@pytest.fixture
async def test_async_db():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        AsyncSession: Test database session with cleanup (lazy imported to avoid settings issues)
    """
    from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
    from sqlalchemy.pool import StaticPool
    from counselhub.boundary.db.base import Base
    import counselhub.boundary.db.models  # noqa: F401

    # Use SQLite in-memory database for tests
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Create session factory
    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )

    # Create session for test
    async with async_session() as session:
        yield session
        await session.rollback()

    # Cleanup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def assignment_settings():
    """Assignment tunables with a small cap so capacity is easy to reach."""
    from counselhub.configs.assignment import AssignmentSettings

    return AssignmentSettings(
        max_concurrent_sessions=2,
        offline_after_seconds=60,
        stream_poll_seconds=0.05,
    )


@pytest.fixture
def make_account(test_async_db):
    """
    Factory creating committed accounts.

    Usage:
        counselor = await make_account(UserRole.COUNSELOR, last_active=...)
    """
    from counselhub.boundary.db.CRUD.user_crud import user_crud
    from counselhub.boundary.db.models import UserRole

    async def _make(role=UserRole.USER, username: str | None = None, **fields):
        fields.setdefault("password_hash", "not-a-real-hash")
        account = await user_crud.create(
            test_async_db,
            username=username or f"{role.value}-{uuid.uuid4().hex[:8]}",
            role=role,
            **fields,
        )
        await test_async_db.commit()
        return account

    return _make


@pytest.fixture
def make_session(test_async_db):
    """
    Factory creating committed sessions in any status.

    Usage:
        session = await make_session(owner, status=SessionStatus.WAITING)
    """
    from counselhub.boundary.db.CRUD.session_crud import session_crud
    from counselhub.boundary.db.models import SessionStatus

    async def _make(owner, status=SessionStatus.PENDING, counselor=None, **fields):
        session = await session_crud.create(
            test_async_db,
            user_id=owner.id,
            status=status,
            counselor_id=counselor.id if counselor else None,
            **fields,
        )
        await test_async_db.commit()
        return session

    return _make


@pytest.fixture
async def file_db_factory(tmp_path):
    """
    Session factory over a file-backed SQLite database.

    Each session gets its own connection, so tests can interleave two
    writers the way concurrent requests do.
    """
    from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
    from counselhub.boundary.db.create_tables import create_all_tables

    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'counselhub.db'}")
    await create_all_tables(engine)
    yield async_sessionmaker(
        engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )
    await engine.dispose()


@pytest.fixture
def seed_session(file_db_factory):
    """
    Commit accounts and one session into the file-backed database.

    Usage:
        member, counselors, session_id = await seed_session(counselors=2)
    """
    from counselhub.boundary.db.CRUD.session_crud import session_crud
    from counselhub.boundary.db.CRUD.user_crud import user_crud
    from counselhub.boundary.db.models import SessionStatus, UserRole

    async def _seed(counselors: int = 1, status=SessionStatus.WAITING, assigned: bool = False):
        async with file_db_factory() as db:
            member = await user_crud.create(
                db, username="member", role=UserRole.USER, password_hash="not-a-real-hash"
            )
            staff = [
                await user_crud.create(
                    db,
                    username=f"counselor-{i}",
                    role=UserRole.COUNSELOR,
                    password_hash="not-a-real-hash",
                )
                for i in range(counselors)
            ]
            session = await session_crud.create(
                db,
                user_id=member.id,
                status=status,
                counselor_id=staff[0].id if assigned else None,
            )
            await db.commit()
            return member, staff, session.id

    return _seed
