"""
PageCraft - Test Configuration and Fixtures
"""
import os
import tempfile
from typing import AsyncGenerator, Dict, List
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from faker import Faker

# Set testing environment
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test.db'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['ANTHROPIC_API_KEY'] = 'test-api-key'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['LOG_FILE'] = ''
os.environ['SEED_TEMPLATES_ON_STARTUP'] = 'false'
os.environ['UPLOAD_DIR'] = tempfile.mkdtemp(prefix='pagecraft-uploads-')
os.environ['PUBLIC_BASE_URL'] = 'http://testserver'

from app.main import app
from app.core.database import Base, get_db
from app.core.security import get_password_hash, create_access_token
from app.db.seed_data import SAMPLE_TEMPLATES
from app.models.layout import Box, Component, Layout
from app.models.template import Template
from app.models.user import User
from app.utils.claude_client import get_claude_client

fake = Faker()

TEST_PASSWORD = 'testpassword123'

# Test database setup
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test.db'
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False
)


class FakeClaudeClient:
    """Stands in for ClaudeClient; records calls and returns a canned reply"""

    def __init__(self, reply: str = "Here is a suggestion for your page.", error: Exception = None):
        self.reply = reply
        self.error = error
        self.calls: List[Dict] = []

    async def generate(self, prompt, system_prompt=None, max_tokens=None, temperature=None, messages=None):
        self.calls.append({"prompt": prompt, "system_prompt": system_prompt, "messages": list(messages or [])})
        if self.error is not None:
            raise self.error
        return {"content": self.reply, "total_tokens": 42}


@pytest_asyncio.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def fake_claude() -> FakeClaudeClient:
    return FakeClaudeClient()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession, fake_claude: FakeClaudeClient) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database and AI client overrides"""
    async def override_get_db():
        try:
            yield db_session
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_claude_client] = lambda: fake_claude

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


async def _create_user(db_session: AsyncSession, password: str = TEST_PASSWORD) -> User:
    user = User(
        email=fake.unique.email(),
        hashed_password=get_password_hash(password),
        name=fake.name(),
        is_active=True,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a test user"""
    return await _create_user(db_session)


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    """A second user, for ownership checks"""
    return await _create_user(db_session)


def make_auth_headers(user: User) -> dict:
    token = create_access_token({'sub': str(user.id), 'email': user.email})
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    """Generate authentication headers for test user"""
    return make_auth_headers(test_user)


@pytest.fixture
def other_auth_headers(other_user: User) -> dict:
    return make_auth_headers(other_user)


@pytest_asyncio.fixture
async def templates(db_session: AsyncSession) -> List[Template]:
    """The built-in template catalogue"""
    rows = [Template(**data) for data in SAMPLE_TEMPLATES]
    db_session.add_all(rows)
    await db_session.commit()
    return rows


@pytest_asyncio.fixture
async def test_layout(db_session: AsyncSession, test_user: User) -> Layout:
    """A layout owned by test_user with two boxes"""
    layout = Layout(user_id=str(test_user.id), name="My Résumé #1", description="demo")
    layout.boxes = [
        Box(position_x=10, position_y=20, width="50%", columns=2, sort_order=0, components=[
            Component(type="button", props={"content": "Go"}, sort_order=0),
            Component(type="radio", props={"options": ["A", "B"], "value": "A"}, column_index=1, sort_order=1),
        ]),
        Box(position_x=0, position_y=0, width="100%", columns=1, sort_order=1, components=[
            Component(type="text", props={"content": "Hello"}, sort_order=0),
        ]),
    ]
    db_session.add(layout)
    await db_session.commit()
    return layout


@pytest_asyncio.fixture
async def other_layout(db_session: AsyncSession, other_user: User) -> Layout:
    layout = Layout(user_id=str(other_user.id), name="Not yours")
    layout.boxes = [Box(sort_order=0, components=[Component(type="text", props={"content": "secret"})])]
    db_session.add(layout)
    await db_session.commit()
    return layout
