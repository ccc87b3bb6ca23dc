import os
import uuid

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from linkforge.core import db as db_module
from linkforge.core.security import hash_password
from linkforge.main import app
from linkforge.models.enums import Role, Status
from linkforge.models.user import User
from linkforge.services.profiles import find_or_create_default


TEST_DB_URL = "sqlite://:memory:"
os.environ["DATABASE_URL"] = TEST_DB_URL
db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=db_module.TORTOISE_ORM)
    await Tortoise.generate_schemas()


@pytest_asyncio.fixture
async def db():
    """
    Fresh database for service-level tests that do not need HTTP.
    """
    await _init_test_db()
    yield
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def client(db):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB.
    The app lifespan is not run; the db fixture owns the connection.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


async def _make_user(role: Role, password: str, status: Status = Status.ACTIVE, **fields) -> User:
    tag = uuid.uuid4().hex[:6]
    user = await User.create(
        username=fields.pop("username", f"{role.value.lower()}_{tag}"),
        email=fields.pop("email", f"{role.value.lower()}_{tag}@example.com"),
        password_hash=hash_password(password),
        role=role,
        status=status,
        **fields,
    )
    await find_or_create_default(user)
    return user


@pytest_asyncio.fixture
async def create_user(db):
    """
    Factory fixture to create regular users (with their default profile) directly via ORM.
    """

    async def _create_user(password: str = "UserPass!23", **fields) -> tuple[User, str]:
        return await _make_user(Role.USER, password, **fields), password

    return _create_user


@pytest_asyncio.fixture
async def create_admin(db):
    """
    Factory fixture to create ADMIN accounts for privileged endpoints.
    """

    async def _create_admin(password: str = "AdminPass!23", **fields) -> tuple[User, str]:
        return await _make_user(Role.ADMIN, password, **fields), password

    return _create_admin


@pytest_asyncio.fixture
async def create_founder(db):
    """
    Factory fixture to create FOUNDER accounts.
    """

    async def _create_founder(password: str = "FounderPass!23", **fields) -> tuple[User, str]:
        return await _make_user(Role.FOUNDER, password, **fields), password

    return _create_founder


@pytest_asyncio.fixture
async def auth_header_factory(client):
    """
    Helper fixture to obtain Authorization headers via the login endpoint.

    The login response also sets the access cookie on the client; it is
    cleared so each request authenticates only through the header it sends.
    """

    async def _get_headers(user: User, password: str) -> dict[str, str]:
        resp = await client.post(
            "/api/v1/auth/login",
            json={"email": user.email, "password": password},
        )
        assert resp.status_code == 200, resp.text
        client.cookies.clear()
        token = resp.json()["data"]["accessToken"]
        return {"Authorization": f"Bearer {token}"}

    return _get_headers
