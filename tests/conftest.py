import os
import shutil
import tempfile

import pytest
import pytest_asyncio

_TEST_ROOT = tempfile.mkdtemp(prefix="fleet-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TEST_ROOT, 'test.sqlite3')}"
os.environ["UPLOAD_DIR"] = os.path.join(_TEST_ROOT, "uploads")
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-with-at-least-32-characters"


@pytest_asyncio.fixture(autouse=True)
async def fresh_db():
    """Recreate tables and empty the upload directory for every test."""
    from app.config import settings
    from app.database import create_tables, drop_tables, engine

    await drop_tables()
    await create_tables()
    shutil.rmtree(settings.upload_dir, ignore_errors=True)
    os.makedirs(settings.upload_dir, exist_ok=True)
    yield
    await engine.dispose()


@pytest.fixture(scope="session", autouse=True)
def cleanup_test_root():
    yield
    shutil.rmtree(_TEST_ROOT, ignore_errors=True)
