"""Shared fixtures: an app over a throwaway SQLite database, seeded accounts and test images."""

import base64
import io
import os
import tempfile
import unittest
from datetime import timedelta

from fastapi.testclient import TestClient
from PIL import Image

from cms.core.config import Settings
from cms.core.database import Database
from cms.core.security import create_access_token, hash_password
from cms.main import create_app
from cms.models import Base, User

TEST_JWT_SECRET = "test-secret-with-at-least-thirty-two-bytes"
DEFAULT_PASSWORD = "password123"


def make_settings(**overrides) -> Settings:
    values = {
        "APP_ENV": "test",
        "DATABASE_URL": "sqlite://",
        "JWT_SECRET": TEST_JWT_SECRET,
        "BCRYPT_ROUNDS": 4,
    }
    values.update(overrides)
    return Settings(**values)


def image_data_url(fmt: str = "png", size: tuple[int, int] = (80, 40), color=(200, 30, 30)) -> str:
    """Solid-colour image encoded as a data URL with the given declared subtype."""
    pil_format = {"jpg": "JPEG", "jpeg": "JPEG", "png": "PNG", "gif": "GIF"}[fmt]
    image = Image.new("RGB", size, color)
    buffer = io.BytesIO()
    image.save(buffer, format=pil_format)
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/{fmt};base64,{encoded}"


def decode_data_url(data_url: str) -> Image.Image:
    _, _, payload = data_url.partition(",")
    return Image.open(io.BytesIO(base64.b64decode(payload)))


def fake_avatars(count: int) -> list[dict]:
    return [
        {"avatarId": f"avatar-{i}", "dataUrl": "data:image/png;base64,AA==", "uploadedAt": i}
        for i in range(count)
    ]


class DatabaseTestCase(unittest.TestCase):
    """Fresh SQLite file database per test, schema created from the ORM metadata."""

    def setUp(self) -> None:
        self._tmpdir = tempfile.TemporaryDirectory()
        url = f"sqlite:///{os.path.join(self._tmpdir.name, 'cms.db')}"
        self.settings = make_settings(DATABASE_URL=url)
        self.database = Database.from_settings(self.settings)
        Base.metadata.create_all(self.database.engine)

    def tearDown(self) -> None:
        self.database.dispose()
        self._tmpdir.cleanup()

    def seed_user(
        self,
        username: str = "alice",
        password: str = DEFAULT_PASSWORD,
        role: str | None = "user",
        email: str | None = None,
        avatars: list[dict] | None = None,
        active_avatar_id: str | None = None,
    ) -> User:
        db = self.database.session()
        try:
            user = User(
                username=username,
                password_hash=hash_password(password, rounds=4),
                role=role,
                email=email,
                avatars=avatars or [],
                active_avatar_id=active_avatar_id,
            )
            db.add(user)
            db.commit()
            return user
        finally:
            db.close()

    def load_user(self, user_id: str) -> User:
        db = self.database.session()
        try:
            return db.get(User, user_id)
        finally:
            db.close()


class ApiTestCase(DatabaseTestCase):
    """DatabaseTestCase plus the FastAPI app and a TestClient bound to it."""

    def setUp(self) -> None:
        super().setUp()
        self.app = create_app(self.settings, self.database)
        self.client = TestClient(self.app)

    def tearDown(self) -> None:
        self.client.close()
        super().tearDown()

    def token_for(self, user: User, ttl: timedelta | None = None) -> str:
        return create_access_token(user.user_id, user.username, user.role or "user", self.settings, ttl=ttl)

    def auth(self, user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token_for(user)}"}
