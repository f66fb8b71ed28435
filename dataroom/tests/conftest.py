from __future__ import annotations

import os
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Iterable, Optional

_TEST_DB_DIR = Path(tempfile.mkdtemp(prefix="dataroom-tests-"))
os.environ["DATAROOM_DATABASE_URL"] = f"sqlite:///{(_TEST_DB_DIR / 'dataroom.db').as_posix()}"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from dataroom_api.auth.service import create_access_token  # noqa: E402
from dataroom_api.config import DataRoomSettings  # noqa: E402
from dataroom_api.db.base import Base  # noqa: E402
from dataroom_api.db.models import (  # noqa: E402
    DataRoomRecord,
    FolderRecord,
    PrincipalRecord,
)
from dataroom_api.db.session import SessionLocal, engine, run_in_session  # noqa: E402
from dataroom_api.domain.models import Capability  # noqa: E402
from dataroom_api.engine.clock import FixedClock  # noqa: E402
from dataroom_api.repo.grants import GrantRepository  # noqa: E402
from dataroom_api.service.facade import DataRoomServices, set_data_room_services  # noqa: E402

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class RecordingNotifier:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str, dict[str, Any]]] = []

    def notify(self, recipient_id: str, event_kind: str, payload) -> None:
        self.calls.append((recipient_id, event_kind, dict(payload)))

    def recipients(self, event_kind: str) -> list[str]:
        return [recipient for recipient, kind, _ in self.calls if kind == event_kind]


class Factory:
    """Seeds principals, rooms, folders and grants straight into the store."""

    def __init__(self, clock: FixedClock) -> None:
        self.clock = clock

    def principal(self, email: str, name: Optional[str] = None) -> str:
        def _create(session) -> str:
            record = PrincipalRecord(email=email, display_name=name, verified=True)
            session.add(record)
            session.flush()
            return record.id

        return run_in_session(_create)

    def room(
        self,
        owner_id: str,
        name: str = "Project Atlas",
        *,
        expires_in: Optional[timedelta] = None,
        archived: bool = False,
    ) -> str:
        now = self.clock.now()

        def _create(session) -> str:
            record = DataRoomRecord(
                name=name,
                owner_id=owner_id,
                expires_at=now + expires_in if expires_in is not None else None,
                archived_at=now if archived else None,
                archived_by=owner_id if archived else None,
                created_at=now,
                updated_at=now,
            )
            session.add(record)
            session.flush()
            return record.id

        return run_in_session(_create)

    def folder(self, room_id: str, name: str, parent_id: Optional[str] = None) -> str:
        def _create(session) -> str:
            record = FolderRecord(room_id=room_id, parent_id=parent_id, name=name)
            session.add(record)
            session.flush()
            return record.id

        return run_in_session(_create)

    def grant(
        self,
        principal_id: str,
        room_id: str,
        capabilities: Iterable[Capability],
        folder_id: Optional[str] = None,
    ) -> str:
        def _create(session) -> str:
            record = GrantRepository().upsert_union(
                principal_id=principal_id,
                room_id=room_id,
                folder_id=folder_id,
                capabilities=capabilities,
                granted_by=None,
                granted_at=self.clock.now(),
                session=session,
            )
            return record.id

        return run_in_session(_create)


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    set_data_room_services(None)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def factory(clock: FixedClock) -> Factory:
    return Factory(clock)


@pytest.fixture
def make_services(clock: FixedClock, notifier: RecordingNotifier):
    def _make(**overrides: Any) -> DataRoomServices:
        settings = DataRoomSettings(**overrides)
        return DataRoomServices(settings, clock=clock, notifier=notifier)

    return _make


@pytest.fixture
def services(make_services) -> DataRoomServices:
    return make_services()


@pytest.fixture
def client(services: DataRoomServices) -> TestClient:
    from dataroom_api.main import app

    set_data_room_services(services)
    return TestClient(app)


def auth_headers(principal_id: str) -> dict[str, str]:
    token, _ = create_access_token(principal_id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for():
    return auth_headers


@pytest.fixture
def session():
    with SessionLocal() as db_session:
        yield db_session
