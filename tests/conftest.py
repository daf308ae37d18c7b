import os

# Point the app at an in-memory database before anything imports app.database
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from sqlalchemy.orm import sessionmaker

from app.database import get_engine, init_db
from app.schemas import Settings
from app.services.reports import CategoryEntry, ReportForm
from app.services.storage import KeyValueStore, Repository


@pytest.fixture
def db():
    """Fresh in-memory database per test."""
    engine = get_engine("sqlite://")
    init_db(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def repository(db):
    return Repository(KeyValueStore(db))


@pytest.fixture
def settings():
    return Settings()


class RecordingNotifier:
    """Stands in for WebhookNotifier; remembers what would have been sent."""

    def __init__(self):
        self.sent = []

    def notify(self, report, settings):
        self.sent.append((report, settings))
        return True


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(db, notifier):
    from fastapi.testclient import TestClient
    from app.database import get_db
    from app.main import app
    from app.services.notifier import get_notifier

    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_form(hours=None, texts=None, **fields) -> ReportForm:
    """
    Build a standard 8-hour report form.

    hours/texts override per-category values, e.g. hours={"sns": 8}.
    """
    hours = hours if hours is not None else {"sns": 4, "wix": 2, "design": 2}
    texts = texts if texts is not None else {"sns": "Instagram投稿", "wix": "LP修正", "design": "バナー作成"}
    categories = {
        key: CategoryEntry(text=texts.get(key, ""), hours=hours.get(key, 0))
        for key in ("sns", "wix", "design", "other")
    }
    values = {
        "staff_name": "Alice",
        "date": "2024-01-15",
        "work_type": "standard",
        "work_hours": "8時間（9:00〜18:00、休憩1時間）",
        "categories": categories,
    }
    values.update(fields)
    return ReportForm(**values)


@pytest.fixture
def form_factory():
    return make_form
