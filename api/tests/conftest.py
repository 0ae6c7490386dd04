import os

# Settings refuse to load without a database URL; tests bind their own engines
os.environ.setdefault("DATABASE_URL", "sqlite://")

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session

from app.core.database import build_engine, get_engine, get_session
from app.main import app
from app.models import Lesson, Project, User


@pytest.fixture
def engine(tmp_path):
    """File-backed SQLite engine so threadpool fetches get their own connections."""
    db_path = tmp_path / "test_aipath.db"
    engine = build_engine(f"sqlite:///{db_path}")
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


def make_lesson(project_id, slug, order, is_premium):
    return Lesson(
        project_id=project_id,
        slug=slug,
        title=slug.replace("-", " ").title(),
        order=order,
        is_premium=is_premium,
        problem_content=f"Problem for {slug}",
        solution_content=f"Solution walkthrough for {slug}",
        explanation_content=f"Explanation for {slug}",
        starter_code=f"# {slug} starter\n",
        solution_code=f"# {slug} solution\nprint('done')\n",
    )


@pytest.fixture
def curriculum(session):
    """Seed users on every plan, a published project, and an unpublished draft."""
    users = {
        "free": User(username="free_learner", email="free@example.com", subscription_plan="free"),
        "hobby": User(username="hobby_learner", email="hobby@example.com", subscription_plan="hobby"),
        "pro": User(username="pro_learner", email="pro@example.com", subscription_plan="pro"),
        "lifetime": User(username="lifetime_learner", email="life@example.com", subscription_plan="lifetime"),
        "none": User(username="new_learner", email="new@example.com", subscription_plan=None),
    }
    for user in users.values():
        session.add(user)

    essentials = Project(
        slug="python-essentials",
        title="Python Essentials",
        description="Core Python for AI engineering",
        difficulty="beginner",
        category="foundations",
        estimated_hours=6,
        order=1,
        is_published=True,
        is_premium=False,
    )
    agents = Project(
        slug="agents",
        title="Agents",
        description="Build tool-using agents",
        difficulty="advanced",
        category="agents",
        estimated_hours=10,
        order=2,
        is_published=True,
    )
    drafts = Project(
        slug="drafts",
        title="Drafts",
        description="Not yet published",
        difficulty="intermediate",
        category="misc",
        estimated_hours=1,
        order=3,
        is_published=False,
    )
    session.add(essentials)
    session.add(agents)
    session.add(drafts)
    session.commit()

    lessons = {
        # Inserted out of order to check ordering by `order`
        "functions": make_lesson(essentials.id, "functions", 2, is_premium=True),
        "variables-types": make_lesson(essentials.id, "variables-types", 1, is_premium=False),
        "control-flow": make_lesson(essentials.id, "control-flow", 3, is_premium=True),
        "agent-loop": make_lesson(agents.id, "agent-loop", 1, is_premium=True),
        "draft-lesson": make_lesson(drafts.id, "draft-lesson", 1, is_premium=False),
    }
    for lesson in lessons.values():
        session.add(lesson)
    session.commit()

    return SimpleNamespace(
        users={name: user.id for name, user in users.items()},
        lessons={slug: lesson.id for slug, lesson in lessons.items()},
        projects={"python-essentials": essentials.id, "agents": agents.id, "drafts": drafts.id},
    )


@pytest.fixture
def client(engine):
    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_engine] = lambda: engine
    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()
