import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from task_dialogue.exceptions import StateStoreError
from task_dialogue.infrastructure.database.connection import init_db
from task_dialogue.repositories.state import (
    InMemoryDialogueStateRepository,
    SQLDialogueStateRepository,
)
from task_dialogue.state.models import DialogueState, DialogueStatus, OriginatingIntent


def _sqlite_engine():
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture(params=["memory", "sql"])
def repo(request):
    if request.param == "memory":
        return InMemoryDialogueStateRepository()
    engine = _sqlite_engine()
    init_db(engine)
    return SQLDialogueStateRepository(engine)


def _state(**overrides) -> DialogueState:
    fields = dict(
        conversation_id="c1",
        intent_name="open_account",
        required_slots=["education", "occupation", "address"],
        collected_slots={"education": "bachelor"},
        originating_intent=OriginatingIntent(
            intent_name="stock_purchase", arguments={"ticker": "AAPL", "quantity": 100}
        ),
    )
    fields.update(overrides)
    return DialogueState(**fields)


def test_unknown_conversation_is_idle(repo):
    assert repo.get("nobody") is None


def test_save_then_get_returns_equivalent_state(repo):
    state = _state()
    state.add_message("user", "open an account")

    repo.save("c1", state)
    loaded = repo.get("c1")

    assert loaded.intent_name == "open_account"
    assert loaded.collected_slots == {"education": "bachelor"}
    assert loaded.status == DialogueStatus.GATHERING_INFO
    assert loaded.originating_intent.arguments == {"ticker": "AAPL", "quantity": 100}
    assert [m.content for m in loaded.history] == ["open an account"]


def test_save_replaces_existing_state(repo):
    repo.save("c1", _state())
    repo.save(
        "c1",
        _state(
            collected_slots={"education": "bachelor", "occupation": "chef", "address": "x"},
            status=DialogueStatus.CONFIRMATION_PENDING,
        ),
    )

    loaded = repo.get("c1")
    assert loaded.status == DialogueStatus.CONFIRMATION_PENDING
    assert loaded.collected_slots["occupation"] == "chef"


def test_loaded_state_is_an_independent_copy(repo):
    repo.save("c1", _state())

    loaded = repo.get("c1")
    loaded.collected_slots["education"] = "phd"

    assert repo.get("c1").collected_slots == {"education": "bachelor"}


def test_clear_reports_whether_state_existed(repo):
    repo.save("c1", _state())

    assert repo.clear("c1") is True
    assert repo.get("c1") is None
    assert repo.clear("c1") is False


def test_conversations_are_isolated(repo):
    repo.save("c1", _state())
    repo.save("c2", _state(conversation_id="c2", intent_name="stock_purchase",
                           required_slots=["ticker", "quantity"], collected_slots={},
                           originating_intent=None))

    repo.clear("c1")

    assert repo.get("c2").intent_name == "stock_purchase"


def test_sql_failures_surface_as_state_store_error():
    # Tables were never created
    repo = SQLDialogueStateRepository(_sqlite_engine())

    with pytest.raises(StateStoreError):
        repo.get("c1")
    with pytest.raises(StateStoreError):
        repo.save("c1", _state())
