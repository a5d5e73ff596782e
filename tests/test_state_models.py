import pytest
from pydantic import ValidationError

from task_dialogue.state.models import DialogueState, DialogueStatus, OriginatingIntent


def _state(**overrides) -> DialogueState:
    fields = dict(
        conversation_id="c1",
        intent_name="stock_purchase",
        required_slots=["ticker", "quantity"],
    )
    fields.update(overrides)
    return DialogueState(**fields)


def test_missing_slots_treat_null_as_missing():
    state = _state(collected_slots={"ticker": None, "quantity": 5})

    assert state.missing_slots() == ["ticker"]


def test_missing_slots_follow_declared_order():
    state = _state(required_slots=["quantity", "ticker"])

    assert state.missing_slots() == ["quantity", "ticker"]


def test_merge_slots_overwrites_but_never_erases():
    state = _state(collected_slots={"ticker": "MSFT"})

    state.merge_slots({"ticker": "AAPL", "quantity": None})

    assert state.collected_slots == {"ticker": "AAPL"}


def test_confirmation_with_missing_slots_is_rejected():
    with pytest.raises(ValidationError):
        _state(collected_slots={"ticker": "AAPL"}, status=DialogueStatus.CONFIRMATION_PENDING)


def test_confirmation_with_all_slots_is_accepted():
    state = _state(
        collected_slots={"ticker": "AAPL", "quantity": 1},
        status=DialogueStatus.CONFIRMATION_PENDING,
    )

    assert state.missing_slots() == []


def test_originating_chain_walks_to_root():
    root = OriginatingIntent(intent_name="stock_purchase", arguments={"ticker": "AAPL"})
    middle = OriginatingIntent(intent_name="open_account", originating_intent=root)

    assert middle.chain() == ["open_account", "stock_purchase"]


def test_nested_originating_intent_survives_json():
    state = _state(
        intent_name="identity_check",
        required_slots=["document"],
        originating_intent=OriginatingIntent(
            intent_name="open_account",
            arguments={"education": "bachelor"},
            originating_intent=OriginatingIntent(
                intent_name="stock_purchase", arguments={"ticker": "AAPL", "quantity": 3}
            ),
        ),
    )
    state.add_message("user", "hi")

    restored = DialogueState.model_validate(state.model_dump(mode="json"))

    assert restored == state
    assert restored.originating_intent.originating_intent.arguments["quantity"] == 3
