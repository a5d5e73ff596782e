"""
Engine - Dialogue Orchestration Layer

The DialogueEngine is the deterministic state machine that decides, turn by
turn, whether to start a task, keep collecting slots, ask for confirmation,
run a precondition as a sub-task, or defer to free chat.
-----------------------------------------------

Per turn, in priority order:
1. Digression: a side query (e.g. weather) is answered on any turn. The
    active task, if any, is left untouched and its pending question repeated.
2. Idle: no stored state. A recognized business intent starts a task;
    anything else is free chat.
3. GATHERING_INFO: merge newly extracted slots, ask for the next missing one,
    or move to confirmation once none is missing.
4. CONFIRMATION_PENDING: apply a slot correction, dispatch on an affirmative
    reply, or ask which detail is wrong.
5. Action outcome: PRECONDITION_FAILED suspends the task behind a sub-task
    for the missing dependency; SUCCESS finishes it (or resumes the suspended
    parent); ERROR ends it.

The engine holds no global state; every collaborator is injected.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from ..actions.dispatcher import ActionDispatcher
from ..actions.results import ActionResult, ActionStatus
from ..domain.registry import AFFIRMATIVE_PHRASES, MODIFY_SLOT_INTENT, ToolRegistry
from ..repositories.state import DialogueStateRepository
from ..schemas.decisions import IntentMatch, ModifySlotArguments, TurnResult
from ..state.models import DialogueState, DialogueStatus, Message, OriginatingIntent
from .extractor import IntentExtractor
from .prompts import replies
from .responder import ResponseGenerator

logger = logging.getLogger(__name__)


class DialogueEngine:
    def __init__(
        self,
        registry: ToolRegistry,
        state_repository: DialogueStateRepository,
        extractor: IntentExtractor,
        responder: ResponseGenerator,
        dispatcher: ActionDispatcher,
        affirmative_phrases: Iterable[str] = AFFIRMATIVE_PHRASES,
        max_history_messages: int = 20,
        reconfirm_resumed_task: bool = True,
    ):
        self.registry = registry
        self.state_repo = state_repository
        self.extractor = extractor
        self.responder = responder
        self.dispatcher = dispatcher
        self.affirmative_phrases = [p.lower() for p in affirmative_phrases if p]
        self.max_history_messages = max_history_messages
        self.reconfirm_resumed_task = reconfirm_resumed_task

    async def process_message(self, user_message: str, conversation_id: str) -> TurnResult:
        """
        Processes one user utterance and returns the reply.

        Oracle and action failures are absorbed into the reply; only a
        StateStoreError from the repository propagates.
        """
        state = self.state_repo.get(conversation_id)
        history = self._history_for_turn(state, user_message)

        # 1. Digression check always comes first
        digression = await self.extractor.extract(history, self.registry.digression_intents())
        if digression:
            return await self._handle_digression(digression, state, history, conversation_id)

        # 2. Idle
        if state is None:
            return await self._start_new_task(conversation_id, history)

        state.history = history

        # 4. Confirmation
        if state.status == DialogueStatus.CONFIRMATION_PENDING:
            return await self._handle_confirmation(state, user_message)

        # 3. Slot gathering
        return await self._continue_gathering(state)

    # ==========================================================================
    # Turn Branches
    # ==========================================================================

    async def _handle_digression(
        self,
        match: IntentMatch,
        state: Optional[DialogueState],
        history: List[Message],
        conversation_id: str,
    ) -> TurnResult:
        logger.info(f"Digression '{match.intent_name}' in conversation {conversation_id}")
        result = await self.dispatcher.dispatch(match.intent_name, match.arguments, conversation_id)
        reply = await self.responder.summarize(history, result)

        if state is None:
            return TurnResult(reply=reply, is_task_finished=True)

        # Steer back to the main task; its stored state is deliberately not saved here
        reply += replies.BACK_TO_TASK.format(
            task=self.registry.title_for(state.intent_name),
            prompt=self._pending_prompt(state),
        )
        return TurnResult(reply=reply, is_task_finished=False)

    async def _start_new_task(self, conversation_id: str, history: List[Message]) -> TurnResult:
        match = await self.extractor.extract(history, self.registry.business_intents())

        if match is None:
            reply = await self.responder.free_chat(history)
            return TurnResult(reply=reply, is_task_finished=True)

        logger.info(f"Starting task '{match.intent_name}' for conversation {conversation_id}")
        return await self._begin_task(conversation_id, history, match.intent_name, match.arguments)

    async def _begin_task(
        self,
        conversation_id: str,
        history: List[Message],
        intent_name: str,
        arguments: Dict[str, Any],
        parent: Optional[OriginatingIntent] = None,
        dispatch_when_complete: bool = False,
    ) -> TurnResult:
        """
        Starts `intent_name` with `arguments` already collected.

        Slot-less intents are dispatched immediately. With
        `dispatch_when_complete`, a task whose slots are all present skips
        confirmation (resuming a parent with `reconfirm_resumed_task` off).
        """
        required = self.registry.required_slots(intent_name)
        if not required:
            return await self._execute(conversation_id, history, intent_name, arguments, parent)

        state = DialogueState(
            conversation_id=conversation_id,
            intent_name=intent_name,
            required_slots=required,
            originating_intent=parent,
            history=history,
        )
        state.merge_slots(arguments)

        if dispatch_when_complete and not state.missing_slots():
            return await self._execute(conversation_id, history, intent_name, arguments, parent)
        return self._advance(state)

    async def _continue_gathering(self, state: DialogueState) -> TurnResult:
        match = await self.extractor.extract(
            state.history,
            {state.intent_name},
            active_task=self.registry.title_for(state.intent_name),
        )
        if match:
            state.merge_slots(match.arguments)
        return self._advance(state)

    async def _handle_confirmation(self, state: DialogueState, user_message: str) -> TurnResult:
        correction = await self._extract_correction(state)
        if correction:
            logger.info(f"Correcting slot '{correction.slot_name}' of '{state.intent_name}'")
            state.collected_slots[correction.slot_name] = correction.slot_value
            reply = replies.build_confirmation(state.collected_slots)
            self._persist(state, reply)
            return TurnResult(reply=reply, is_task_finished=False)

        if self._is_affirmative(user_message):
            logger.info(f"User confirmed '{state.intent_name}'")
            return await self._execute(
                state.conversation_id,
                state.history,
                state.intent_name,
                dict(state.collected_slots),
                state.originating_intent,
            )

        # Ambiguous: slots and status stay as they are
        reply = replies.WHICH_FIELD_IS_WRONG
        self._persist(state, reply)
        return TurnResult(reply=reply, is_task_finished=False)

    # ==========================================================================
    # Action Execution & Outcome Handling
    # ==========================================================================

    async def _execute(
        self,
        conversation_id: str,
        history: List[Message],
        intent_name: str,
        arguments: Dict[str, Any],
        parent: Optional[OriginatingIntent],
    ) -> TurnResult:
        result = await self.dispatcher.dispatch(intent_name, arguments, conversation_id)
        return await self._handle_action_result(
            result, conversation_id, history, intent_name, arguments, parent
        )

    async def _handle_action_result(
        self,
        result: ActionResult,
        conversation_id: str,
        history: List[Message],
        intent_name: str,
        arguments: Dict[str, Any],
        parent: Optional[OriginatingIntent],
    ) -> TurnResult:
        if result.status == ActionStatus.PRECONDITION_FAILED:
            return await self._start_dependency(
                conversation_id, history, intent_name, arguments, parent, result.missing_dependency
            )

        if result.status == ActionStatus.SUCCESS:
            summary = await self.responder.summarize(history, result)
            self.state_repo.clear(conversation_id)
            if parent is None:
                logger.info(f"Task '{intent_name}' finished for conversation {conversation_id}")
                return TurnResult(reply=summary, is_task_finished=True)

            # Sub-task done: replay the suspended parent without re-extracting it
            logger.info(f"Sub-task '{intent_name}' done, resuming '{parent.intent_name}'")
            resumed = await self._begin_task(
                conversation_id,
                history,
                parent.intent_name,
                parent.arguments,
                parent.originating_intent,
                dispatch_when_complete=not self.reconfirm_resumed_task,
            )
            resumed_reply = resumed.reply
            if not resumed.is_task_finished:
                resumed_reply = (
                    replies.RESUMING_TASK.format(task=self.registry.title_for(parent.intent_name))
                    + " " + resumed_reply
                )
            return TurnResult(
                reply=f"{summary}\n\n{resumed_reply}",
                is_task_finished=resumed.is_task_finished,
            )

        # ERROR is terminal: report it and drop the task (and any suspended parent)
        logger.warning(f"Task '{intent_name}' failed: {result.message}")
        reply = await self.responder.summarize(history, result)
        self.state_repo.clear(conversation_id)
        return TurnResult(reply=reply, is_task_finished=True)

    async def _start_dependency(
        self,
        conversation_id: str,
        history: List[Message],
        intent_name: str,
        arguments: Dict[str, Any],
        parent: Optional[OriginatingIntent],
        dependency: str,
    ) -> TurnResult:
        chain = [intent_name] + (parent.chain() if parent else [])
        if dependency in chain:
            logger.error(f"Dependency cycle: '{dependency}' already pending in {chain}")
            self.state_repo.clear(conversation_id)
            return TurnResult(
                reply=replies.DEPENDENCY_CYCLE.format(
                    task=self.registry.title_for(intent_name),
                    dependency=self.registry.title_for(dependency),
                ),
                is_task_finished=True,
            )

        snapshot = OriginatingIntent(
            intent_name=intent_name,
            arguments=dict(arguments),
            originating_intent=parent,
        )
        logger.info(f"'{intent_name}' needs '{dependency}' first; suspending it")

        required = self.registry.required_slots(dependency)
        if not required:
            return await self._begin_task(conversation_id, history, dependency, {}, snapshot)

        sub_state = DialogueState(
            conversation_id=conversation_id,
            intent_name=dependency,
            required_slots=required,
            originating_intent=snapshot,
            history=history,
        )
        reply = replies.DEPENDENCY_REQUIRED.format(
            task=self.registry.title_for(intent_name),
            dependency=self.registry.title_for(dependency),
            prompt=self.registry.question_for(required[0]),
        )
        self._persist(sub_state, reply)
        return TurnResult(reply=reply, is_task_finished=False)

    # ==========================================================================
    # State Mutation Helpers
    # ==========================================================================

    def _advance(self, state: DialogueState) -> TurnResult:
        """Asks for the next missing slot, or moves to confirmation when none is missing."""
        missing = state.missing_slots()
        if not missing:
            state.status = DialogueStatus.CONFIRMATION_PENDING
            reply = replies.build_confirmation(state.collected_slots)
            logger.info(f"'{state.intent_name}' awaiting confirmation")
        else:
            state.status = DialogueStatus.GATHERING_INFO
            reply = self.registry.question_for(missing[0])
        self._persist(state, reply)
        return TurnResult(reply=reply, is_task_finished=False)

    async def _extract_correction(self, state: DialogueState) -> Optional[ModifySlotArguments]:
        match = await self.extractor.extract(
            state.history,
            {MODIFY_SLOT_INTENT},
            active_task=self.registry.title_for(state.intent_name),
        )
        if not match:
            return None
        try:
            correction = ModifySlotArguments.model_validate(match.arguments)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed slot correction: {e}")
            return None
        if correction.slot_name not in state.required_slots:
            logger.warning(
                f"Ignoring correction of unknown slot '{correction.slot_name}' "
                f"for '{state.intent_name}'"
            )
            return None
        return correction

    def _pending_prompt(self, state: DialogueState) -> str:
        missing = state.missing_slots()
        if state.status == DialogueStatus.CONFIRMATION_PENDING or not missing:
            return replies.build_confirmation(state.collected_slots)
        return self.registry.question_for(missing[0])

    def _is_affirmative(self, user_message: str) -> bool:
        # Literal substring match; no negation handling
        text = user_message.lower()
        return any(phrase in text for phrase in self.affirmative_phrases)

    def _history_for_turn(self, state: Optional[DialogueState], user_message: str) -> List[Message]:
        history = list(state.history) if state else []
        history.append(Message(role="user", content=user_message))
        return self._trim(history)

    def _persist(self, state: DialogueState, reply: str):
        state.add_message("assistant", reply)
        state.history = self._trim(state.history)
        self.state_repo.save(state.conversation_id, state)

    def _trim(self, history: List[Message]) -> List[Message]:
        if self.max_history_messages and len(history) > self.max_history_messages:
            return history[-self.max_history_messages:]
        return history
