"""
Execution Layer - Dialogue Orchestration and Oracle Calls

Defines the DialogueEngine (deterministic state machine) and the stateless
oracle wrappers it drives: the IntentExtractor and the ResponseGenerator.
"""

from task_dialogue.execution.extractor import IntentExtractor
from task_dialogue.execution.responder import ResponseGenerator
from task_dialogue.execution.engine import DialogueEngine


__all__ = [
    "DialogueEngine",
    "IntentExtractor",
    "ResponseGenerator",
]
