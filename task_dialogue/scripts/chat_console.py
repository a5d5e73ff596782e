"""
Interactive Console.

Chat with the dialogue engine from a terminal, using the same wiring as
the API (OpenAI oracle, demo actions, configured state backend).

Usage:
    python -m task_dialogue.scripts.chat_console [conversation_id]

Type 'exit' or press Ctrl-D to quit.
"""

import asyncio
import logging
import sys
import uuid

from task_dialogue.app.dependencies import (
    build_dialogue_engine,
    get_action_dispatcher,
    get_llm_provider,
    get_state_repository,
    get_tool_registry,
)
from task_dialogue.config import settings
from task_dialogue.infrastructure.database.connection import init_db


async def chat(conversation_id: str):
    if settings.STATE_BACKEND == "postgres":
        print("Initializing Database Connection...")
        init_db()

    engine = build_dialogue_engine(
        get_llm_provider(),
        get_tool_registry(),
        get_state_repository(),
        get_action_dispatcher(),
    )
    print(f"Conversation {conversation_id}. Type 'exit' to quit.")

    while True:
        try:
            text = input("you> ").strip()
        except EOFError:
            break
        if not text:
            continue
        if text.lower() in ("exit", "quit"):
            break

        result = await engine.process_message(text, conversation_id)
        print(f"bot> {result.reply}")
        if result.is_task_finished:
            print("--> (task finished)")


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    conversation = sys.argv[1] if len(sys.argv) > 1 else str(uuid.uuid4())
    asyncio.run(chat(conversation))
