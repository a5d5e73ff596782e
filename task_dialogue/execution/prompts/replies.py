"""
Fixed user-facing replies produced by the DialogueEngine itself.

Oracle-generated text (summaries, free chat) is built from the Jinja2
templates instead; these strings cover the deterministic turns.
"""

from typing import Any, Dict

# =============================================================================
# TEMPLATES
# =============================================================================

CONFIRMATION = """Please confirm the following details:
{details}
Is this correct?"""

CONFIRMATION_LINE = "- {slot}: {value}"

WHICH_FIELD_IS_WRONG = "Okay, which of these details is incorrect?"

BACK_TO_TASK = """

Now, back to your {task}: {prompt}"""

DEPENDENCY_REQUIRED = (
    "Got it, I have your {task} request. Before I can carry it out, "
    "we need to complete the {dependency} first. Let's get started. {prompt}"
)

RESUMING_TASK = "Now let's get back to your {task}."

DEPENDENCY_CYCLE = (
    "Sorry, I can't complete your {task}: it depends on {dependency}, "
    "which is already waiting on it."
)

FREE_CHAT_FALLBACK = "Sorry, I didn't quite catch that. Could you rephrase?"

SUMMARY_SUCCESS_FALLBACK = "Done! Your request has been completed."

SUMMARY_ERROR_FALLBACK = "Sorry, something went wrong while processing your request: {message}"


# =============================================================================
# BUILDER FUNCTIONS
# =============================================================================

def build_confirmation(collected_slots: Dict[str, Any]) -> str:
    lines = [
        CONFIRMATION_LINE.format(slot=slot, value=value)
        for slot, value in collected_slots.items()
    ]
    return CONFIRMATION.format(details="\n".join(lines))
