"""
Template name constants.

Pure constants - no I/O or file system knowledge.
"""


class Template:
    """Template name constants. Use these instead of raw strings."""

    INTENT_EXTRACTION = "intent_extraction"
    RESULT_SUMMARY = "result_summary"
    FREE_CHAT = "free_chat"
