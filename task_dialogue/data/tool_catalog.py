from task_dialogue.domain.models import SlotDefinition, ToolKind, ToolMetadata
from task_dialogue.domain.registry import MODIFY_SLOT_INTENT

# ==============================================================================
# SLOT DEFINITIONS
# ==============================================================================

SLOTS = [
    # --- Account opening ---
    SlotDefinition(
        name="education",
        question="What is your highest level of education?",
        description="Highest completed education level, e.g. 'bachelor'.",
    ),
    SlotDefinition(
        name="occupation",
        question="What is your occupation?",
        description="The user's current occupation.",
    ),
    SlotDefinition(
        name="address",
        question="What is your residential address?",
        description="Full residential address.",
    ),
    # --- Stock purchase ---
    SlotDefinition(
        name="ticker",
        question="Sure, which stock ticker would you like to buy?",
        description="Stock ticker symbol, e.g. 'AAPL'.",
    ),
    SlotDefinition(
        name="quantity",
        question="How many shares would you like to buy?",
        description="Number of shares to buy.",
        json_type="integer",
    ),
    # --- Weather (optional, never asked) ---
    SlotDefinition(
        name="city",
        question="Which city should I check?",
        description="City name. Leave empty if the user did not mention one.",
    ),
    # --- Slot correction ---
    SlotDefinition(
        name="slot_name",
        question="Which detail would you like to change?",
        description="Name of the collected field the user says is wrong.",
    ),
    SlotDefinition(
        name="slot_value",
        question="What should the new value be?",
        description="The corrected value for that field.",
    ),
]

# ==============================================================================
# TOOL DEFINITIONS
# ==============================================================================

TOOLS = [
    ToolMetadata(
        name="open_account",
        title="account opening",
        description=(
            "Open a new brokerage account for the user. "
            "Requires education, occupation and address."
        ),
        kind=ToolKind.BUSINESS,
        required_slots=("education", "occupation", "address"),
    ),
    ToolMetadata(
        name="stock_purchase",
        title="stock purchase",
        description=(
            "Buy a given number of shares of a stock for the user. "
            "Requires the ticker symbol and the quantity."
        ),
        kind=ToolKind.BUSINESS,
        required_slots=("ticker", "quantity"),
    ),
    ToolMetadata(
        name="check_weather",
        title="weather check",
        description=(
            "Look up the current weather for a city. "
            "If the user names no city, leave it empty."
        ),
        kind=ToolKind.DIGRESSION,
        optional_slots=("city",),
    ),
    ToolMetadata(
        name=MODIFY_SLOT_INTENT,
        title="detail correction",
        description=(
            "Use only while the user is reviewing collected details, when they "
            "say one of them is wrong and give the new value."
        ),
        kind=ToolKind.CONTROL,
        required_slots=("slot_name", "slot_value"),
    ),
]
