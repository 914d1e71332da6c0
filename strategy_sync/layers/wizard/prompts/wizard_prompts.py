"""Guided Strategy Wizard prompts (English, shown to the user as-is)."""

# 단계별 프롬프트: Business Model Fundamentals → Strategic Direction → OKR Development → Financial Goals
STEP_PROMPTS: dict[int, str] = {
    1: (
        "I'll help you create a complete strategy. Let's start with the fundamentals of your "
        "business model. Could you tell me about your target customer segments, what pain points "
        "you're solving, and what unique value you provide?"
    ),
    2: (
        "Great! Now let's talk about your strategic approach. Would you prefer a conservative "
        "approach prioritizing stability and consistent profitability, a moderate approach balancing "
        "growth with risk management, or an aggressive approach emphasizing faster growth with "
        "higher risk?"
    ),
    3: (
        "I'll create a strategy document based on your approach. Now let's define some key "
        "objectives and results. What are the 3-5 most important goals you want to achieve in the "
        "next year?"
    ),
    4: (
        "Now let's set some financial goals. What are your targets for revenue, profit margin, and "
        "investment capacity? Please provide ranges for optimistic, expected, and pessimistic "
        "scenarios."
    ),
}

STEP_TITLES: dict[int, str] = {
    1: "Business Model Fundamentals",
    2: "Strategic Direction",
    3: "OKR Development",
    4: "Financial Goals",
}

GENERATING_MESSAGE = (
    "Thank you! I'm now generating your complete set of strategy documents based on all your "
    "inputs. This includes an Enhanced Strategy Canvas, Strategy Document, OKRs, and Financial "
    "Projections - all aligned and coherent with each other."
)

COMPLETION_MESSAGE = (
    "I've created your strategy documents! You can view and edit them using the tabs on the left. "
    "I've also identified some potential improvements and inconsistencies that you might want to "
    "address to strengthen your strategy."
)

CANCELLED_MESSAGE = "Guided strategy setup cancelled. Your existing documents were left unchanged."

GREETING_MESSAGE = (
    "I notice you don't have any strategy documents yet. Would you like me to guide you through "
    "creating a complete strategy? I can help you develop a business model, strategic direction, "
    "OKRs, and financial projections."
)
