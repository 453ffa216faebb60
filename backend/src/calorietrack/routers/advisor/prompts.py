from __future__ import annotations

from typing import List, Optional, Sequence

from .schemas import ConversationTurn, ProfileSnapshot, PromptTurn

CHAT_PERSONA = (
    "You are a professional diet advisor and nutritionist. Your role is to:\n"
    "- Provide helpful, accurate, and personalized diet advice\n"
    "- Answer questions about nutrition, calories, and healthy eating habits\n"
    "- Suggest meal plans and food alternatives when asked\n"
    "- Help users understand their dietary needs based on their goals\n"
    "- Keep responses concise but informative\n"
    "\n"
    "Use the user's information when making recommendations."
)

CHAT_ACKNOWLEDGEMENT = "I understand. I'm ready to help with diet and nutrition advice."

PLAN_PERSONA = (
    "You are a professional nutritionist and meal planner. Your task is to create "
    "a personalized meal plan for the user for next week."
)

PLAN_TASK = (
    "Based on this information, create a detailed 7-day meal plan that:\n"
    "1. Stays within the daily calorie allowance\n"
    "2. Includes breakfast, lunch and dinner\n"
    "3. Is balanced with proteins, carbs, and healthy fats\n"
    "4. Considers the user's goal (weight loss/gain/maintenance)\n"
    "5. Is practical and uses common ingredients\n"
    "\n"
    "Format the plan clearly with each day and meal listed."
)

REVIEW_PERSONA = (
    "You are a professional nutritionist reviewing a user's progress. Your task is to "
    "provide a comprehensive review of their meal plan adherence and overall progress."
)

REVIEW_TASK = (
    "Based on this information, provide a detailed review that:\n"
    "1. Evaluates how well the user followed their meal plan\n"
    "2. Analyzes their calorie intake patterns\n"
    "3. Reviews their weight progress toward their goal\n"
    "4. Identifies strengths and areas for improvement\n"
    "5. Provides specific, actionable recommendations\n"
    "\n"
    "Be encouraging but honest. Focus on progress and practical advice."
)

PLAIN_TEXT_RULE = "Do not use markdown. Reply in plain text."
BULLET_LIST_RULE = (
    "Trim all superfluous text, reply should contain only a bulleted list. "
    "Do not use markdown, reply in plain text."
)

NO_PROFILE = "User Profile: Not available."
NO_PLAN = "Current Meal Plan: No meal plan generated yet."


def _label(value: str) -> str:
    return str(value).replace("_", " ")


def profile_block(profile: Optional[ProfileSnapshot]) -> str:
    if profile is None:
        return NO_PROFILE
    target = f"{profile.goal_weight_kg:.1f} kg" if profile.goal_weight_kg else "not set"
    return "\n".join(
        [
            "User Profile:",
            f"- Name: {profile.name}",
            f"- Age: {profile.age} years old",
            f"- Sex: {profile.sex}",
            f"- Height: {profile.height_cm:.1f} cm",
            f"- Weight: {profile.weight_kg:.1f} kg",
            f"- BMI: {profile.bmi:.1f}",
            f"- Activity Level: {_label(profile.activity_level)}",
            f"- Goal: {_label(profile.goal_type)}",
            f"- Target Weight: {target}",
            f"- Pace: {profile.weekly_goal_kg:.2f} kg/week",
            f"- Daily Calorie Allowance: {profile.daily_allowance} cal",
        ]
    )


def plan_block(plan_text: Optional[str]) -> str:
    if not plan_text:
        return NO_PLAN
    return f"Current Meal Plan:\n{plan_text}"


def _sections(*parts: str) -> str:
    return "\n\n".join(part.strip("\n") for part in parts if part)


# ----------------------------
# Templates
# ----------------------------

def assemble_chat_prompt(
    profile: Optional[ProfileSnapshot],
    meal_block: str,
    weight_block: str,
    history: Sequence[ConversationTurn],
    message: str,
    acknowledge: bool = True,
) -> List[PromptTurn]:
    """
    System context first, optional acknowledgement (for transports that demand
    strict user/assistant alternation), the already truncated history, and the
    current message last.
    """
    turns = [
        PromptTurn(
            role="system",
            text=_sections(CHAT_PERSONA, profile_block(profile), meal_block, weight_block, PLAIN_TEXT_RULE),
        )
    ]
    if acknowledge:
        turns.append(PromptTurn(role="assistant", text=CHAT_ACKNOWLEDGEMENT))
    turns.extend(
        PromptTurn(role="user" if turn.role == "user" else "assistant", text=turn.content or "")
        for turn in history
    )
    turns.append(PromptTurn(role="user", text=message))
    return turns


def assemble_plan_prompt(
    profile: Optional[ProfileSnapshot],
    meal_block: str,
    weight_block: str,
) -> List[PromptTurn]:
    text = _sections(
        PLAN_PERSONA,
        profile_block(profile),
        meal_block,
        weight_block,
        PLAN_TASK,
        BULLET_LIST_RULE,
    )
    return [PromptTurn(role="user", text=text)]


def assemble_review_prompt(
    profile: Optional[ProfileSnapshot],
    meal_block: str,
    weight_block: str,
    plan_text: Optional[str],
) -> List[PromptTurn]:
    text = _sections(
        REVIEW_PERSONA,
        profile_block(profile),
        plan_block(plan_text),
        meal_block,
        weight_block,
        REVIEW_TASK,
        BULLET_LIST_RULE,
    )
    return [PromptTurn(role="user", text=text)]
