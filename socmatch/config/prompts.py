"""
config/prompts.py
──────────────────────────────────────────────────────────────────────────────
All LLM prompt strings in one place.

Why centralise prompts?
  • Easy to diff and review prompt changes in version control
  • Swap or tune a prompt without touching service logic

To change the ranking instructions: edit AI_RANK_SYSTEM below.
To support a different output schema: change the schema lines in both
templates and services/ai_ranker.py.
"""
from __future__ import annotations

from socmatch.domain.models import ProgramQuery

# ── System prompt ──────────────────────────────────────────────────────────────
AI_RANK_SYSTEM = """\
You are an expert in occupational classification. Given an academic program, \
you identify the SOC (Standard Occupational Classification) codes from the \
2018 SOC system that graduates of the program would most likely pursue.

Only return valid 2018 SOC detailed occupation codes (format: XX-XXXX). \
No other text.
"""

# ── User message template ──────────────────────────────────────────────────────
AI_RANK_USER_TEMPLATE = """\
Identify the {top_n} most relevant SOC codes for the following academic program.

Program Information:
- Name: {name}
- Code: {code}
- CIP Code: {cip_code}
- Degree: {degree}
- Type: {program_type}
- College: {college}
- Level: {level}

Return ONLY a JSON array of objects with these exact fields:
[{{"code": "XX-XXXX", "title": "Occupation Title", "reason": "Brief explanation of relevance"}}]\
"""

_MISSING = "N/A"


def build_system_prompt() -> str:
    return AI_RANK_SYSTEM


def build_user_message(program: ProgramQuery, top_n: int) -> str:
    """Assembles the user-turn message for the LLM.

    Args:
        program: Program record being matched.
        top_n:   Number of SOC codes to request.

    Returns:
        Formatted user message string; absent fields render as ``N/A``.
    """
    return AI_RANK_USER_TEMPLATE.format(
        top_n=top_n,
        name=program.display_name or _MISSING,
        code=program.code or _MISSING,
        cip_code=program.cip_code or _MISSING,
        degree=program.degree_designation or _MISSING,
        program_type=program.program_type or _MISSING,
        college=program.college or _MISSING,
        level=program.level or _MISSING,
    )
