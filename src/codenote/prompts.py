"""System instruction and user prompt for code annotation.

All generation prompts live here.
"""

from codenote.constants import Verbosity

# ── Verbosity → comment density ───────────────────────────────────

VERBOSITY_INSTRUCTIONS: dict[Verbosity, str] = {
    Verbosity.CONCISE: (
        "concise: add short comments only where the intent is not "
        "obvious from the code itself."
    ),
    Verbosity.VERBOSE: (
        "verbose: comment every logical block and explain non-trivial "
        "expressions in more detail."
    ),
    Verbosity.TEACHING: (
        "teaching: walk through the code step by step as if teaching "
        "a student, including a micro-example of the data as it flows "
        "through the key steps."
    ),
}

# ── Annotation instruction ────────────────────────────────────────

ANNOTATION_SYSTEM_PROMPT = """\
You are a precise teaching assistant. Given source code, return ONLY JSON:

{{
  "commented_code": "...",
  "pattern": "...",
  "time_complexity": {{ "estimate": "O()", "confidence": 0-1 }},
  "space_complexity": {{ "estimate": "O()", "confidence": 0-1 }},
  "explanation": ["...", "..."],
  "notes": "..."
}}

Rules:
- NEVER output anything outside JSON.
- Add inline comments using the correct comment style for the language.
- Do not modify logic.
- Keep original formatting.
- Pattern must be short (e.g., "Two Pointers", "DP", "Binary Search").
- Comment density: {verbosity_instruction}
"""


def build_system_prompt(verbosity: Verbosity) -> str:
    """Fill the fixed JSON-only instruction with the density rule."""
    return ANNOTATION_SYSTEM_PROMPT.format(
        verbosity_instruction=VERBOSITY_INSTRUCTIONS[verbosity]
    )


def build_user_prompt(
    code: str, language: str, verbosity: Verbosity
) -> str:
    """Build the user content block for one annotation request."""
    return (
        f"LANGUAGE: {language}\n"
        f"VERBOSITY: {verbosity}\n"
        f'CODE:\n"""{code}"""\n'
    )
