"""Feedback and illustrative output templates for scored submissions."""

from vibe_progression.catalog.rubrics import DEFAULT_SAMPLE_OUTPUT, SAMPLE_OUTPUTS

FALLBACK_PASS_FEEDBACK = "Your vibe is strong! Good detail."
FALLBACK_FAIL_FEEDBACK = "Your prompt feels a bit hollow. Add more context!"

VERB_TIP = "try using more active verbs like 'refactor' or 'implement'"
GENERIC_TIP = "add more specific technical detail to your request"


def quality_prefix(score: int) -> str:
    """Tone of a passing verdict by score band."""
    if score > 90:
        return "Spectacular aura! ✨"
    if score > 80:
        return "Strong technical vibe."
    return "Vibe check passed."


def pass_feedback(score: int, found_keywords: list[str], found_intents: list[str]) -> str:
    intent = found_intents[0] if found_intents else "clear"
    return (
        f"{quality_prefix(score)} You covered {len(found_keywords)} core concepts. "
        f"Your intent ({intent}) was effectively communicated."
    )


def fail_feedback(missing_keywords: list[str], found_intents: list[str]) -> str:
    """Grounding tips for a failed submission.

    Names at most the first two missing keywords.
    """
    tips = []
    if not found_intents:
        tips.append(VERB_TIP)
    missing = missing_keywords[:2]
    if missing:
        quoted = '" and "'.join(missing)
        tips.append(f'consider mentioning "{quoted}"')
    if not tips:
        tips.append(GENERIC_TIP)
    return f"The AI is hallucinating slightly. To ground it, {', and '.join(tips)}."


def sample_output(challenge_id: str) -> str:
    """Canned illustrative snippet for a passed challenge."""
    return SAMPLE_OUTPUTS.get(challenge_id, DEFAULT_SAMPLE_OUTPUT)


def mismatch_output(missing_keywords: list[str]) -> str:
    """Diagnostic shown instead of a sample when a submission fails."""
    lines = [
        "// AI ERROR: Vibe mismatch detected.",
        "// Recommendation: Be more specific about the technical requirements.",
    ]
    if missing_keywords:
        lines.append(f"// Missing Context: {', '.join(missing_keywords[:3])}...")
    return "\n".join(lines)
