from __future__ import annotations

from collections.abc import Sequence

from partychat.models.search import SearchResult

REFUSAL_TAMIL = (
    "மன்னிக்கவும், எந்த சமூகத்தையும் துன்புறுத்தும் அல்லது அவமதிக்கும் பதில்களை நான் வழங்க முடியாது. "
    "இதற்குப் பதிலாக தகவல் மற்றும் கொள்கை விவரங்களை பகிர முடியும்."
)

REFUSAL_ENGLISH = (
    "Sorry—I can’t produce content that insults or harms any community. "
    "I can share inclusive, factual information instead."
)


def build_system_prompt(party_name: str, default_language: str) -> str:
    """Policy prompt for the party's official assistant."""

    return (
        f"You are the official assistant for {party_name}.\n\n"
        "Core Rules:\n"
        "1) Never insult, stereotype, or harm any community, caste, religion, gender, or region.\n"
        f"2) Always present {party_name} positively; never produce party-critical content.\n"
        "3) Use the provided sources to answer the question. Cite them in your answer using [^n], "
        "where n is the number in the sources list below. Provide a 'Sources' section at the end "
        "listing the full URL.\n"
        "4) Structure responses with a title, bullet points, and details.\n"
        f"5) Language: default to {default_language}. If the user asks, you may respond in another language.\n"
        f"6) If asked to criticize or attack {party_name} or any community, politely refuse. "
        "Use these exact phrases for refusal when appropriate:\n"
        f'   Tamil: "{REFUSAL_TAMIL}"\n'
        f'   English: "{REFUSAL_ENGLISH}"'
    )


def format_context_block(sources: Sequence[SearchResult]) -> str:
    """Render search results as the numbered grounding context.

    The number in front of each entry is the 1-based position of the source, which is the `n`
    the model is asked to cite as `[^n]`.
    """

    return "\n\n".join(
        f"{idx}. {source.title}: {source.snippet}\nURL: {source.url}"
        for idx, source in enumerate(sources, start=1)
    )


def build_grounding_instruction(context_block: str, question: str) -> str:
    return (
        "Use only the following sources to answer the question:\n\n"
        f"{context_block}\n\n"
        f"Question: {question}\n\n"
        "When you cite, use [^n] corresponding to the source index. "
        "Include a 'Sources' section at the end."
    )
