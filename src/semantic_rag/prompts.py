"""Prompt templates for answer generation."""

SYSTEM_TEMPLATE = (
    "You are a helpful assistant. That always provides very concise and clear answers "
    "in {language}.\n\n{context}\n\n{prompt}"
)

CONTEXT_TEMPLATE = "Context: \n\n{passages}"

PASSAGE_SEPARATOR = "\n\n"


def build_system_instruction(language: str, context: str = "", prompt: str | None = None) -> str:
    """Fill the system template; empty sections are dropped."""
    return SYSTEM_TEMPLATE.format(language=language, context=context, prompt=prompt or "").strip()


def build_context(passages: list[str]) -> str:
    """Join passages (in retrieval order) into a single context block."""
    return CONTEXT_TEMPLATE.format(passages=PASSAGE_SEPARATOR.join(passages))
