import re

TITLE_WORDS = 8
_ROLE_PREFIX = re.compile(r"^(user|assistant):\s*", re.IGNORECASE)


def conversation_text(messages: list[tuple[str, str]]) -> str:
    return "\n".join(f"{role}: {content}" for role, content in messages)


def generate_simple_title(text: str) -> str:
    """Title from the first eight words of the first line, without its role prefix."""
    first_line = text.split("\n")[0]
    words = _ROLE_PREFIX.sub("", first_line).split(" ")
    title = " ".join(words[:TITLE_WORDS])
    if len(words) > TITLE_WORDS:
        title += "..."
    return title
