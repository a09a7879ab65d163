import re

# A single leading list marker. "**" opens bold text and is not a bullet.
_BULLET_RE = re.compile(r"^(?:[-•]|\*(?!\*))\s*")


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def clean_line(line: str) -> str:
    """Strip surrounding whitespace and one leading bullet marker."""
    return _BULLET_RE.sub("", line.strip(), count=1).strip()


def clean_lines(text: str) -> list[str]:
    """Split a block into list entries, dropping bullets and blank lines."""
    entries = []
    for line in text.split("\n"):
        cleaned = clean_line(line)
        if cleaned:
            entries.append(cleaned)
    return entries


def is_present(value: str | None) -> bool:
    return bool(value and value.strip())


def join_present(items: list[str], sep: str = ", ") -> str:
    return sep.join(item.strip() for item in items if is_present(item))
