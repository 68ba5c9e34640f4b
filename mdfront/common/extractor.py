"""
Locate the frontmatter block at the start of a chapter.
"""
from typing import Optional, Tuple

DELIMITER = "---"


def extract(content: str) -> Optional[Tuple[str, str]]:
    """
    Split content into (frontmatter text, body).

    Returns None when the content does not open with the delimiter, or when
    no closing delimiter follows it. Many chapters start with a horizontal
    rule, so neither case is an error. The body is returned verbatim.
    """
    if not content.startswith(DELIMITER):
        return None

    start = len(DELIMITER)
    end = content.find(DELIMITER, start)
    if end == -1:
        return None

    return content[start:end].strip(), content[end + len(DELIMITER):]


def reassemble(frontmatter: str, body: str) -> str:
    """Rebuild a chapter from serialized frontmatter and the untouched body."""
    return f"{DELIMITER}\n{frontmatter}{DELIMITER}{body}"
