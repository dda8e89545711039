import re

_PARENTHESIZED_RE = re.compile(r"\((.*?)\)")


def extract_parenthesized(text: str) -> str:
    """Return the content of the first ``(...)`` group in ``text``.

    Accepts titles like:
        "Invoice handling (Finance)"          -> "Finance"
        "Onboarding (HR) (draft)"             -> "HR"
        "Untitled"                            -> ""
    """
    m = _PARENTHESIZED_RE.search(text or "")
    return m.group(1) if m else ""


def join_ancestor_titles(titles: list[str]) -> str:
    """Legacy naming: join the titles between the root and the page itself.

    ``titles`` is ordered root first, page last.
    """
    return "-".join(titles[1:-1])
