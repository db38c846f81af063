"""Free-text helpers for task creation."""

SUBTASK_MARKER = "* "


def split_titles(raw: str) -> list[str]:
    """Split a comma-separated title string, dropping blanks."""
    return [t.strip() for t in raw.split(",") if t.strip()]


def extract_subtasks(description: str | None) -> tuple[str | None, list[str]]:
    """Pull marker-prefixed lines out of a description.

    Returns the remaining text (trimmed, None if empty) and the subtask titles
    in order of appearance.
    """
    if not description:
        return None, []
    subtasks = []
    lines = []
    for line in description.split("\n"):
        stripped = line.lstrip()
        if stripped.startswith(SUBTASK_MARKER):
            subtasks.append(stripped[len(SUBTASK_MARKER):].strip())
        else:
            lines.append(line)
    return "\n".join(lines).strip() or None, subtasks
