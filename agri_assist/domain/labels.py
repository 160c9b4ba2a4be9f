"""Classifier label parsing.

Plant disease classifiers emit labels such as ``Bell_Pepper___Bacterial_spot`` or
``Tomato___healthy``: the subject and the condition are joined by a triple
underscore and words inside each part are joined by single underscores.
"""
from agri_assist.domain.models import ParsedLabel


LABEL_SEPARATOR = "___"
UNKNOWN_CONDITION = "unknown condition"


def _humanize(part: str) -> str:
    return part.replace("_", " ").strip()


def parse_label(raw: str) -> ParsedLabel:
    # Split before touching single underscores, otherwise the separator is lost.
    parts = raw.split(LABEL_SEPARATOR)

    if len(parts) >= 2:
        subject = _humanize(parts[0])
        condition = _humanize(" ".join(parts[1:]))
        return ParsedLabel(subject=subject, condition=condition)

    return ParsedLabel(subject=_humanize(raw), condition=UNKNOWN_CONDITION)


def display_name(parsed: ParsedLabel) -> str:
    if parsed.condition == UNKNOWN_CONDITION:
        return parsed.subject
    return f"{parsed.subject} – {parsed.condition}"
