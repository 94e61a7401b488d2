"""
Parsing of numbered menu answers like "1 3 4", "a" or "q".
"""

from dataclasses import dataclass, field

from ..config import BackupItem


@dataclass
class Selection:
    items: list[BackupItem] = field(default_factory=list)
    invalid: list[str] = field(default_factory=list)
    cancelled: bool = False


def parse_selection(
    text: str,
    items: list[BackupItem],
    empty_means_all: bool = True,
) -> Selection:
    """Turn a menu answer into the chosen items.

    'q' cancels, 'a' picks everything. Numbers are 1-based; anything else
    is collected in Selection.invalid and ignored.
    """
    answer = (text or "").strip()

    if answer.lower() == "q":
        return Selection(cancelled=True)
    if answer.lower() == "a" or (not answer and empty_means_all):
        return Selection(items=list(items))

    selection = Selection()
    for token in answer.split():
        if token.isdigit() and 1 <= int(token) <= len(items):
            item = items[int(token) - 1]
            if item not in selection.items:
                selection.items.append(item)
        else:
            selection.invalid.append(token)
    return selection


def parse_folder_choice(text: str, count: int) -> tuple[int | None, bool]:
    """Map a folder menu answer to a 0-based index.

    Returns (index, valid). '0' or an empty answer gives (None, True);
    anything out of range falls back to the newest folder, (0, False).
    """
    answer = (text or "").strip()
    if answer in ("", "0"):
        return None, True
    if answer.isdigit() and 1 <= int(answer) <= count:
        return int(answer) - 1, True
    return 0, False
