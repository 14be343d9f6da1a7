"""Split free-text recipe instructions into ordered preparation steps."""

import re
from typing import Optional

# One or more consecutive line breaks separate steps
_LINE_BREAKS = re.compile(r"[\r\n]+")
# Leading "1." / "12)" step numbers the catalog sometimes embeds
_STEP_MARKER = re.compile(r"^\d+[).]\s*")


def segment(instructions: Optional[str]) -> list[str]:
    """Turn instructions into a list of steps.

    Each line becomes one step with its leading step number removed and
    surrounding whitespace trimmed. Blank lines are dropped and order is kept.

    Args:
        instructions: Raw instructions text, or None.

    Returns:
        Ordered list of non-empty steps (empty list when there is no text).
    """
    if not instructions:
        return []

    steps = []
    for piece in _LINE_BREAKS.split(instructions):
        step = _STEP_MARKER.sub("", piece, count=1).strip()
        if step:
            steps.append(step)
    return steps
