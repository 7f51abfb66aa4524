"""Split raw model output into the reasoning trace and the final answer."""

import re

from src.agent.prompt import ANSWER_MARKER, SCRATCHPAD_CLOSE, SCRATCHPAD_OPEN
from src.models.query import ParsedResponse

NO_SCRATCHPAD = "No scratchpad content found."

SCRATCHPAD_PATTERN = re.compile(
    re.escape(SCRATCHPAD_OPEN) + r"[\s\S]*?" + re.escape(SCRATCHPAD_CLOSE)
)


def parse_response(raw_text: str) -> ParsedResponse:
    """Extract scratchpad and answer from model output. Never raises.

    The scratchpad keeps its tags. The answer is whatever follows the first
    answer marker outside the scratchpad; when the model skipped the marker,
    the whole output minus the scratchpad stands in for the answer.
    """
    raw_text = raw_text or ""
    match = SCRATCHPAD_PATTERN.search(raw_text)
    scratchpad = match.group(0) if match else NO_SCRATCHPAD
    remainder = SCRATCHPAD_PATTERN.sub("", raw_text, count=1) if match else raw_text

    before, marker, after = remainder.partition(ANSWER_MARKER)
    if marker:
        # A trailing marker with nothing after it: the answer came first
        answer = after.strip() or before.strip()
    else:
        answer = remainder.strip()
    if not answer:
        answer = raw_text.strip()
    return ParsedResponse(scratchpad=scratchpad, answer=answer)
