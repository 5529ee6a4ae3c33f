"""
Structured recovery parsing.

Models asked for "JSON only" still wrap it in prose now and then
("Here is the assessment: {...} Hope this helps!"). We slice from the
first `{` to the last `}` and parse that strictly. Nothing smarter:
prose around the object is tolerated, malformed JSON inside it is not.
"""

import json
import logging
from typing import Any, Dict

from inference.errors import ParseError

logger = logging.getLogger(__name__)


def _reject_constant(name: str):
    raise ValueError(f"non-standard JSON constant {name}")


def recover_json_object(text: str) -> Dict[str, Any]:
    """
    Locate and parse the JSON object embedded in free-form model text.

    Raises:
        ParseError: no `{`/`}` pair, or the slice is not valid JSON
            (NaN and Infinity included).
            Carries the full text.
    """
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        logger.warning("Model output contains no JSON object")
        raise ParseError("Model did not return JSON", raw_text=text)

    try:
        parsed = json.loads(text[start:end + 1], parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        logger.warning(f"Model JSON failed to parse: {e.msg} (pos {e.pos})")
        raise ParseError(f"Model returned malformed JSON ({e.msg})", raw_text=text) from e
    except ValueError as e:
        # NaN / Infinity are not JSON
        logger.warning(f"Model JSON rejected: {e}")
        raise ParseError(f"Model returned malformed JSON ({e})", raw_text=text) from e

    return parsed
