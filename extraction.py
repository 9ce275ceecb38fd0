"""
Recover the generated problem from free-form model output.

The model is asked for strict JSON but may wrap it in prose or markdown
fences. ``extract_json_payload`` never raises: it hands back an
``ExtractionResult`` the caller has to inspect. Braces are located by first
and last occurrence, not by balanced matching, so text holding several JSON
objects yields a slice spanning all of them (and usually a parse failure).
"""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel, ValidationError, field_validator

from errors import InvalidGeneratedContent, MalformedPayload, TutorError

_JSON_FENCE_RE = re.compile(r"```json(.*?)```", re.IGNORECASE | re.DOTALL)
_ANY_FENCE_RE = re.compile(r"```(.*?)```", re.DOTALL)
# plain ASCII decimal, optional exponent; no underscores or non-ASCII digits
_NUMBER_RE = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")


@dataclass(frozen=True)
class ExtractionResult:
    value: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    kind: Optional[Type[TutorError]] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Dict[str, Any]:
        if self.error is not None:
            raise (self.kind or MalformedPayload)(self.error)
        return self.value or {}


def _candidate_region(raw_text: str) -> str:
    m = _JSON_FENCE_RE.search(raw_text) or _ANY_FENCE_RE.search(raw_text)
    return m.group(1) if m else raw_text


def extract_json_payload(raw_text: str) -> ExtractionResult:
    candidate = _candidate_region(raw_text or "")
    first = candidate.find("{")
    last = candidate.rfind("}")
    if first == -1 or last == -1:
        return ExtractionResult(error="AI response missing JSON object", kind=MalformedPayload)

    json_slice = candidate[first : last + 1]
    try:
        parsed = json.loads(json_slice)
    except (ValueError, RecursionError) as e:
        return ExtractionResult(error=f"AI response is not valid JSON: {e}", kind=MalformedPayload)
    if not isinstance(parsed, dict):
        return ExtractionResult(error="AI response JSON is not an object", kind=MalformedPayload)
    return ExtractionResult(value=parsed)


# --- Numeric coercion -------------------------------------------------------------


def coerce_number(value: Any) -> Optional[float]:
    """Return ``value`` as a finite float, or None if it is not a number.

    Accepts ints, floats and numeric strings (surrounding whitespace ignored).
    Booleans, blanks, ``nan``, ``inf``, digit underscores and non-ASCII
    digits are rejected.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if _NUMBER_RE.fullmatch(value) is None:
            return None
    elif not isinstance(value, (int, float)):
        return None
    try:
        f = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(f):
        return None
    return f


# --- Post-parse validation --------------------------------------------------------


class GeneratedProblem(BaseModel):
    problem_text: str
    final_answer: float

    @field_validator("problem_text", mode="before")
    @classmethod
    def _non_empty_text(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("Problem text missing from AI response")
        return v.strip()

    @field_validator("final_answer", mode="before")
    @classmethod
    def _finite_answer(cls, v: Any) -> float:
        f = coerce_number(v)
        if f is None:
            raise ValueError("Final answer is not a valid number")
        return f


def validate_generated_problem(payload: Dict[str, Any]) -> GeneratedProblem:
    try:
        return GeneratedProblem(**payload)
    except ValidationError as e:
        raise InvalidGeneratedContent(str(e)) from e
