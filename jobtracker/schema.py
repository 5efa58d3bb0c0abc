from enum import Enum
from typing import Any, Dict, List, Tuple


class Status(str, Enum):
    APPLIED = "Applied"
    INTERVIEWING = "Interviewing"
    OFFER = "Offer"
    REJECTED = "Rejected"


# Column order on the board
STATUSES: Tuple[Status, ...] = tuple(Status)
STATUS_VALUES: Tuple[str, ...] = tuple(s.value for s in STATUSES)
DEFAULT_STATUS = Status.APPLIED

REQUIRED_STR_FIELDS = ["title", "company"]
CANDIDATE_FIELDS = REQUIRED_STR_FIELDS + ["status"]
PATCHABLE_FIELDS = ["status"]


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def is_valid_status(v: Any) -> bool:
    return isinstance(v, str) and v in STATUS_VALUES


def _status_error(v: Any) -> str:
    return f"Field 'status' must be one of {', '.join(STATUS_VALUES)} (got {v!r})"


def validate_candidate(data: Any) -> List[str]:
    """
    Returns a list of validation error messages for a new job. Empty list
    means valid. A missing status is allowed; the store fills in Applied.
    """
    if not isinstance(data, dict):
        return ["Request body must be a JSON object"]

    errors: List[str] = []

    for f in REQUIRED_STR_FIELDS:
        if f not in data:
            errors.append(f"Missing required field: {f}")
        elif not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")

    if "status" in data and not is_valid_status(data["status"]):
        errors.append(_status_error(data["status"]))

    for f in sorted(set(data) - set(CANDIDATE_FIELDS)):
        errors.append(f"Unknown field: {f}")

    return errors


def validate_patch(data: Any) -> List[str]:
    """
    Returns a list of validation error messages for a job update.
    Only the status may be patched.
    """
    if not isinstance(data, dict):
        return ["Request body must be a JSON object"]
    if not data:
        return ["Patch must contain at least one field"]

    errors: List[str] = []
    for f in sorted(set(data) - set(PATCHABLE_FIELDS)):
        errors.append(f"Field '{f}' cannot be updated")

    if "status" in data and not is_valid_status(data["status"]):
        errors.append(_status_error(data["status"]))

    return errors


def normalize_candidate(data: Dict[str, Any]) -> Dict[str, str]:
    """Trim text fields and apply the default status. Assumes a valid candidate."""
    return {
        "title": data["title"].strip(),
        "company": data["company"].strip(),
        "status": data.get("status", DEFAULT_STATUS.value),
    }
