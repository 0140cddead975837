# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Default commander account for the stores that seed themselves."""
from typing import Any, Dict

import bcrypt

from commander.stores.base import utc_now_iso


def hash_password(password: str, rounds: int) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def commander_record(professional_id: str, name: str, email: str) -> Dict[str, Any]:
    now = utc_now_iso()
    return {
        "professional_id": professional_id,
        "name": name,
        "email": email,
        "phone_number": None,
        "role": "Commander",
        "group_id": None,
        "current_event_id": None,
        "current_camp_id": None,
        "created_at": now,
        "updated_at": now,
    }
