"""
Staff Registry

Staff can be added, renamed and recolored, but never deleted. Names are
unique among current staff (exact, case-sensitive match).

Reports store a copy of the staff name, so renaming here does not touch
history: a report filed by "Alice" still reads "Alice" after she becomes
"Alicia".
"""

import logging
import random
import secrets
import string
import time
from typing import List, Optional

from app.constants import STAFF_COLORS
from app.schemas import Staff
from app.services.storage import Repository
from app.services.validators import (
    StaffNotFoundError,
    validate_staff_color,
    validate_staff_name,
)
from app.template_config import utc_now

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_staff_id() -> str:
    """Return an id like "st-k3j9x0a2b-1705300000000"."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"st-{suffix}-{int(time.time() * 1000)}"


def load_staff(repository: Repository) -> List[Staff]:
    """Return registered staff, filling in ids and colors missing from old records."""
    staffs = repository.get_staffs()
    changed = False
    for staff in staffs:
        if not staff.id:
            staff.id = generate_staff_id()
            changed = True
        if not staff.color:
            staff.color = STAFF_COLORS[0]
            changed = True
    # Ids must be stable across requests for the edit forms to work
    if changed:
        repository.save_staffs(staffs)
    return staffs


def add_staff(
    repository: Repository,
    name: str,
    rng: Optional[random.Random] = None,
) -> Staff:
    """
    Register a new staff member with a random palette color.

    Raises:
        ValidationError: name is blank
        DuplicateNameError: name is already registered
    """
    staffs = load_staff(repository)
    name = validate_staff_name(name, staffs)

    staff = Staff(
        id=generate_staff_id(),
        name=name,
        joined_at=utc_now().isoformat(),
        color=(rng or random).choice(STAFF_COLORS),
    )
    staffs.append(staff)
    repository.save_staffs(staffs)
    logger.info(f"Added staff {staff.id} ({staff.name})")
    return staff


def update_staff(
    repository: Repository,
    staff_id: str,
    name: str,
    color: Optional[str] = None,
) -> Staff:
    """
    Rename and/or recolor a staff member.

    Keeping the current name is allowed; taking another member's name is not.
    Saved reports are left untouched.

    Raises:
        StaffNotFoundError: no staff member has staff_id
        ValidationError: name is blank or color is not in the palette
        DuplicateNameError: another staff member already uses name
    """
    staffs = load_staff(repository)
    staff = next((s for s in staffs if s.id == staff_id), None)
    if staff is None:
        raise StaffNotFoundError(staff_id)

    name = validate_staff_name(name, staffs, existing_id=staff_id)
    if color:
        staff.color = validate_staff_color(color)

    old_name = staff.name
    staff.name = name
    repository.save_staffs(staffs)
    if old_name != name:
        logger.info(f"Renamed staff {staff_id}: {old_name} -> {name}")
    return staff
