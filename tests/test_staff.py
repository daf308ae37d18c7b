"""
Tests for the staff registry.
"""

import random

import pytest

from app.constants import STAFF_COLORS
from app.schemas import Staff
from app.services.reports import submit_report
from app.services.staff import add_staff, generate_staff_id, load_staff, update_staff
from app.services.validators import DuplicateNameError, StaffNotFoundError, ValidationError


class TestAddStaff:
    """Tests for add_staff function."""

    def test_add(self, repository):
        staff = add_staff(repository, "  Alice  ")

        assert staff.name == "Alice"
        assert staff.id.startswith("st-")
        assert staff.color in STAFF_COLORS
        assert [s.name for s in repository.get_staffs()] == ["Alice"]

    def test_seeded_color(self, repository):
        expected = random.Random(7).choice(STAFF_COLORS)
        staff = add_staff(repository, "Alice", rng=random.Random(7))
        assert staff.color == expected

    def test_duplicate_rejected(self, repository):
        add_staff(repository, "Alice")
        with pytest.raises(DuplicateNameError) as exc:
            add_staff(repository, "Alice")
        assert exc.value.message == "その名前は既に登録されています。"
        assert len(repository.get_staffs()) == 1

    def test_names_are_case_sensitive(self, repository):
        add_staff(repository, "Alice")
        add_staff(repository, "alice")
        assert len(repository.get_staffs()) == 2

    def test_blank_name_rejected(self, repository):
        with pytest.raises(ValidationError) as exc:
            add_staff(repository, "   ")
        assert exc.value.code == "missing_name"


class TestUpdateStaff:
    """Tests for update_staff function."""

    def test_rename(self, repository):
        staff = add_staff(repository, "Alice")
        update_staff(repository, staff.id, "Alicia")
        assert [s.name for s in repository.get_staffs()] == ["Alicia"]

    def test_keep_own_name(self, repository):
        """Saving without changing the name is not a collision."""
        staff = add_staff(repository, "Alice")
        updated = update_staff(repository, staff.id, "Alice", color=STAFF_COLORS[3])
        assert updated.color == STAFF_COLORS[3]

    def test_rename_to_other_staff_rejected(self, repository):
        alice = add_staff(repository, "Alice")
        add_staff(repository, "Bob")
        with pytest.raises(DuplicateNameError) as exc:
            update_staff(repository, alice.id, "Bob")
        assert exc.value.message == "その名前は既に他のスタッフで使用されています。"

    def test_unknown_color_rejected(self, repository):
        staff = add_staff(repository, "Alice")
        with pytest.raises(ValidationError) as exc:
            update_staff(repository, staff.id, "Alice", color="#000000")
        assert exc.value.code == "invalid_color"

    def test_unknown_staff(self, repository):
        with pytest.raises(StaffNotFoundError):
            update_staff(repository, "st-missing", "Alice")

    def test_rename_leaves_reports_alone(self, repository, settings, form_factory):
        """Reports keep the name they were filed under."""
        staff = add_staff(repository, "Alice")
        submit_report(repository, form_factory(staff_name="Alice"), settings)

        update_staff(repository, staff.id, "Alicia")

        assert [r.staff_name for r in repository.get_reports()] == ["Alice"]


class TestLoadStaff:
    """Tests for load_staff normalization."""

    def test_legacy_records_get_stable_ids(self, repository):
        repository.save_staffs([Staff(name="Alice", id="", color="")])

        first = load_staff(repository)
        second = load_staff(repository)

        assert first[0].id
        assert first[0].id == second[0].id
        assert first[0].color == STAFF_COLORS[0]

    def test_generated_id_format(self):
        parts = generate_staff_id().split("-")
        assert parts[0] == "st"
        assert len(parts[1]) == 9
        assert parts[2].isdigit()
