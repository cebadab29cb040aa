"""Tests for data models.

This module tests the Pydantic models for records, catalog types, finding
groups and exclusions, and the input boundary that parses them.
"""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError


class TestCertificationRecord:
    """Tests for the CertificationRecord model."""

    def test_accepts_camel_case(self) -> None:
        from cert_irregularity.models import CertificationRecord

        record = CertificationRecord.model_validate(
            {
                "id": "1",
                "name": "PMP",
                "function": "Management",
                "ownerId": "u1",
                "createdAt": "2024-01-02T10:00:00Z",
                "validityDate": "2026-01-01",
            }
        )

        assert record.owner_id == "u1"
        assert record.created_at is not None
        assert record.validity_date == date(2026, 1, 1)

    def test_accepts_store_column_names(self) -> None:
        from cert_irregularity.models import CertificationRecord

        record = CertificationRecord.model_validate({"id": 7, "user_id": 42, "name": "PMP"})

        assert record.id == "7"
        assert record.owner_id == "42"

    def test_optional_fields_default(self) -> None:
        from cert_irregularity.models import CertificationRecord

        record = CertificationRecord.model_validate({"id": "1", "owner_id": "u1"})

        assert record.name == ""
        assert record.function == ""
        assert record.created_at is None
        assert record.validity_date is None

    def test_missing_owner_is_rejected(self) -> None:
        from cert_irregularity.models import CertificationRecord

        with pytest.raises(ValidationError):
            CertificationRecord.model_validate({"id": "1", "name": "PMP"})

    def test_blank_id_is_rejected(self) -> None:
        from cert_irregularity.models import CertificationRecord

        with pytest.raises(ValidationError):
            CertificationRecord.model_validate({"id": "  ", "owner_id": "u1"})

    def test_is_frozen(self) -> None:
        from cert_irregularity.models import CertificationRecord

        record = CertificationRecord(id="1", owner_id="u1")
        with pytest.raises(ValidationError):
            record.name = "changed"  # type: ignore[misc]


class TestCertificationType:
    """Tests for the CertificationType model."""

    def test_accepts_camel_case(self) -> None:
        from cert_irregularity.models import CertificationType

        cert_type = CertificationType.model_validate(
            {
                "id": "a",
                "platformId": "p1",
                "name": "SA",
                "fullName": "Solutions Architect Pro",
                "isActive": False,
                "aliases": ["SAP"],
            }
        )

        assert cert_type.platform_id == "p1"
        assert cert_type.full_name == "Solutions Architect Pro"
        assert cert_type.is_active is False
        assert cert_type.aliases == ("SAP",)

    def test_defaults(self) -> None:
        from cert_irregularity.models import CertificationType

        cert_type = CertificationType.model_validate({"id": "a", "aliases": None})

        assert cert_type.is_active is True
        assert cert_type.aliases == ()
        assert cert_type.function == ""

    def test_single_alias_string(self) -> None:
        from cert_irregularity.models import CertificationType

        cert_type = CertificationType.model_validate({"id": "a", "aliases": "SAP"})

        assert cert_type.aliases == ("SAP",)

    def test_label_and_comparable_name(self) -> None:
        from cert_irregularity.models import CertificationType

        full = CertificationType(id="a", name="SA", full_name="Solutions Architect")
        short = CertificationType(id="b", name="SA")

        assert full.label == "SA (Solutions Architect)"
        assert full.comparable_name == "Solutions Architect"
        assert short.comparable_name == "SA"


class TestSeverity:
    """Tests for the Severity enumeration."""

    def test_values(self) -> None:
        from cert_irregularity.models import Severity

        assert {s.value for s in Severity} == {
            "duplicate_type",
            "exact",
            "similar",
            "function_mismatch",
        }

    def test_rank_order(self) -> None:
        from cert_irregularity.models import Severity

        ordered = sorted(Severity, key=lambda s: s.rank)
        assert ordered == [
            Severity.DUPLICATE_TYPE,
            Severity.EXACT,
            Severity.SIMILAR,
            Severity.FUNCTION_MISMATCH,
        ]

    @pytest.mark.parametrize(
        ("legacy", "expected"),
        [
            ("exact_duplicate", "exact"),
            ("similar_names", "similar"),
            ("function_variation", "function_mismatch"),
        ],
    )
    def test_legacy_names(self, legacy: str, expected: str) -> None:
        from cert_irregularity.models import Severity

        assert Severity(legacy).value == expected

    def test_unknown_value(self) -> None:
        from cert_irregularity.models import Severity

        with pytest.raises(ValueError):
            Severity("critical")


class TestFindingGroup:
    """Tests for the FindingGroup model."""

    def test_computed_fields(self, make_record) -> None:
        from cert_irregularity.models import FindingGroup, Severity

        group = FindingGroup(
            severity=Severity.EXACT,
            names=("PMP",),
            records=(make_record("1", "PMP"), make_record("2", "PMP")),
        )

        assert group.record_ids == ["1", "2"]
        assert group.distinct_name_count == 1
        assert group.members == group.records
        dumped = group.model_dump()
        assert dumped["record_ids"] == ["1", "2"]
        assert dumped["severity"] == "exact"

    def test_index_defaults_to_zero(self) -> None:
        from cert_irregularity.models import FindingGroup, Severity

        assert FindingGroup(severity=Severity.SIMILAR, names=("a", "b")).index == 0


class TestDuplicateExclusion:
    """Tests for the DuplicateExclusion model."""

    def test_pair_is_stored_sorted(self) -> None:
        from cert_irregularity.models import DuplicateExclusion

        exclusion = DuplicateExclusion.model_validate(
            {"exclusion_type": "certification", "item1_id": "z", "item2_id": "a"}
        )

        assert (exclusion.item1_id, exclusion.item2_id) == ("a", "z")

    def test_matches_either_order(self) -> None:
        from cert_irregularity.models import DuplicateExclusion, ExclusionType

        exclusion = DuplicateExclusion(
            exclusion_type=ExclusionType.CERTIFICATION_TYPE, item1_id="b", item2_id="a"
        )

        assert exclusion.matches(ExclusionType.CERTIFICATION_TYPE, "a", "b")
        assert exclusion.matches(ExclusionType.CERTIFICATION_TYPE, "b", "a")
        assert not exclusion.matches(ExclusionType.CERTIFICATION, "a", "b")

    def test_exclusion_index(self) -> None:
        from cert_irregularity.detection import ExclusionIndex
        from cert_irregularity.models import DuplicateExclusion, ExclusionType

        index = ExclusionIndex(
            [DuplicateExclusion(exclusion_type="certification", item1_id="2", item2_id="1")]
        )

        assert len(index) == 1
        assert index.is_excluded(ExclusionType.CERTIFICATION, "1", "2")
        assert not index.is_excluded(ExclusionType.CERTIFICATION, "1", "3")

    def test_exclusion_index_checks_kind_per_pair(self) -> None:
        from cert_irregularity.detection import ExclusionIndex
        from cert_irregularity.models import DuplicateExclusion, ExclusionType

        index = ExclusionIndex(
            [
                DuplicateExclusion(exclusion_type="certification_type", item1_id="a", item2_id="b"),
                DuplicateExclusion(exclusion_type="certification", item1_id="x", item2_id="y"),
            ]
        )

        assert len(index) == 2
        assert index.is_excluded(ExclusionType.CERTIFICATION_TYPE, "b", "a")
        assert not index.is_excluded(ExclusionType.CERTIFICATION, "a", "b")
        assert not index.is_excluded(ExclusionType.CERTIFICATION_TYPE, "x", "y")


class TestInputParsing:
    """Tests for parse_records and parse_types."""

    def test_skips_and_reports_malformed_records(self) -> None:
        from cert_irregularity.detection import parse_records
        from cert_irregularity.exceptions import InputError

        result = parse_records(
            [
                {"id": "1", "ownerId": "u1", "name": "PMP"},
                {"id": "2", "name": "PMP"},
                "not a record",
            ]
        )

        assert [r.id for r in result.items] == ["1"]
        assert len(result.errors) == 2
        assert all(isinstance(e, InputError) for e in result.errors)
        assert result.errors[0].entity_id == "2"
        assert result.errors[0].entity_kind == "record"
        assert str(result.errors[0]).startswith("Skipped record 2:")
        assert result.errors[1].entity_id is None

    def test_passes_models_through(self) -> None:
        from cert_irregularity.detection import parse_types
        from cert_irregularity.models import CertificationType

        cert_type = CertificationType(id="a", name="SA")

        result = parse_types([cert_type, {"name": "no id"}])

        assert result.items == [cert_type]
        assert result.errors[0].entity_kind == "type"
