"""Tests for Markdown report generation."""

from __future__ import annotations

from pathlib import Path

from cert_irregularity.detection import classify
from cert_irregularity.exceptions import InputError
from cert_irregularity.reporting import IrregularityReport, build_report


class TestIrregularityReport:
    """Tests for IrregularityReport and build_report."""

    def test_clean_report(self) -> None:
        report = build_report([], total_records=3)

        assert report.clean
        markdown = report.to_markdown()
        assert "✅ CLEAN" in markdown
        assert "| Total certifications | 3 |" in markdown

    def test_report_sections(self, sample_raw_records, sample_raw_types) -> None:
        groups = classify(sample_raw_records, sample_raw_types)

        markdown = build_report(groups, total_records=7).to_markdown()

        assert "⚠️ IRREGULARITIES FOUND" in markdown
        assert "| Groups | 4 |" in markdown
        assert "## Duplicate catalog types" in markdown
        assert "## Exact duplicates" in markdown
        assert "- Suggested type: Azure Administrator" in markdown
        assert "- Types: a, b" in markdown
        assert markdown.index("## Duplicate catalog types") < markdown.index("## Similar names")

    def test_group_without_suggestion(self, make_record) -> None:
        groups = classify(
            [make_record("1", "GCP Architect"), make_record("2", "GCP Architecte")], []
        )

        markdown = build_report(groups, total_records=2).to_markdown()

        assert "Suggested type: none" in markdown

    def test_skipped_entities_listed(self) -> None:
        report = build_report([], 0, [InputError("record", "42", "owner_id: Field required")])

        assert "## Skipped Entities" in report.to_markdown()
        assert "Skipped record 42" in report.to_markdown()

    def test_save(self, tmp_path: Path) -> None:
        output = tmp_path / "report.md"

        IrregularityReport().save(output)

        assert output.read_text(encoding="utf-8").startswith("# Certification Irregularity Report")
