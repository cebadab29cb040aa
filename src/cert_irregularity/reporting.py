"""Irregularity report generation.

This module turns a classification run into a human-readable Markdown
report, for saving alongside an export or attaching to a review ticket.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

import structlog

from cert_irregularity.detection import FindingStats, summarize
from cert_irregularity.exceptions import InputError
from cert_irregularity.models import FindingGroup, Severity

logger = structlog.get_logger(__name__)

SEVERITY_TITLES: dict[Severity, str] = {
    Severity.DUPLICATE_TYPE: "Duplicate catalog types",
    Severity.EXACT: "Exact duplicates",
    Severity.SIMILAR: "Similar names",
    Severity.FUNCTION_MISMATCH: "Function mismatches",
}


@dataclass
class IrregularityReport:
    """Structured irregularity report.

    Attributes:
        timestamp: When the classification was run.
        groups: Finding groups, in classification order.
        stats: Aggregate statistics.
        skipped: Entities skipped at the input boundary.
    """

    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    groups: list[FindingGroup] = field(default_factory=list)
    stats: FindingStats = field(default_factory=FindingStats)
    skipped: list[InputError] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        """Whether no irregularities were found."""
        return not self.groups

    def to_markdown(self) -> str:
        """Generate markdown report.

        Returns:
            Markdown-formatted report string.
        """
        lines = [
            "# Certification Irregularity Report",
            "",
            f"**Generated:** {self.timestamp.isoformat()}",
            f"**Status:** {'✅ CLEAN' if self.clean else '⚠️ IRREGULARITIES FOUND'}",
            "",
            "## Summary",
            "",
            "| Metric | Value |",
            "|--------|-------|",
            f"| Total certifications | {self.stats.total_records} |",
            f"| Duplicated certifications | {self.stats.implicated_records} |",
            f"| Groups | {self.stats.group_count} |",
            f"| Distinct names | {self.stats.unique_names} |",
        ]
        for severity in sorted(Severity, key=lambda s: s.rank):
            count = self.stats.by_severity.get(severity.value, 0)
            lines.append(f"| {SEVERITY_TITLES[severity]} | {count} |")
        lines.append("")

        for severity in sorted(Severity, key=lambda s: s.rank):
            section = [g for g in self.groups if g.severity is severity]
            if not section:
                continue

            lines.append(f"## {SEVERITY_TITLES[severity]}")
            lines.append("")
            for group in section:
                lines.append(f"### Group {group.index}")
                lines.append("")
                lines.append(f"- Names: {', '.join(group.names)}")
                if group.records:
                    lines.append(f"- Records: {', '.join(group.record_ids)}")
                if group.types:
                    lines.append(f"- Types: {', '.join(t.id for t in group.types)}")
                if group.suggested_type is not None:
                    lines.append(f"- Suggested type: {group.suggested_type.full_name}")
                elif severity is not Severity.DUPLICATE_TYPE:
                    lines.append(
                        "- Suggested type: none (create a type or add aliases to an existing one)"
                    )
                lines.append("")

        if self.skipped:
            lines.append("## Skipped Entities")
            lines.append("")
            for error in self.skipped:
                lines.append(f"- {error}")
            lines.append("")

        return "\n".join(lines)

    def save(self, path: Path) -> None:
        """Write the markdown report to a file.

        Args:
            path: Destination file.
        """
        path.write_text(self.to_markdown(), encoding="utf-8")
        logger.info("Report saved", path=str(path), groups=len(self.groups))


def build_report(
    groups: list[FindingGroup],
    total_records: int,
    skipped: list[InputError] | None = None,
) -> IrregularityReport:
    """Assemble a report for a classification run.

    Args:
        groups: Finding groups.
        total_records: Number of records that were classified.
        skipped: Entities skipped at the input boundary.

    Returns:
        The report.
    """
    return IrregularityReport(
        groups=list(groups),
        stats=summarize(groups, total_records),
        skipped=list(skipped or []),
    )
