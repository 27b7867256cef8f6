"""
Plain-text rendering of comparison reports for the CLI and HTTP service.
"""
from datetime import datetime, timezone

from comparator.problems import ComparisonReport


def format_report(
    report: ComparisonReport,
    reference_name: str,
    proposed_name: str,
    app_name: str = "API Compare",
    app_version: str = ""
) -> str:
    """Generate a text report for one comparison."""
    title = f"{app_name} v{app_version}" if app_version else app_name
    lines = [
        "=" * 70,
        "API COMPATIBILITY REPORT",
        title,
        "=" * 70,
        "",
        f"Timestamp:        {datetime.now(timezone.utc).isoformat()}",
        f"Reference API:    {reference_name}",
        f"Proposed API:     {proposed_name}",
        "",
    ]

    if report.is_breaking:
        verdict = f"RESULT: {len(report.breaking_problems)} BREAKING PROBLEM(S)"
    elif report.needs_design_review:
        verdict = "RESULT: NO BREAKING PROBLEMS, DESIGNED API CHANGED"
    else:
        verdict = "RESULT: NO PROBLEMS FOUND"
    lines.extend(["-" * 40, verdict, "-" * 40, ""])

    for heading, problems in (
        ("Breaking problems", report.breaking_problems),
        ("Designed problems", report.designed_problems),
    ):
        if not problems:
            continue
        lines.append(f"{heading} ({len(problems)}):")
        for i, problem in enumerate(problems, 1):
            lines.append(f"  #{i} {problem.rstrip()}")
        lines.append("")

    lines.extend([
        "=" * 70,
        "END OF REPORT",
        "=" * 70,
    ])
    return "\n".join(lines)
