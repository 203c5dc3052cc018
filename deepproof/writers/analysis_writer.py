"""Writer for the human-readable credibility analysis."""

from pathlib import Path
from deepproof.models import AnalysisResult
from deepproof.report import claim_summary, score_band, verdict


def format_analysis(analysis: AnalysisResult, file_name: str = "") -> str:
    """Render the verdict, explanation and claim list as plain text."""
    counts = claim_summary(analysis.claims)
    lines = [
        f"DEEPPROOF ANALYSIS{f': {file_name}' if file_name else ''}",
        "=" * 60,
        f"Score: {analysis.overall_score}/100 - {verdict(analysis.overall_score)} ({score_band(analysis.overall_score)})",
        "",
        analysis.explanation,
        "",
        f"CLAIMS ({counts['confirmed']} confirmed, {counts['contradicted']} contradicted, "
        f"{counts['unconfirmed']} unconfirmed)",
        "-" * 60,
    ]
    for index, claim in enumerate(analysis.claims, start=1):
        lines.append(f"{index}. [{claim.status.value.upper()}] {claim.text}")
        if claim.detail:
            lines.append(f"   {claim.detail}")
        if claim.source:
            lines.append(f"   Source: {claim.source}")
    return "\n".join(lines) + "\n"


def write_analysis(analysis: AnalysisResult, output_path: Path, file_name: str = "") -> None:
    """
    Write analysis text to file.

    Args:
        analysis: The credibility verdict
        output_path: Path where analysis will be saved
        file_name: Name of the analyzed video, shown in the header
    """
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(format_analysis(analysis, file_name))
