"""Writer for the JSON analysis report."""

import json
from pathlib import Path


def write_json(report: dict, output_path: Path) -> None:
    """Write a report dict (see deepproof.report.build_report) to a JSON file."""
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(report, f, indent=2, ensure_ascii=False)
