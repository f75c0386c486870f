"""Render interview answers into the five spec documents.

Usage: generate_specs.py --answers answers_ko.json --lang ko

Writes GeneratedSpecs-<lang>/ in the current directory. Any answer the
interview did not collect becomes a TODO(<key>) placeholder.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

DOCUMENTS: dict[str, tuple[str, list[tuple[str, str]]]] = {
    "01_product_brief.md": (
        "Product Brief",
        [
            ("project_name", "Project"),
            ("core_value", "Core value"),
            ("job1_when", "When users need it"),
        ],
    ),
    "02_users_and_flows.md": (
        "Users and Flows",
        [
            ("in_scope_items", "Target users"),
            ("primary_flow", "Primary flow"),
        ],
    ),
    "03_scope.md": (
        "Scope",
        [
            ("session_types", "Core features"),
            ("cycle_goal", "Must finish this cycle"),
            ("out_scope_items", "Out of scope"),
        ],
    ),
    "04_platform_and_stack.md": (
        "Platform and Stack",
        [
            ("bounds", "Minimum platform"),
            ("recordable_operator", "Language and architecture"),
            ("recordable_threshold_sec", "Frameworks"),
            ("session_types_rule", "Infrastructure and security"),
        ],
    ),
    "05_acceptance.md": (
        "Acceptance",
        [
            ("primary_flow", "Flow to verify end to end"),
            ("cycle_goal", "Release checklist"),
        ],
    ),
}


def render_document(title: str, fields: list[tuple[str, str]], answers: dict[str, str]) -> str:
    lines = [f"# {title}", ""]
    for key, label in fields:
        value = answers.get(key, "").strip()
        lines.append(f"## {label}")
        lines.append(value if value else f"TODO({key}): answer not collected")
        lines.append("")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--answers", required=True, type=Path)
    parser.add_argument("--lang", default="ko")
    args = parser.parse_args(argv)

    try:
        answers = json.loads(args.answers.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        print(f"Cannot read answers: {e}", file=sys.stderr)
        return 1

    output_dir = Path.cwd() / f"GeneratedSpecs-{args.lang}"
    output_dir.mkdir(parents=True, exist_ok=True)
    for file_name, (title, fields) in DOCUMENTS.items():
        (output_dir / file_name).write_text(
            render_document(title, fields, answers), encoding="utf-8"
        )
        print(f"wrote {file_name}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
