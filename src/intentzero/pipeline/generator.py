"""SpecGenerator — persist answers and run the external spec generator script.

The script lives in the service root and writes markdown specs into
GeneratedSpecs-<lang>/. Unresolved placeholders in the output are marked
with "TODO(" and counted for the summary.
"""

from __future__ import annotations

import json
import logging
import subprocess
import sys
import tempfile
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from intentzero.pipeline.errors import SpecGenerationError

logger = logging.getLogger(__name__)

TODO_MARKER = "TODO("
DEFAULT_SCRIPT = "scripts/generate_specs.py"


class SpecGenerationSummary(BaseModel):
    """What a generator run produced."""

    output_directory: Path
    generated_files: list[Path]
    todo_count: int = 0

    model_config = ConfigDict(frozen=True)

    @property
    def file_names(self) -> list[str]:
        """Base names of the generated files."""
        return [path.name for path in self.generated_files]


def count_placeholders(files: list[Path]) -> int:
    """Count TODO( markers across files."""
    return sum(path.read_text(encoding="utf-8").count(TODO_MARKER) for path in files)


class SpecGenerator:
    """Runs generate_specs.py against a saved answer file."""

    def __init__(
        self,
        service_root: Path,
        python_executable: str = sys.executable,
        script: str = DEFAULT_SCRIPT,
    ) -> None:
        self.service_root = service_root
        self.python_executable = python_executable
        self.script = script

    def answers_path(self, domain: str, language: str) -> Path:
        """Where answers for a domain/language are persisted."""
        return self.service_root / "output" / domain / f"answers_{language}.json"

    def output_directory(self, language: str) -> Path:
        """Where the script writes its markdown output."""
        return self.service_root / f"GeneratedSpecs-{language}"

    def save_answers(self, answers: dict[str, str], domain: str, language: str) -> Path:
        """Write answers as pretty, key-sorted JSON, replacing atomically."""
        path = self.answers_path(domain, language)
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(answers, ensure_ascii=False, indent=2, sort_keys=True)

        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=path.parent, suffix=".tmp", delete=False
        ) as tmp:
            tmp.write(payload)
        Path(tmp.name).replace(path)
        return path

    def generate(
        self, answers: dict[str, str], domain: str, language: str = "ko"
    ) -> SpecGenerationSummary:
        """Persist answers, run the script, and summarize its output.

        Raises:
            SpecGenerationError: If the script fails or produces no output directory.
        """
        answers_file = self.save_answers(answers, domain, language)
        logger.info("Generating specs for domain=%s lang=%s", domain, language)
        self._run_script(answers_file, language)
        return self.summarize(language)

    def _run_script(self, answers_file: Path, language: str) -> None:
        script_path = self.service_root / self.script
        try:
            result = subprocess.run(
                [
                    self.python_executable,
                    str(script_path),
                    "--answers",
                    str(answers_file),
                    "--lang",
                    language,
                ],
                cwd=self.service_root,
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise SpecGenerationError(f"Could not start generator: {e}") from e

        if result.returncode != 0:
            output = (result.stdout + result.stderr).strip()
            raise SpecGenerationError(output or f"Generator exited with {result.returncode}")

    def summarize(self, language: str) -> SpecGenerationSummary:
        """Collect generated markdown files and count their placeholders.

        Raises:
            SpecGenerationError: If the output directory does not exist.
        """
        output_dir = self.output_directory(language)
        if not output_dir.is_dir():
            raise SpecGenerationError(f"Generator output not found: {output_dir}")
        files = sorted(output_dir.glob("*.md"))
        return SpecGenerationSummary(
            output_directory=output_dir,
            generated_files=files,
            todo_count=count_placeholders(files),
        )
