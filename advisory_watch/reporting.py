"""Report the outcome of a run to whatever launched it."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)

OUTPUT_KEY = "new_advisories"


class StatusReporter(ABC):
    """Receives whether a run found new advisories."""

    @abstractmethod
    def report(self, found_new: bool) -> None:
        ...


class GithubOutputReporter(StatusReporter):
    """Appends ``new_advisories=true|false`` to the GitHub Actions output file."""

    def __init__(self, output_path: str):
        self.output_path = Path(output_path)

    def report(self, found_new: bool) -> None:
        line = f"{OUTPUT_KEY}={'true' if found_new else 'false'}\n"
        with open(self.output_path, "a", encoding="utf-8") as f:
            f.write(line)
        logger.debug(f"Wrote {line.strip()} to {self.output_path}")


class LogReporter(StatusReporter):
    def report(self, found_new: bool) -> None:
        logger.info(f"{OUTPUT_KEY}={'true' if found_new else 'false'}")


def reporter_from_settings(settings) -> StatusReporter:
    if settings.github_output:
        return GithubOutputReporter(settings.github_output)
    return LogReporter()
