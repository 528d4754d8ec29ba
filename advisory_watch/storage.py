"""Snapshot storage and deduplication for seen advisories."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional

from .errors import ParseError
from .models import Advisory, AdvisoryState

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = "data/advisories.json"


def diff(current: Iterable[Advisory], previous: AdvisoryState) -> List[Advisory]:
    """Return the advisories in ``current`` that ``previous`` has not seen, in order."""
    seen = previous.ids
    return [adv for adv in current if adv.ghsa_id not in seen]


def _timestamp(now: datetime) -> str:
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    now = now.astimezone(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Storage:
    """Manages the JSON snapshot of advisories already notified about."""

    def __init__(self, data_file: str = DEFAULT_DATA_FILE):
        """Initialize storage with the snapshot path."""
        self.data_file = Path(data_file)

    def _read(self) -> AdvisoryState:
        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except ValueError as e:
            raise ParseError(f"Invalid JSON in {self.data_file}: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("advisories", []), list):
            raise ParseError(f"Unexpected document shape in {self.data_file}")

        advisories = []
        for entry in data.get("advisories", []):
            if not isinstance(entry, dict):
                raise ParseError(f"Unexpected advisory entry in {self.data_file}: {entry!r}")
            try:
                advisories.append(Advisory.from_dict(entry))
            except ValueError as e:
                raise ParseError(f"{e} in {self.data_file}") from e
        return AdvisoryState(advisories=advisories, last_checked=data.get("lastChecked"))

    def load(self) -> AdvisoryState:
        """
        Load the previous snapshot.

        A missing file is a first run and yields an empty state. A corrupt
        file is logged and also yields an empty state.
        """
        if not self.data_file.exists():
            logger.info(f"No previous snapshot at {self.data_file}, starting fresh")
            return AdvisoryState.empty()

        try:
            state = self._read()
        except ParseError as e:
            logger.warning(f"Failed to load previous snapshot: {e}")
            return AdvisoryState.empty()

        logger.debug(
            f"Loaded {len(state.advisories)} advisories "
            f"(last checked {state.last_checked}) from {self.data_file}"
        )
        return state

    def save(self, advisories: Iterable[Advisory], now: Optional[datetime] = None) -> AdvisoryState:
        """Overwrite the snapshot with ``advisories`` and stamp the check time."""
        unique = []
        seen = set()
        for adv in advisories:
            if adv.ghsa_id in seen:
                logger.debug(f"Dropping duplicate advisory {adv.ghsa_id}")
                continue
            seen.add(adv.ghsa_id)
            unique.append(adv)

        state = AdvisoryState(
            advisories=unique,
            last_checked=_timestamp(now or datetime.now(timezone.utc)),
        )
        document = {
            "advisories": [adv.to_dict() for adv in state.advisories],
            "lastChecked": state.last_checked,
        }

        self.data_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.data_file, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2, ensure_ascii=False)
            f.write("\n")

        logger.debug(f"Saved {len(unique)} advisories to {self.data_file}")
        return state
