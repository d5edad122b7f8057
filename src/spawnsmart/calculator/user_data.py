"""Current calculator selections, their results, and their saved copy on disk."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from spawnsmart.calculator.data import get_experience_level
from spawnsmart.calculator.mix import calculate_mix, recommendations_for_experience
from spawnsmart.schemas.calculator import CalculationResult, CalculatorInput

logger = logging.getLogger(__name__)

# Top-level key of the saved JSON document
STORAGE_KEY = "myceliumCalculatorData"


class UserDataStore:
    """Holds the user's calculator inputs and keeps results in step with them.

    Every update recalculates. Changing the experience level also resets the
    substrate ratio to that level's default.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else None
        self.inputs = CalculatorInput()
        self.results: CalculationResult = calculate_mix(self.inputs)
        self.recommendations: list[str] = recommendations_for_experience(self.inputs.experience_level)

    def update(self, field: str, value: Any) -> CalculatorInput:
        """Set one input field and recalculate.

        Raises ``ValueError`` for an unknown field and
        ``pydantic.ValidationError`` for an invalid value.
        """
        if field not in CalculatorInput.model_fields:
            raise ValueError(f"Unknown calculator field: {field}")
        data = self.inputs.model_dump()
        data[field] = value
        if field == "experience_level":
            level = get_experience_level(str(value))
            if level is not None:
                data["substrate_ratio"] = level.default_substrate_ratio
        self.inputs = CalculatorInput.model_validate(data)
        self._recalculate()
        return self.inputs

    def reset(self) -> CalculatorInput:
        self.inputs = CalculatorInput()
        self._recalculate()
        return self.inputs

    def _recalculate(self) -> None:
        self.results = calculate_mix(self.inputs)
        self.recommendations = recommendations_for_experience(self.inputs.experience_level)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self) -> bool:
        """Write the current inputs to ``path``. Returns False on failure."""
        if self.path is None:
            return False
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps({STORAGE_KEY: self.inputs.model_dump()}, indent=2))
        except OSError as exc:
            logger.error("Failed to save calculator data to %s: %s", self.path, exc)
            return False
        logger.debug("Saved calculator data to %s", self.path)
        return True

    def load(self) -> bool:
        """Restore saved inputs. Returns False when nothing valid was restored."""
        if self.path is None or not self.path.exists():
            return False
        try:
            document = json.loads(self.path.read_text())
        except (OSError, ValueError) as exc:
            logger.error("Failed to read calculator data from %s: %s", self.path, exc)
            return False

        saved = document.get(STORAGE_KEY) if isinstance(document, dict) else None
        if not isinstance(saved, dict):
            logger.warning("No calculator data under %r in %s", STORAGE_KEY, self.path)
            return False

        known = {k: v for k, v in saved.items() if k in CalculatorInput.model_fields}
        try:
            # Saved values win over the level's default ratio.
            self.inputs = CalculatorInput.model_validate({**self.inputs.model_dump(), **known})
        except ValidationError as exc:
            logger.error("Ignoring invalid calculator data in %s: %s", self.path, exc)
            return False
        self._recalculate()
        return True
