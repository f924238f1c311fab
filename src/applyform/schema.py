"""SchemaStore — the built-in default form and schema resolution.

The default driver application lives in ``data/default_schema.yaml`` next to
this module.  It is loaded once and used whenever the schema source returns
nothing or cannot be reached.

Usage::

    store = SchemaStore()
    store.load()
    questions = store.resolve(raw_config)   # stored schema, or the defaults
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from applyform.models.question import Question, SuccessStep, WelcomeStep, parse_schema

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_PATH = Path(__file__).parent / "data" / "default_schema.yaml"


def load_yaml(path: Path | str) -> Any:
    """Load a single YAML file and return the parsed contents."""
    if isinstance(path, str):
        path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing YAML file: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


class SchemaStore:
    """Holds the default questions plus the welcome/success copy.

    Attributes populated after :meth:`load`:

        welcome   — WelcomeStep shown first
        success   — SuccessStep shown last
        defaults  — list[Question] of the built-in application
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path) if path is not None else DEFAULT_SCHEMA_PATH
        self.welcome: WelcomeStep | None = None
        self.success: SuccessStep | None = None
        self.defaults: list[Question] = []

    @property
    def loaded(self) -> bool:
        return self.welcome is not None

    def load(self) -> "SchemaStore":
        """Parse the default schema file.  Safe to call more than once."""
        raw = load_yaml(self._path)
        self.welcome = WelcomeStep(**raw["welcome"])
        self.success = SuccessStep(**raw["success"])
        self.defaults = parse_schema(raw["questions"])
        logger.info(
            "SchemaStore loaded: %d default questions from %s",
            len(self.defaults), self._path.name,
        )
        return self

    def resolve(self, raw: Any) -> list[Question]:
        """Return the questions of ``raw``, or the defaults when it is empty.

        Raises ``SchemaError`` when ``raw`` is non-empty but malformed.
        """
        if not self.loaded:
            self.load()
        if not raw:
            return list(self.defaults)
        return parse_schema(raw)
