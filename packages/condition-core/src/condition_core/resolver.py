"""Combine sibling conditions into a single visibility decision."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Literal

from condition_core.interfaces import Condition
from condition_core.models import ContextError

logger = logging.getLogger(__name__)

Conjunction = Literal["and", "or"]


def resolve_conditions(conditions: Iterable[Condition], conjunction: Conjunction = "and") -> bool:
    """Execute *conditions* and combine the results.

    A condition whose required context is missing counts as failed. With
    ``and`` an empty set passes; with ``or`` it fails.
    """
    if conjunction not in ("and", "or"):
        raise ValueError(f"Unknown conjunction: {conjunction!r} (valid: 'and', 'or')")

    for condition in conditions:
        try:
            passed = condition.execute()
        except ContextError as e:
            logger.warning("Condition skipped: %s", e)
            passed = False

        if conjunction == "and" and not passed:
            return False
        if conjunction == "or" and passed:
            return True

    return conjunction == "and"
