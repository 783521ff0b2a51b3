"""BaseService: abstract foundation for all boxplan services.

Every service receives a :class:`Board` at construction time. The Board
provides the entity registry, the containment propagator, snapshots, and
plugin dispatch.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from boxplan.infrastructure.layout_loader import LayoutError
from boxplan.rules.dispatch import UnknownRuleError
from boxplan.services.result import ServiceResult

if TYPE_CHECKING:
    from boxplan.infrastructure.board import Board

logger = logging.getLogger(__name__)


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class BoardService(BaseService):
            def check(self) -> ServiceResult:
                failure = self._ensure_loaded("check", warnings)
                ...
    """

    def __init__(self, board: Board) -> None:
        self._board = board

    def _ensure_loaded(self, op: str, warnings: list[str]) -> ServiceResult | None:
        """Load the board's layout if needed.

        Returns an error result when the layout cannot be loaded, else None.
        """
        if self._board.is_loaded:
            return None
        try:
            warnings.extend(self._board.load())
        except LayoutError as exc:
            logger.debug("Layout load failed: %s", exc)
            code = "NO_LAYOUT" if exc.reason == "file not found" else "INVALID_LAYOUT"
            return ServiceResult.failure(op, code, str(exc), path=str(exc.path))
        except UnknownRuleError as exc:
            return ServiceResult.failure(op, "INVALID_LAYOUT", str(exc), rule=exc.name)
        return None
