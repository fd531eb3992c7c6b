"""Interactive selector interface."""

from abc import ABC, abstractmethod
from typing import Optional

from .models import Candidate, DispatchMode


class Selector(ABC):
    """
    Presents candidates and reports the user's choice.

    Implementations render the list however they like (a terminal prompt,
    an editor completion popup, ...). An empty candidate list must not be an
    error: the selector shows its empty state and returns None.
    """

    @abstractmethod
    def select(
        self,
        candidates: list[Candidate],
        actions: list[DispatchMode],
        default_action: DispatchMode,
    ) -> Optional[tuple[DispatchMode, Candidate]]:
        """
        Let the user pick a candidate and an action.

        Args:
            candidates: Entries in display order
            actions: Actions offered for the chosen entry
            default_action: Action applied when the user just confirms

        Returns:
            (action, candidate), or None if the user cancelled
        """
        ...
