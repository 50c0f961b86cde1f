from typing import Dict, List, Optional

from keypad_calculator.handlers.base_handler import BaseKeyHandler
from keypad_calculator.models.editor_models import PressToken


class KeyHandlerRegistry:
    """Central registry for key press handlers.

    Routes each press to the handler with the best confidence, trying
    handlers in priority order.
    """

    def __init__(self):
        # Dict of priority -> list of handlers
        self._handlers: Dict[int, List[BaseKeyHandler]] = {}

    def register_handler(self, handler: BaseKeyHandler, priority: int = 100) -> None:
        """Register a new handler with given priority.

        Args:
            handler: Handler instance to register
            priority: Priority level (lower number = higher priority)

        Raises:
            ValueError: If handler is not a BaseKeyHandler instance
        """
        if not isinstance(handler, BaseKeyHandler):
            raise ValueError("Handler must be an instance of BaseKeyHandler")

        if priority not in self._handlers:
            self._handlers[priority] = []

        self._handlers[priority].append(handler)

    def get_handler(self, token: PressToken) -> Optional[BaseKeyHandler]:
        """Get the most appropriate handler for a key press.

        Returns:
            BaseKeyHandler if found, None if no handler can process
        """
        best_handler = None
        best_confidence = 0.0

        for priority in sorted(self._handlers.keys()):
            for handler in self._handlers[priority]:
                confidence = handler.can_handle(token)
                # Perfect match wins immediately
                if confidence == 1.0:
                    return handler
                if confidence > best_confidence:
                    best_confidence = confidence
                    best_handler = handler

        return best_handler
