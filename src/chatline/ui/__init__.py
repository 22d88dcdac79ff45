"""Terminal UI module for chatline.

Module structure (Parnas principle - each module hides a design decision):
- widgets.py: Custom widgets (message views, scrollable tables, prompt recall)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palettes and theme configuration
- screens.py: Modal dialogs (delete confirmation, enlarged image)
- app.py: Application orchestration (user interaction flow)
"""

from .app import ChatlineApp, run_chat_tui
from .widgets import ChatHistoryWidget, ChatInputBar, MessageView, TableView

__all__ = [
    "ChatHistoryWidget",
    "ChatInputBar",
    "ChatlineApp",
    "MessageView",
    "TableView",
    "run_chat_tui",
]
