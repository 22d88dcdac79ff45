"""Main Textual TUI application.

Orchestrates the timelines, the temporary session and the regeneration
indicator around the chat widgets.
"""

import logging
from collections.abc import Hashable

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header
from uuid_extensions import uuid7

from ..completion import EchoCompletionProvider, ephemeral_sink, timeline_sink
from ..config import SESSION_ENDED_MESSAGE, Settings, load_settings
from ..errors import ChatlineError
from ..rendering import MessageRenderer
from ..session import EndReason, SessionContext, SessionHandle, TemporarySession
from ..store import KeyValueStore
from ..timeline import (
    Message,
    RegenerationOrchestrator,
    Role,
    TempMessage,
    Timeline,
)
from ..timeline.models import is_single_user_turn
from .screens import ConfirmationScreen, ImageModal
from .styles import APP_CSS
from .themes import CATPPUCCIN_MOCHA
from .widgets import (
    ChatHistoryWidget,
    ChatInputBar,
    MessageView,
    RegeneratingIndicator,
    SessionBanner,
)

logger = logging.getLogger(__name__)


class ChatlineApp(App):
    """Textual TUI for a durable conversation and temporary chats."""

    CSS = APP_CSS
    TITLE = "Chatline"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+t", "toggle_temporary", "Temporary chat"),
        Binding("ctrl+n", "new_chat", "New chat"),
    ]

    def __init__(
        self,
        store: KeyValueStore,
        settings: Settings | None = None,
        conversation_id: str | None = None,
        context: SessionContext | None = None,
        temporary: bool = False,
    ) -> None:
        super().__init__()
        self._store = store
        self._settings = settings or load_settings()
        self._conversation_id = conversation_id or str(uuid7())
        self._context = context or SessionContext(
            TemporarySession(budget_seconds=self._settings.session_seconds)
        )
        self._start_temporary = temporary
        self._renderer = MessageRenderer()
        self._timeline: Timeline | None = None
        self._handle: SessionHandle | None = None
        self._provider: EchoCompletionProvider | None = None
        self._orchestrator: RegenerationOrchestrator | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield SessionBanner(id="session-banner")
        yield ChatHistoryWidget(self._renderer, id="chat-history")
        yield RegeneratingIndicator(id="regenerating")
        yield ChatInputBar(id="chat-input-bar")
        yield Footer()

    @property
    def session(self) -> TemporarySession:
        return self._handle.session

    @property
    def timeline(self) -> Timeline:
        return self._timeline

    async def on_mount(self) -> None:
        self.register_theme(CATPPUCCIN_MOCHA)
        self.theme = "catppuccin-mocha"
        self.sub_title = f"{self._settings.model} | {self._store.backend_type}"

        await self._store.connect()
        self._timeline = await Timeline.load(self._store, self._conversation_id)
        self._handle = self._context.acquire("tui")
        self._provider = EchoCompletionProvider(timeline_sink(self._timeline, self._settings.model))
        self._orchestrator = RegenerationOrchestrator(self._provider, self._on_indicator_change)

        self.set_interval(1.0, self._refresh_banner)
        if self._start_temporary:
            self.action_toggle_temporary()
        else:
            await self._refresh_history()
        self._refresh_banner()
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    async def on_unmount(self) -> None:
        """Tear the session down and persist pending writes."""
        if self._orchestrator is not None:
            self._orchestrator.reset_indicator()
        if self._handle is not None:
            self._handle.release()
        if self._timeline is not None:
            await self._timeline.flush()
        await self._store.disconnect()

    async def _refresh_history(self) -> None:
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        if self.session.active:
            shown = self.session.timeline
            await chat.show_ephemeral(shown)
        else:
            shown = self._timeline
            await chat.show_durable(shown)
        self.query_one("#chat-input-bar", ChatInputBar).show_prompts_of(shown.messages)

    def _refresh_banner(self) -> None:
        if self._handle is not None and self._handle.held:
            self.query_one("#session-banner", SessionBanner).show(self.session)

    def _on_indicator_change(self, regenerating: bool) -> None:
        for indicator in self.query(RegeneratingIndicator):
            indicator.set_visible(regenerating)

    def _on_session_ended(self, reason: EndReason) -> None:
        self._provider.retarget(timeline_sink(self._timeline, self._settings.model))
        if reason == EndReason.TEARDOWN:
            return
        self.notify(SESSION_ENDED_MESSAGE, severity="warning", timeout=5)
        self._start_new_chat()

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        self._send(event.value)

    # Not exclusive: a running completion call is never cancelled
    @work(group="send")
    async def _send(self, prompt: str) -> None:
        if self.session.active:
            ephemeral = self.session.timeline
            ephemeral.append(TempMessage(content=prompt, role=Role.USER))
            single = is_single_user_turn(list(ephemeral.messages))
        else:
            self._timeline.append(Message.create(Role.USER, prompt, model=self._settings.model))
            single = is_single_user_turn(list(self._timeline.messages))
        await self._refresh_history()

        try:
            await self._provider(prompt, single)
        except Exception as e:
            logger.error("Completion failed: %s", e, exc_info=True)
            self.notify(f"Error: {str(e)[:50]}", severity="error", timeout=5)
        await self._refresh_history()

    def on_message_view_delete_requested(self, event: MessageView.DeleteRequested) -> None:
        self._delete(event.ref)

    @work(exclusive=True, group="confirm")
    async def _delete(self, ref: Hashable) -> None:
        if not await self.push_screen_wait(ConfirmationScreen("Delete this message?")):
            return
        if self.session.active:
            deleted = self.session.timeline.delete_at(ref)
        else:
            deleted = self._timeline.delete_message(ref)
        if deleted:
            self.notify("Message deleted", timeout=2)
        await self._refresh_history()

    def on_message_view_regenerate_requested(self, event: MessageView.RegenerateRequested) -> None:
        self._regenerate(event.ref)

    @work(group="regenerate")
    async def _regenerate(self, ref: Hashable) -> None:
        timeline = self.session.timeline if self.session.active else self._timeline
        try:
            await self._orchestrator.regenerate(timeline, ref)
        except ChatlineError as e:
            self.notify(str(e), severity="error", timeout=5)
        await self._refresh_history()

    def on_message_view_image_requested(self, event: MessageView.ImageRequested) -> None:
        self.push_screen(ImageModal(event.block, self._renderer))

    def action_toggle_temporary(self) -> None:
        """Enter a temporary chat, or leave the current one."""
        if self.session.active:
            self._handle.exit_temporary()
            return
        self._handle.enter_temporary(self._on_session_ended)
        self._provider.retarget(ephemeral_sink(self.session.timeline, self._settings.model))
        self._refresh_banner()
        self.run_worker(self._refresh_history(), group="history", exclusive=True)
        self.notify("Temporary chat started. Messages will not be saved.", timeout=3)

    def action_new_chat(self) -> None:
        if self.session.active:
            # Leaving the temporary chat starts a new one
            self._handle.exit_temporary()
        else:
            self._start_new_chat()

    @work(exclusive=True, group="history")
    async def _start_new_chat(self) -> None:
        await self._timeline.flush()
        self._timeline = Timeline(str(uuid7()), store=self._store)
        self._provider.retarget(timeline_sink(self._timeline, self._settings.model))
        self._refresh_banner()
        await self._refresh_history()
        logger.info("Started conversation %s", self._timeline.conversation_id)


def run_chat_tui(
    store: KeyValueStore,
    settings: Settings | None = None,
    conversation_id: str | None = None,
    temporary: bool = False,
) -> None:
    """Run the chat TUI; the app connects and disconnects the store."""
    app = ChatlineApp(store, settings, conversation_id=conversation_id, temporary=temporary)
    app.run()
