"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Per-message layout (avatar label, metadata line, rendered body)
- Horizontal scrolling of wide tables
- Day separators in the durable history
- Prompt recall from the timeline on screen
"""

from collections.abc import Hashable

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, HorizontalScroll, Vertical, VerticalScroll
from textual.events import Click, Resize
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Button, Static, TextArea

from ..identity import resolve_identity
from ..rendering import (
    ImageBlock,
    MessageRenderer,
    ScrollableTable,
    TableBlock,
    format_model_name,
    format_response_meta,
)
from ..session import TemporarySession
from ..timeline import EphemeralTimeline, Role, TempMessage, Timeline
from ..timeline import Message as TimelineMessage


class DateSeparator(Static):
    """Day label between groups of durable messages."""

    def __init__(self, label: str, **kwargs) -> None:
        super().__init__(f"── {label} ──", **kwargs)


class TableView(HorizontalScroll):
    """Scroll container for a table laid out at its natural width.

    The ``-scrollable`` class tracks whether the table overflows the
    available width; it is recomputed whenever the view is resized.
    """

    def __init__(self, block: TableBlock, **kwargs) -> None:
        super().__init__(**kwargs)
        self._table = ScrollableTable(block)

    def compose(self) -> ComposeResult:
        yield Static(self._table, classes="table-body")

    def on_mount(self) -> None:
        self.call_after_refresh(self._update_scrollable)

    def on_resize(self, event: Resize) -> None:
        self.call_after_refresh(self._update_scrollable)

    @property
    def scrollable(self) -> bool:
        return self.has_class("-scrollable")

    def _update_scrollable(self) -> None:
        self.set_class(self.max_scroll_x > 0, "-scrollable")


class ImageThumb(Static):
    """Clickable reference to a generated image."""

    def __init__(self, renderable, block: ImageBlock, **kwargs) -> None:
        super().__init__(renderable, **kwargs)
        self.block = block

    def on_click(self, event: Click) -> None:
        event.stop()
        self.post_message(MessageView.ImageRequested(self.block))


class MessageView(Vertical, can_focus=True):
    """One message of the history.

    ``ref`` addresses the message in its timeline: a message id for the
    durable timeline, an index for the ephemeral one.
    """

    BINDINGS = [
        Binding("d", "delete", "Delete"),
        Binding("r", "regenerate", "Regenerate"),
        Binding("enter", "enlarge", "Enlarge image", show=False),
    ]

    class DeleteRequested(Message):
        def __init__(self, ref: Hashable) -> None:
            super().__init__()
            self.ref = ref

    class RegenerateRequested(Message):
        def __init__(self, ref: Hashable) -> None:
            super().__init__()
            self.ref = ref

    class ImageRequested(Message):
        def __init__(self, block: ImageBlock) -> None:
            super().__init__()
            self.block = block

    def __init__(
        self,
        message: TimelineMessage | TempMessage,
        ref: Hashable,
        renderer: MessageRenderer,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.entry = message
        self.ref = ref
        self._renderer = renderer
        self._image: ImageBlock | None = None
        self.add_class("user" if message.role == Role.USER else "assistant")

    def compose(self) -> ComposeResult:
        yield Static(self._author_line(), classes="message-author")
        if self.entry.role == Role.USER:
            yield Static(Text(self.entry.content), classes="message-body")
            return

        yield from self._body_widgets()
        yield Static(format_response_meta(self.entry), classes="message-meta")

    def _author_line(self) -> Text:
        agent_type = self.entry.agent_type if isinstance(self.entry, TimelineMessage) else None
        identity = resolve_identity(self.entry.model, self.entry.role, agent_type)
        line = Text(identity.label)
        if self.entry.role != Role.USER and self.entry.model:
            line.append(f"  {format_model_name(self.entry.model)}", style="dim")
        if isinstance(self.entry, TimelineMessage):
            line.append(f"  {self.entry.timestamp.strftime('%H:%M')}", style="dim")
        return line

    def _body_widgets(self) -> list[Widget]:
        message = self.entry
        if isinstance(message, TimelineMessage) and message.is_image_generation and message.image_url:
            self._image = self._renderer.image_block(message)
            thumb = ImageThumb(self._renderer.render_image(ImageBlock(self._image.url)), self._image)
            return [thumb, *self._block_widgets(self._image.caption)]
        return self._block_widgets(self._renderer.classify(message.content))

    def _block_widgets(self, blocks) -> list[Widget]:
        widgets: list[Widget] = []
        for block in blocks:
            if isinstance(block, TableBlock):
                widgets.append(TableView(block))
            else:
                widgets.append(Static(self._renderer.render_block(block), classes="message-body"))
        return widgets

    def action_delete(self) -> None:
        self.post_message(self.DeleteRequested(self.ref))

    def action_regenerate(self) -> None:
        if self.entry.role == Role.ASSISTANT:
            self.post_message(self.RegenerateRequested(self.ref))

    def action_enlarge(self) -> None:
        if self._image is not None:
            self.post_message(self.ImageRequested(self._image))


class ChatHistoryWidget(VerticalScroll):
    """Scrollable history of the durable or the ephemeral timeline."""

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "No messages"

    def __init__(self, renderer: MessageRenderer | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self._renderer = renderer or MessageRenderer()

    async def show_durable(self, timeline: Timeline) -> None:
        """Render a durable timeline grouped under day separators."""
        widgets: list[Widget] = []
        for label, messages in timeline.grouped_by_day().items():
            widgets.append(DateSeparator(label))
            widgets.extend(MessageView(message, message.id, self._renderer) for message in messages)
        self.border_title = "Chat"
        self.remove_class("-temporary")
        await self._replace(widgets, len(timeline))

    async def show_ephemeral(self, timeline: EphemeralTimeline) -> None:
        """Render an ephemeral timeline; messages are addressed by index."""
        widgets = [MessageView(message, index, self._renderer) for index, message in enumerate(timeline)]
        self.border_title = "Temporary chat"
        self.add_class("-temporary")
        await self._replace(widgets, len(timeline))

    async def _replace(self, widgets: list[Widget], count: int) -> None:
        await self.remove_children()
        if widgets:
            await self.mount_all(widgets)
        self.border_subtitle = f"{count} messages" if count else "No messages"
        self.scroll_end(animate=False)


class SessionBanner(Static):
    """Mode line showing the temporary session countdown."""

    def show(self, session: TemporarySession) -> None:
        if session.active:
            self.add_class("-temporary")
            self.update(f"Temporary chat · ends in {session.remaining_label} · Ctrl+T to leave")
        else:
            self.remove_class("-temporary")
            self.update("Saved chat · Ctrl+T for a temporary chat")


class RegeneratingIndicator(Static):
    """Shown while a regeneration is in flight."""

    def __init__(self, **kwargs) -> None:
        super().__init__("Regenerating response…", **kwargs)

    def set_visible(self, visible: bool) -> None:
        self.set_class(visible, "-visible")


class PromptRecall:
    """Cursor over the user prompts of the timeline on screen.

    back() walks toward older prompts and stops at the oldest; forward()
    walks toward newer ones and returns "" once past the newest, which
    leaves recall mode.
    """

    def __init__(self, prompts: list[str] | None = None) -> None:
        self.reset(prompts or [])

    @classmethod
    def from_messages(cls, messages) -> "PromptRecall":
        return cls([m.content for m in messages if m.role == Role.USER])

    def reset(self, prompts: list[str]) -> None:
        self._prompts = list(prompts)
        self._position: int | None = None

    @property
    def recalling(self) -> bool:
        return self._position is not None

    def back(self) -> str | None:
        if not self._prompts:
            return None
        if self._position is None:
            self._position = len(self._prompts) - 1
        else:
            self._position = max(self._position - 1, 0)
        return self._prompts[self._position]

    def forward(self) -> str | None:
        if self._position is None:
            return None
        self._position += 1
        if self._position == len(self._prompts):
            self._position = None
            return ""
        return self._prompts[self._position]


class ChatInputBar(Horizontal):
    """Prompt editor with a Send button.

    Ctrl+J sends (terminals report Enter without modifiers). Up on the
    first character and Down on the last step through earlier prompts.
    """

    class Submitted(Message):
        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.recall = PromptRecall()

    def compose(self) -> ComposeResult:
        editor = TextArea(id="chat-input", show_line_numbers=False)
        editor.cursor_blink = False
        editor.highlight_cursor_line = False
        yield editor
        yield Button("Send", id="send-btn", variant="success")

    @property
    def editor(self) -> TextArea:
        return self.query_one("#chat-input", TextArea)

    def show_prompts_of(self, messages) -> None:
        """Recall prompts from the timeline now on screen."""
        self.recall = PromptRecall.from_messages(messages)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            self.submit()

    def on_key(self, event) -> None:
        editor = self.editor
        recalled = None
        if event.key == "ctrl+j":
            self.submit()
        elif event.key == "up" and editor.cursor_location == (0, 0):
            recalled = self.recall.back()
        elif event.key == "down" and self.recall.recalling and editor.cursor_location == editor.document.end:
            recalled = self.recall.forward()
        else:
            return
        if recalled is not None:
            editor.text = recalled
        event.prevent_default()
        event.stop()

    def submit(self) -> None:
        value = self.editor.text.strip()
        if value:
            self.editor.clear()
            self.recall.reset([])
            self.post_message(self.Submitted(value))

    def focus_input(self) -> None:
        self.editor.focus()
