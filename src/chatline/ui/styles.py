"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Uses Textual CSS features: nesting, pseudo-classes, variables.
"""

APP_CSS = """
/* ============================================
   Main Screen Layout - single column
   ============================================ */
Screen {
    layout: vertical;
    background: $background;
}

/* ============================================
   Session Banner - mode and countdown
   ============================================ */
#session-banner {
    height: 1;
    padding: 0 2;
    background: $surface;
    color: $text-muted;

    &.-temporary {
        background: $warning 20%;
        color: $warning;
        text-style: bold;
    }
}

/* ============================================
   Chat History Panel - Primary Focus Area
   ============================================ */
#chat-history {
    height: 1fr;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-title-align: left;
    padding: 0 1;
    scrollbar-gutter: stable;

    &:focus-within {
        border: round $primary;
    }

    &.-temporary {
        border: round $warning 60%;
        border-title-color: $warning;
    }
}

DateSeparator {
    width: 100%;
    height: 1;
    margin: 1 0 0 0;
    content-align: center middle;
    color: $text-muted;
    text-style: italic;
}

/* ============================================
   Messages
   ============================================ */
MessageView {
    height: auto;
    margin: 1 0 0 0;
    padding: 0 1;
    border-left: tall $border;

    &.user {
        border-left: tall $secondary;
    }

    &.assistant {
        border-left: tall $primary;
    }

    &:focus {
        background: $boost;
        border-left: tall $accent;
    }
}

.message-author {
    text-style: bold;
    color: $text;
}

.message-meta {
    color: $text-muted;
}

.message-body {
    height: auto;
}

ImageThumb {
    height: auto;

    &:hover {
        background: $boost;
    }
}

/* ============================================
   Tables - horizontal scroll container
   ============================================ */
TableView {
    height: auto;
    overflow-x: auto;
    overflow-y: hidden;

    .table-body {
        width: auto;
    }

    &.-scrollable {
        border-bottom: hkey $accent 50%;
    }
}

/* ============================================
   Regenerating indicator
   ============================================ */
#regenerating {
    height: 1;
    padding: 0 2;
    color: $accent;
    text-style: italic;
    display: none;

    &.-visible {
        display: block;
    }
}

/* ============================================
   Chat Input Bar - Text Entry + Send
   ============================================ */
ChatInputBar {
    height: 5;
    border: round $primary 60%;
    background: $panel;

    &:focus-within {
        border: round $primary;
    }
}

#chat-input {
    width: 1fr;
    height: 100%;
    border: none;
    padding: 0 1;
    background: transparent;
}

#send-btn {
    width: 10;
    height: 100%;
    margin: 0 0 0 1;
}
"""
