"""Theme definitions for the TUI.

Hides the color palette and theme variables from the widgets and CSS.
"""

from textual.theme import Theme

# Catppuccin Mocha palette
CATPPUCCIN_MOCHA = Theme(
    name="catppuccin-mocha",
    primary="#89b4fa",      # Blue - assistant messages
    secondary="#cba6f7",    # Mauve - user messages
    accent="#f9e2af",       # Yellow - focus and regeneration
    foreground="#cdd6f4",
    background="#11111b",
    success="#a6e3a1",
    warning="#fab387",      # Peach - temporary session
    error="#f38ba8",
    surface="#1e1e2e",
    panel="#181825",
    dark=True,
    variables={
        "border": "#45475a",
        "border-blurred": "#313244",
        "scrollbar": "#313244",
        "scrollbar-hover": "#45475a",
        "scrollbar-active": "#89b4fa",
        "scrollbar-background": "#181825",
        "footer-key-foreground": "#f9e2af",
        "footer-background": "#11111b",
        "text-muted": "#6c7086",
        "link-color": "#89b4fa",
        "link-style": "underline",
    },
)
