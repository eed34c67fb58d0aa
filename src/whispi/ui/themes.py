"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, etc.)
- Dark/light mode configuration

To add a new theme, define it here and register in the app.
"""

from textual.theme import Theme

# Light theme built from three base colors: white, black and the brand pink
WHISPI_LIGHT = Theme(
    name="whispi-light",
    primary="#e50253",      # Brand pink - main accent, user messages
    secondary="#666666",    # Secondary text
    accent="#e50253",
    foreground="#000000",
    background="#ffffff",
    success="#e50253",
    warning="#b3003f",
    error="#e50253",
    surface="#ffffff",
    panel="#f5f5f5",        # Assistant message bubbles, side panels
    dark=False,
    variables={
        # Cursor styling
        "block-cursor-foreground": "#ffffff",
        "block-cursor-background": "#e50253",
        "block-cursor-text-style": "bold",
        "block-hover-background": "#e50253 5%",

        # Input styling
        "input-cursor-background": "#000000",
        "input-cursor-foreground": "#ffffff",
        "input-selection-background": "#e50253 20%",

        # Border colors
        "border": "#e0e0e0",
        "border-blurred": "#f0f0f0",

        # Scrollbar styling
        "scrollbar": "#e0e0e0",
        "scrollbar-hover": "#d0d0d0",
        "scrollbar-active": "#e50253",
        "scrollbar-background": "#ffffff",
        "scrollbar-corner-color": "#ffffff",

        # Footer styling
        "footer-foreground": "#000000",
        "footer-background": "#f5f5f5",
        "footer-key-foreground": "#e50253",
        "footer-key-background": "#ffffff",
        "footer-description-foreground": "#666666",

        # Text variants
        "text-muted": "#666666",
        "text-disabled": "#cccccc",

        # Button styling
        "button-foreground": "#000000",
        "button-color-foreground": "#ffffff",
        "button-focus-text-style": "bold",
    },
)
