"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Uses Textual CSS features: nesting, pseudo-classes, variables.

Layout:
- Sidebar with the UID bar, actions and conversation list
- Main column with the welcome panel or the open conversation
- Optional log panel under the main column
"""

APP_CSS = """
/* ============================================
   CSS Variables - Design Tokens
   ============================================ */
$panel-border: round $border;
$panel-border-focus: round $primary;

/* ============================================
   Main Screen Layout - Sidebar + Main Column
   ============================================ */
Screen {
    background: $background;
}

#layout {
    height: 1fr;
}

#sidebar {
    width: 46;
    height: 100%;
    background: $panel;
    border-right: solid $border;
    padding: 0 1;
}

#main {
    width: 1fr;
    height: 100%;
    padding: 0 1;
}

/* ============================================
   Error Banner
   ============================================ */
#error-banner {
    height: auto;
    margin: 1 0 0 0;
    padding: 0 1;
    background: $error 15%;
    border-left: tall $error;
    color: $foreground;
}

/* ============================================
   User Bar - UID Entry + Actions
   ============================================ */
#user-bar {
    height: auto;
    margin-top: 1;
}

#uid-input {
    border: $panel-border;
    background: $surface;

    &:focus {
        border: $panel-border-focus;
    }
}

#user-buttons {
    height: auto;
    margin-top: 1;
}

#user-buttons Button {
    width: 1fr;
    margin: 0 1 0 0;
}

/* ============================================
   Conversation List
   ============================================ */
#chat-list {
    height: 1fr;
    margin-top: 1;
    border: $panel-border;
    border-title-color: $primary;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
}

#chat-list-empty {
    height: 1fr;
    content-align: center middle;
    color: $text-muted;
}

#chat-list-options {
    height: 1fr;
    border: none;
    background: transparent;
}

/* ============================================
   Welcome Panel
   ============================================ */
#welcome {
    height: 1fr;
    content-align: center middle;
    text-align: center;
    color: $text-muted;
}

/* ============================================
   Chat View
   ============================================ */
#chat-view {
    height: 1fr;
}

#chat-header {
    height: auto;
    padding: 1 2;
    border-bottom: solid $border;
}

#chat-history {
    height: 1fr;
    background: $surface;
    border: $panel-border;
    border-title-color: $primary;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;

    &:focus {
        border: $panel-border-focus;
    }
}

#typing-indicator {
    height: 1;
    padding: 0 2;
    color: $text-muted;
}

/* ============================================
   Chat Input Bar - Text Entry + Send
   ============================================ */
ChatInputBar {
    height: 5;
    border: $panel-border;
    background: $surface;

    &:focus-within {
        border: $panel-border-focus;
    }
}

#chat-input {
    width: 1fr;
    height: 100%;
    border: none;
    padding: 0 1;
    background: transparent;

    &:focus {
        background: transparent;
    }
}

#send-btn {
    width: 10;
    height: 100%;
    margin: 0 0 0 1;
    min-width: 8;
}

/* ============================================
   Chat Messages - Conversation Display
   ============================================ */
.chat-message {
    width: 100%;
    height: auto;
    margin: 0 0 1 0;
    padding: 0 2;
    border: none;
    background: transparent;
}

/* User messages - brand pink on the right */
.user-message {
    margin: 0 0 1 12;
    border-right: tall $primary;
    background: $primary;

    & .message-header {
        color: $background;
        text-style: bold;
        text-align: right;
    }

    & .message-content {
        color: $background;
        text-align: right;
    }
}

/* Assistant messages - grey bubble on the left */
.assistant-message {
    margin: 0 12 1 0;
    border-left: tall $secondary;
    background: $panel;

    & .message-header {
        color: $secondary;
        text-style: bold;
    }

    & .message-content {
        color: $foreground;
    }
}

.message-header {
    height: auto;
    padding: 0;
}

.message-content {
    height: auto;
    padding: 0;
    margin: 0;
}

/* ============================================
   Debug/Log Panel
   ============================================ */
#debug-panel {
    height: auto;
    min-height: 6;
    max-height: 14;
    background: $panel;
    border: round $warning 60%;
    border-title-color: $warning;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    overflow-y: scroll;
    overflow-x: auto;
    scrollbar-gutter: stable;
    margin-top: 1;
}

/* ============================================
   Notification Toasts
   ============================================ */
Toast {
    background: $surface;
    border: tall $border;
    padding: 0 1;

    &.-information {
        border: tall $primary;
        background: $primary 12%;
        color: $foreground;
    }

    &.-error {
        border: tall $error;
        background: $error 12%;
        color: $foreground;
    }
}

/* ============================================
   Scrollbar Styling
   ============================================ */
* {
    scrollbar-size: 1 1;
}

/* ============================================
   Header and Footer
   ============================================ */
Header {
    background: $panel;
    color: $foreground;
    dock: top;
    height: 1;
}

HeaderTitle {
    color: $primary;
    text-style: bold;
}

Footer {
    background: $panel;
    height: auto;
}

/* ============================================
   Global Button Variants
   ============================================ */
Button {
    min-width: 8;
    height: 3;
    border: tall $border;
    background: $surface;
    color: $foreground;

    &:hover {
        text-style: bold;
    }

    &:focus {
        border: tall $primary;
    }
}

Button.-primary {
    background: $primary;
    color: $background;
    border: tall $primary;

    &:hover {
        background: $primary-darken-1;
        border: tall $primary-darken-1;
    }
}

/* ============================================
   OptionList Styling
   ============================================ */
OptionList {
    background: $surface;
    border: tall $border;
    padding: 0 1;
}

OptionList > .option-list--option-highlighted {
    background: $primary 20%;
}
"""
