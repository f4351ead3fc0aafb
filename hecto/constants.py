"""Constants and configuration for the hecto editor."""

class EditorConstants:
    """Central configuration constants for the editor."""

    # Screen layout
    STATUS_BAR_HEIGHT = 2  # Status bar plus message bar below the text area
    MIN_TERMINAL_WIDTH = 20
    MIN_TERMINAL_HEIGHT = 3
    EMPTY_ROW_MARKER = "~"
    WELCOME_MESSAGE = "Hecto editor -- version {}"
    NO_NAME = "[No Name]"
    TAB_REPLACEMENT = " "  # Tabs are stored as-is and drawn one column wide
    CONTROL_REPLACEMENT = "?"

    # Status messages
    STATUS_MESSAGE_TIMEOUT = 5.0  # Seconds a transient message stays visible
    HELP_MESSAGE = "HELP: Ctrl-F = find | Ctrl-S = save | Ctrl-Q = quit"
    QUIT_WARNING = "WARNING! File has unsaved changes. Press Ctrl-Q again to quit."
    SAVE_ABORTED = "Save aborted."
    SEARCH_EXHAUSTED = "no more matches"
    GOODBYE = "Goodbye."

    # Prompts
    SAVE_AS_PROMPT = "Save as: {}"
    SEARCH_PROMPT = "Search (Esc to cancel, arrows to navigate): {}"

    # Keyboard timing
    KEY_POLL_TIMEOUT = None  # Block until a key arrives

    # File operations
    ATOMIC_SAVE_PREFIX = "."  # Prefix for temporary save files
    ATOMIC_SAVE_SUFFIX = ".tmp"  # Suffix for temporary save files
    ENCODING = "utf-8"

    # Settings persistence
    APP_NAME = "hecto"
    SETTINGS_FILENAME = "settings.json"
    CURSOR_POSITION_KEY = "cursor_position"
