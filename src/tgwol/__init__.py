"""tgwol: wake registered machines from a Telegram chat."""

__version__ = "0.3.0"
