"""IntentZero — turn a one-line product idea into coding-agent specs."""

__version__ = "0.1.0"
