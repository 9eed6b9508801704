"""Runtime translation object referenced by rewritten sources."""

from .translator import Translator, i18n

__all__ = ["Translator", "i18n"]
