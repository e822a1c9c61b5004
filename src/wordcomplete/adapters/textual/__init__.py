"""Textual adapter: controller plus the demo application (``app``)."""

from .controller import TextualPluginAdapter, TextualUIHooks, diff_delta

__all__ = ["TextualPluginAdapter", "TextualUIHooks", "diff_delta"]
