"""Chat template rendering."""

from promptfit.templates.renderer import CHATML_TEMPLATE, ChatTemplate, Jinja2ChatTemplate

__all__ = ["CHATML_TEMPLATE", "ChatTemplate", "Jinja2ChatTemplate"]
