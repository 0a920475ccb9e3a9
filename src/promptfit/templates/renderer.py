"""Chat template rendering.

A chat template turns an ordered message list, the tool definitions and
the thinking flag into the literal prompt text a model consumes.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from promptfit.errors import RenderError

if TYPE_CHECKING:
    from jinja2 import Template as Jinja2Template

    from promptfit.conversation import Message

CHATML_TEMPLATE = """\
{%- if tools -%}
<|im_start|>system
# Tools
{% for tool in tools %}{{ tool | tojson }}
{% endfor %}<|im_end|>
{% endif -%}
{%- for message in messages -%}
<|im_start|>{{ message.role }}
{{ message.content }}
{%- for call in message.tool_calls %}
<tool_call>{"name": {{ call.name | tojson }}, "arguments": {{ call.arguments | tojson }}}</tool_call>
{%- endfor %}<|im_end|>
{% endfor -%}
<|im_start|>assistant
{% if think_set and not think %}<think>

</think>

{% endif %}"""


@runtime_checkable
class ChatTemplate(Protocol):
    """Renders a message list into prompt text."""

    def render(
        self,
        messages: Sequence[Message],
        *,
        tools: Sequence[dict[str, Any]] = (),
        think: bool = False,
        think_set: bool = False,
    ) -> str: ...


@dataclass
class Jinja2ChatTemplate:
    """A chat template written in Jinja2.

    Templates see ``messages`` (Message objects), ``tools`` (tool
    definition dicts), ``think`` and ``think_set``. Rendering runs in a
    Jinja2 sandbox since chat templates usually ship with model files.

    Attributes:
        source: Jinja2 template source.
        name: Name used in error messages.

    Example:
        >>> template = Jinja2ChatTemplate("{% for m in messages %}{{ m.content }}\\n{% endfor %}")
        >>> template.render([Message(role="user", content="Hi")])
        'Hi\\n'
    """

    source: str = CHATML_TEMPLATE
    name: str = "chatml"
    _compiled: Jinja2Template | None = field(default=None, repr=False, compare=False)

    def _template(self) -> Jinja2Template:
        if self._compiled is None:
            from jinja2.sandbox import ImmutableSandboxedEnvironment

            env = ImmutableSandboxedEnvironment(keep_trailing_newline=True)
            self._compiled = env.from_string(self.source)
        return self._compiled

    def render(
        self,
        messages: Sequence[Message],
        *,
        tools: Sequence[dict[str, Any]] = (),
        think: bool = False,
        think_set: bool = False,
    ) -> str:
        """Render the template.

        Args:
            messages: Messages to render, in order.
            tools: Tool definitions available to the model.
            think: Whether thinking is enabled.
            think_set: Whether the caller set ``think`` explicitly.

        Returns:
            The rendered prompt.

        Raises:
            RenderError: If the template fails to compile or render.
        """
        try:
            return self._template().render(
                messages=list(messages),
                tools=list(tools),
                think=think,
                think_set=think_set,
            )
        except Exception as e:
            raise RenderError(
                f"Failed to render chat template '{self.name}'",
                cause=e,
                message_count=len(messages),
            ) from e
