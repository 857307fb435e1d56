"""Span IR: the parser's output units and their click actions.

Spans are data only. Click actions are tagged values that a UI layer
interprets later; nothing here holds a live reference to UI objects.

// [LAW:one-source-of-truth] Span is THE representation handed to layout.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from rich.style import Style
from rich.text import Text

from book_text.core.colors import ERROR_COLOR

if TYPE_CHECKING:
    from book_text.core.span_state import SpanState


# ─── Click actions ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class OpenUrl:
    url: str


@dataclass(frozen=True)
class OpenEntry:
    entry_id: str
    page: int = 0


@dataclass(frozen=True)
class SendCommand:
    command: str


ClickAction = OpenUrl | OpenEntry | SendCommand


# ─── Clusters ─────────────────────────────────────────────────────────────────


class Cluster:
    """Identity of one open tooltip/link/command region.

    Every span created while the cluster is open is appended to `spans`, so a
    layout stage can highlight or hit-test the region as a whole.
    """

    __slots__ = ("spans",)

    def __init__(self) -> None:
        self.spans: list[Span] = []

    def __repr__(self) -> str:
        return f"Cluster(<{len(self.spans)} spans>)"


# ─── Spans ────────────────────────────────────────────────────────────────────


@dataclass(frozen=True, eq=False)
class Span:
    content: Text
    style: Style = field(default_factory=Style.null)
    click: ClickAction | None = None
    tooltip: Text = field(default_factory=Text)
    cluster: Cluster | None = None
    line_breaks: int = 0
    spacing_left: int = 0
    spacing_right: int = 0
    is_error: bool = False

    @property
    def text(self) -> str:
        return self.content.plain

    @property
    def tooltip_text(self) -> str:
        return self.tooltip.plain

    @classmethod
    def from_state(cls, state: SpanState, content: str | Text) -> Span:
        """Snapshot `state` into a span.

        Pending line breaks and spacing are consumed: the state's counters
        drop back to 0 so the hints apply to this span only.
        """
        span = cls(
            content=_as_text(content),
            style=state.peek_style(),
            click=state.on_click,
            tooltip=state.tooltip,
            cluster=state.cluster,
            line_breaks=state.line_breaks,
            spacing_left=state.spacing_left,
            spacing_right=state.spacing_right,
        )
        state.line_breaks = 0
        state.spacing_left = 0
        state.spacing_right = 0
        if span.cluster is not None:
            span.cluster.spans.append(span)
        return span

    @classmethod
    def error(cls, state: SpanState, message: str) -> Span:
        span = cls(
            content=Text(message),
            style=Style(color=ERROR_COLOR),
            line_breaks=state.line_breaks,
            spacing_left=state.spacing_left,
            spacing_right=state.spacing_right,
            is_error=True,
        )
        state.line_breaks = 0
        state.spacing_left = 0
        state.spacing_right = 0
        return span

    def __repr__(self) -> str:
        return (
            f"Span({self.text!r}, style={self.style}, click={self.click!r}, "
            f"tooltip={self.tooltip_text!r}, line_breaks={self.line_breaks}, "
            f"spacing=({self.spacing_left}, {self.spacing_right}), error={self.is_error})"
        )


def _as_text(content: str | Text) -> Text:
    if isinstance(content, Text):
        return content
    return Text(content)
