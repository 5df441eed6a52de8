"""Output capture and named content sections.

A view owns one `OutputBuffer` and one `SectionStack`. The template
evaluator writes everything a template produces to the top frame of the
buffer. Opening a section pushes a new frame so the text that follows is
captured for that section; closing it pops the frame and commits the text.
Frames are strictly LIFO: the most recently opened section is always the
one that gets closed.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from flake.exceptions import (
    ReservedNameError,
    SectionError,
    SectionStackEmptyError,
    UnclosedSectionError,
)

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

CONTENT_SECTION = "content"
"""Section holding a child view's rendered body inside its layout."""


class EndMode(StrEnum):
    """How a closed capture is combined with the section's existing text."""

    APPEND = "append"
    OVERRIDE = "override"


class OutputBuffer:
    """LIFO stack of string builders."""

    __slots__: tuple[str, ...] = ("_frames",)

    def __init__(self) -> None:
        self._frames: list[list[str]] = []

    @property
    def depth(self) -> int:
        return len(self._frames)

    def push(self) -> None:
        self._frames.append([])

    def write(self, text: str) -> None:
        """Append text to the innermost frame.

        Raises:
            RuntimeError: If no frame is open.
        """
        if not self._frames:
            msg = "Cannot write output without an open buffer frame."
            raise RuntimeError(msg)
        self._frames[-1].append(text)

    def pop(self) -> str:
        """Close the innermost frame and return its text.

        Raises:
            RuntimeError: If no frame is open.
        """
        if not self._frames:
            msg = "Cannot close an output buffer frame that was never opened."
            raise RuntimeError(msg)
        return "".join(self._frames.pop())

    def unwind(self, depth: int) -> None:
        """Discard frames until only `depth` remain."""
        del self._frames[depth:]


@dataclass(slots=True)
class _Capture:
    name: str
    previous: str | None
    depth: int


class SectionStack:
    """Ordered named sections with begin/append/override capture semantics.

    A name is absent, capturing (an output frame is open for it) or
    committed (it holds final text). Committed sections keep the order in
    which they were last written.
    """

    __slots__: tuple[str, ...] = ("_buffer", "_buffered", "_open", "_sections")

    def __init__(self, buffer: OutputBuffer) -> None:
        self._buffer: OutputBuffer = buffer
        self._sections: dict[str, str] = {}
        self._open: list[_Capture] = []
        self._buffered: int = 0

    def begin_or_set(self, name: str, content: str = "") -> None:
        """Commit a section immediately, or start capturing it.

        With non-empty `content` the section is committed right away and no
        `end` call is needed. Otherwise an output frame is opened and every
        write up to the matching `end` is captured. Text already committed
        under the name is set aside until then: `end("append")` adds the
        capture to it, `end("override")` drops it.

        Raises:
            ReservedNameError: If `name` is "content".
        """
        if name == CONTENT_SECTION:
            msg = f'The section name "{CONTENT_SECTION}" is reserved.'
            raise ReservedNameError(msg, name=name)

        previous = self._sections.pop(name, None)

        if content:
            self._sections[name] = content
            return

        self._buffer.push()
        self._open.append(_Capture(name, previous, self._buffer.depth))

    def end(self, mode: EndMode | str = EndMode.APPEND) -> str:
        """Close the most recently opened capture and commit its text.

        Args:
            mode: "append" to add the capture to the section's previous text,
                "override" to replace it.

        Returns:
            The name of the section that was closed.

        Raises:
            SectionStackEmptyError: If no capture is open.
            SectionError: If `mode` is not a known end mode, or output frames
                pushed after the capture are still open.
        """
        try:
            end_mode = EndMode(mode)
        except ValueError:
            msg = f"Unknown section end mode {mode!r}."
            raise SectionError(msg) from None

        if not self._open:
            msg = "You must start a section before you can stop it."
            raise SectionStackEmptyError(msg)

        capture = self._open[-1]
        if self._buffer.depth != capture.depth:
            msg = f'Section "{capture.name}" cannot close over unclosed output.'
            raise SectionError(msg)

        _ = self._open.pop()
        captured = self._buffer.pop()
        if end_mode is EndMode.APPEND and capture.previous:
            captured = capture.previous + captured
        self._sections[capture.name] = captured
        return capture.name

    def get(self, name: str, default: str | None = None) -> str | None:
        return self._sections.get(name, default)

    def has(self, name: str) -> bool:
        return name in self._sections or any(c.name == name for c in self._open)

    def content(self) -> str:
        return self._sections.get(CONTENT_SECTION, "")

    def committed(self) -> dict[str, str]:
        return dict(self._sections)

    def open_sections(self) -> tuple[str, ...]:
        return tuple(capture.name for capture in self._open)

    @property
    def in_buffered_body(self) -> bool:
        """Whether a section tag body is being rendered into its own string."""
        return self._buffered > 0

    @contextmanager
    def buffered_body(self) -> Iterator[None]:
        """Mark the rendering of a body whose output bypasses the buffer.

        Jinja2 renders `{% section %}` bodies into a string before handing
        them over, so output frames pushed while such a body runs never see
        its text. Function-style captures check this flag and refuse to
        start or stop inside the body.
        """
        self._buffered += 1
        try:
            yield
        finally:
            self._buffered -= 1

    def ensure_closed(self) -> None:
        """Raise if any capture is still open.

        Raises:
            UnclosedSectionError: Naming the open sections, outermost first.
        """
        names = self.open_sections()
        if names:
            listed = ", ".join(f'"{name}"' for name in names)
            msg = f"Template finished with unclosed sections: {listed}."
            raise UnclosedSectionError(msg, names=names)

    def abandon_open(self) -> None:
        """Drop open captures, restoring any text they set aside."""
        while self._open:
            capture = self._open.pop()
            if capture.previous is not None:
                self._sections[capture.name] = capture.previous

    def adopt(self, sections: Mapping[str, str], content: str) -> None:
        """Take over a child view's sections and rendered body.

        Used by the render pipeline when a child hands its output to this
        stack's view as its layout. This is the only way the reserved
        "content" section gets written.
        """
        for name, text in sections.items():
            _ = self._sections.pop(name, None)
            self._sections[name] = text
        _ = self._sections.pop(CONTENT_SECTION, None)
        self._sections[CONTENT_SECTION] = content

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def __len__(self) -> int:
        return len(self._sections)
