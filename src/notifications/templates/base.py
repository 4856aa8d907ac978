"""Rendered output shared by every template."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RenderedMessage:
    subject: str
    content: str
