from datetime import datetime

from htpy import BaseElement, Node, div, span
from markupsafe import Markup

from forum_server.services.sanitize import linkify
from forum_server.views.components.time import render_time


def render_body(content: str) -> Markup:
    """Stored bodies are already sanitized; only links are added here."""
    return Markup(linkify(content))


def post_card(
    *,
    dom_id: str | None,
    author: str | None,
    created_at: datetime,
    body_children: list[Node],
    actions: Node = None,
    extra_class: str | None = None,
) -> BaseElement:
    classes = ["post"]
    if extra_class:
        classes.append(extra_class)

    attrs: dict[str, str] = {"class": " ".join(classes)}
    if dom_id:
        attrs["id"] = dom_id

    return div(attrs)[
        div(class_="post-header")[
            span(class_="post-author")[Markup(author) if author else "Anonymous"],
            span(class_="post-time")[render_time(created_at)],
            actions,
        ],
        div(class_="post-body")[*body_children],
    ]
