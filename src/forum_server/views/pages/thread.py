from htpy import Node, a, div, form, h2, input as input_, label, textarea
from markupsafe import Markup

from forum_server.schemas.forums import PageInfo, ReplyItem, ThreadItem
from forum_server.views.components.pagination import render_pagination
from forum_server.views.components.post_card import post_card, render_body
from forum_server.views.layout import render_page


def _delete_button(action: str) -> Node:
    return form(action=action, method="post", class_="delete-form")[input_(type="submit", value="Delete")]


def render_thread(
    *,
    forum_id: int,
    thread: ThreadItem,
    replies: list[ReplyItem],
    pagination: PageInfo,
) -> Node:
    opening = post_card(
        dom_id=f"thread-{thread.id}",
        author=thread.author,
        created_at=thread.created_at,
        body_children=[render_body(thread.content or "")],
        actions=_delete_button(f"/thread/{thread.id}/delete"),
        extra_class="opening-post",
    )
    reply_cards = [
        post_card(
            dom_id=f"reply-{reply.id}",
            author=reply.author,
            created_at=reply.created_at,
            body_children=[render_body(reply.content)],
            actions=_delete_button(f"/thread/{thread.id}/replies/{reply.id}/delete"),
        )
        for reply in replies
    ]

    content = div(class_="thread-page")[
        a(href=f"/f/{forum_id}", class_="back-link")["← Back to forum"],
        h2[Markup(thread.title)],
        opening,
        div(class_="replies")[*reply_cards],
        render_pagination(base_url=f"/thread/{thread.id}", pagination=pagination),
        form(action=f"/thread/{thread.id}/replies", method="post", class_="reply-form")[
            label["Author"],
            input_(type="text", name="author"),
            label["Reply"],
            textarea(name="content", rows="8", required=True),
            input_(type="submit", value="Reply"),
        ],
    ]

    return render_page(title_text=Markup(thread.title).striptags(), content=content)
