from htpy import Node, a, div, form, h2, input as input_, p, span
from markupsafe import Markup

from forum_server.schemas.forums import SearchResultItem
from forum_server.views.components.post_card import render_body
from forum_server.views.components.time import render_time
from forum_server.views.layout import render_page


def _render_result(result: SearchResultItem) -> Node:
    thread = result.thread
    return div(class_="search-result")[
        a(href=f"/thread/{thread.id}")[Markup(thread.title)],
        div(class_="metadata")[
            Markup(thread.author) if thread.author else "Anonymous",
            " | ",
            render_time(thread.created_at),
            span(class_="match-badge")[" (match in thread)"] if result.matches_in_thread else None,
        ],
        div(class_="reply-matches")[
            [
                div(class_="reply-match")[
                    a(href=f"/thread/{thread.id}#reply-{reply.id}")[render_time(reply.created_at)],
                    div(class_="reply-excerpt")[render_body(reply.content)],
                ]
                for reply in result.reply_matches
            ]
        ],
    ]


def render_search(*, query: str, results: list[SearchResultItem]) -> Node:
    content: list[Node] = [
        h2["Search"],
        form(action="/search", method="get", class_="search-page-form")[
            input_(type="search", name="q", value=query),
            input_(type="submit", value="Search"),
        ],
    ]
    if query:
        content.append(p(class_="results-count")[f"Results: {len(results)}"])
        content.extend(_render_result(result) for result in results)

    return render_page(title_text="Search", content=div(class_="search-page")[*content])
