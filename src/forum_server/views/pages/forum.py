from htpy import Node, a, div, h2, p, span, table, tbody, td, th, thead, tr
from markupsafe import Markup

from forum_server.schemas.forums import ForumItem, PageInfo, ThreadListItem
from forum_server.views.components.pagination import render_pagination
from forum_server.views.components.time import render_time
from forum_server.views.layout import render_page


def render_forum(
    *,
    forum: ForumItem,
    threads: list[ThreadListItem],
    total: int,
    pagination: PageInfo,
) -> Node:
    content = div(class_="forum-page")[
        div(class_="forum-header")[
            h2[Markup(forum.name)],
            p(class_="forum-description")[Markup(forum.description)] if forum.description else None,
            p[span[str(total)], " threads"],
            a(href=f"/f/{forum.id}/new", class_="new-thread-link")["New thread"],
        ],
        table(class_="threads-table")[
            thead[
                tr[
                    th["Title"],
                    th["Author"],
                    th["Replies"],
                    th["Created"],
                ]
            ],
            tbody[
                [
                    tr[
                        td[a(href=f"/thread/{thread.id}")[Markup(thread.title)]],
                        td[Markup(thread.author) if thread.author else "Anonymous"],
                        td[str(thread.reply_count)],
                        td[render_time(thread.created_at)],
                    ]
                    for thread in threads
                ]
            ],
        ],
        render_pagination(base_url=f"/f/{forum.id}", pagination=pagination),
    ]

    return render_page(title_text=Markup(forum.name).striptags(), content=content)
