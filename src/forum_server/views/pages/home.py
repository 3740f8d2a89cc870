from htpy import Node, a, div, h2, p
from markupsafe import Markup

from forum_server.schemas.forums import ForumItem
from forum_server.views.layout import render_page


def render_home(*, forums: list[ForumItem]) -> Node:
    items: list[Node] = [
        a(href=f"/f/{forum.id}")[
            div(class_="forum-row")[
                div(class_="forum-name")[Markup(forum.name)],
                p(class_="forum-description")[Markup(forum.description)] if forum.description else None,
            ]
        ]
        for forum in forums
    ]
    if not items:
        items.append(p(class_="empty")["No forums yet."])

    return render_page(title_text="Forums", content=div(class_="forums-page")[h2["Forums"], *items])
