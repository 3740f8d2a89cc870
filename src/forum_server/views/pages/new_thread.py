from htpy import Node, div, form, h2, input as input_, label, textarea
from markupsafe import Markup

from forum_server.schemas.forums import ForumItem
from forum_server.views.layout import render_page


def render_new_thread(*, forum: ForumItem) -> Node:
    content = div(class_="new-thread-page")[
        h2["New thread in ", Markup(forum.name)],
        form(action=f"/f/{forum.id}/threads", method="post", class_="thread-form")[
            label["Title"],
            input_(type="text", name="title", required=True),
            label["Author"],
            input_(type="text", name="author"),
            label["Content"],
            textarea(name="content", rows="12", required=True),
            input_(type="submit", value="Post"),
        ],
    ]
    return render_page(title_text="New thread", content=content)
