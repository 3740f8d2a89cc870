from htpy import Node, a, div, h2, table, tbody, td, th, thead, tr
from markupsafe import Markup

from forum_server.schemas.forums import RecentActivityItem
from forum_server.views.components.time import render_time
from forum_server.views.layout import render_page


def render_new_posts(*, posts: list[RecentActivityItem]) -> Node:
    content = div(class_="new-posts-page")[
        h2["Recent activity"],
        table(class_="threads-table")[
            thead[
                tr[
                    th["Thread"],
                    th["Forum"],
                    th["Author"],
                    th["Replies"],
                    th["Last reply"],
                    th["Created"],
                ]
            ],
            tbody[
                [
                    tr[
                        td[a(href=f"/thread/{post.id}")[Markup(post.title)]],
                        td[a(href=f"/f/{post.forum_id}")[Markup(post.forum_name)]],
                        td[Markup(post.author) if post.author else "Anonymous"],
                        td[str(post.reply_count)],
                        td[render_time(post.last_reply_at)],
                        td[render_time(post.created_at)],
                    ]
                    for post in posts
                ]
            ],
        ],
    ]
    return render_page(title_text="New posts", content=content)
