from htpy import Node, a, body, footer, form, h1, head, header, html, input as input_, main, meta, nav, style, title

SITE_NAME = "Forum"

_BASE_CSS = "pre.responsive { white-space: pre-wrap } .pagination-btn.disabled { pointer-events: none; opacity: .5 }"


def render_page(*, title_text: str, content: Node, head_extra: Node = None) -> Node:
    return html(lang="en")[
        head[
            meta(charset="utf-8"),
            title[f"{title_text} - {SITE_NAME}"],
            meta(name="viewport", content="width=device-width, initial-scale=1"),
            meta(name="color-scheme", content="light dark"),
            style[_BASE_CSS],
            head_extra,
        ],
        body[
            header(class_="site-header")[
                h1[a(href="/")[SITE_NAME]],
                nav(class_="site-nav")[
                    a(href="/")["Forums"],
                    a(href="/new-posts")["New posts"],
                    form(action="/search", method="get", class_="search-form")[
                        input_(type="search", name="q", placeholder="Search"),
                    ],
                ],
            ],
            main(class_="main-content")[content],
            footer(class_="site-footer"),
        ],
    ]
