from htpy import Node, a, div, span

from forum_server.schemas.forums import PageInfo


def render_pagination(*, base_url: str, pagination: PageInfo) -> Node:
    if pagination.total_pages <= 1 and pagination.page <= 1:
        return None

    page = pagination.page
    return div(class_="pagination")[
        a(
            href=f"{base_url}?page={page - 1}",
            class_="pagination-btn" + (" disabled" if page <= 1 else ""),
        )["← Previous"],
        span(class_="pagination-info")[f"Page {page} of {pagination.total_pages}"],
        a(
            href=f"{base_url}?page={page + 1}",
            class_="pagination-btn" + (" disabled" if page >= pagination.total_pages else ""),
        )["Next →"],
    ]
