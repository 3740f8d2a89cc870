from htpy import Node, a, meta, p

from forum_server.views.layout import render_page


def render_reply_redirect(*, thread_id: int) -> Node:
    target = f"/thread/{thread_id}"
    return render_page(
        title_text="Reply posted",
        head_extra=meta(http_equiv="refresh", content=f"0; url={target}"),
        content=p["Reply posted. ", a(href=target)["Back to the thread"]],
    )
