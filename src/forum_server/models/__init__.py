from forum_server.models.forums import Forum
from forum_server.models.replies import Reply
from forum_server.models.threads import Thread
from forum_server.models.users import User

__all__ = [
    "Forum",
    "Reply",
    "Thread",
    "User",
]
