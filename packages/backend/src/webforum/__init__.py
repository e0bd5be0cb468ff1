"""WebForum — discussion forum backend.

Accounts sign up and log in, open threads, comment on them, and
categorize and tag content. JWT session tokens gate every mutating
route; deleting an account removes everything it owns in one
transaction.
"""

__version__ = "0.1.0"
