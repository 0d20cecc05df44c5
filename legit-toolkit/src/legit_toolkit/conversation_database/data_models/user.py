"""
User data model.

The user record only carries the identifier issued by the authentication
provider. Its presence gates every conversation operation; see
'legit_toolkit.auth.base.AuthProvider'.
"""

from pydantic import BaseModel


class User(BaseModel):
    """A signed-in user, identified solely by their ID."""

    id: str
    display_name: str | None = None
