"""
Declarative description of the ITTPizen backend endpoints.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Tuple
from urllib.parse import quote

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


@dataclass(frozen=True)
class Endpoint:
    """One backend operation: verb, path template and how it is called."""
    name: str
    method: str
    path: str
    auth: bool = True
    form: bool = False

    @property
    def placeholders(self) -> Tuple[str, ...]:
        return tuple(_PLACEHOLDER.findall(self.path))

    def build_path(self, **params: str) -> str:
        """
        Substitute path placeholders.

        Raises:
            ValueError: If a placeholder has no value
        """
        def _sub(match: re.Match) -> str:
            key = match.group(1)
            if params.get(key) in (None, ""):
                raise ValueError(f"Missing path parameter '{key}' for {self.name}")
            return quote(str(params[key]), safe="")

        return _PLACEHOLDER.sub(_sub, self.path)


ENDPOINTS: Dict[str, Endpoint] = {
    e.name: e for e in (
        Endpoint("login", "POST", "user/login", auth=False),
        Endpoint("register", "POST", "user/register", auth=False),
        Endpoint("get_all_post", "GET", "post"),
        Endpoint("get_post_by_user", "GET", "post/user/{userId}"),
        Endpoint("get_post_by_id", "GET", "post/{postId}"),
        Endpoint("get_post_comment", "GET", "post/comment/{postId}"),
        Endpoint("create_post_comment", "POST", "post/comment/{postId}", form=True),
        Endpoint("create_post_like", "POST", "post/like/{postId}"),
        Endpoint("delete_post_like", "DELETE", "post/like/{postId}"),
    )
}


__all__ = ["Endpoint", "ENDPOINTS"]
