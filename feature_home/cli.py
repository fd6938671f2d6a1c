#!/usr/bin/env python3
"""
Interactive home feed for ITTPizen.

Usage:
    python main.py

Commands:
    login     - Log in and load the feed
    feed      - Show the posts of the selected tab
    tab       - Select a tab
    like      - Like/unlike a post, then reload the feed
    comments  - Show comments of a post
"""

from __future__ import annotations

import asyncio
import cmd
import json
import logging
import shlex
from typing import Callable, List, Optional

from adapter.ittpizen import NetworkResponse, error_message
from core import IttpizenRepository, Post
from monitoring import monitor

from .screen import HomeNavigation, HomeScreen
from .viewmodel import HomeViewModel

logger = logging.getLogger(__name__)


def _print_failure(response: NetworkResponse) -> None:
    """Print what went wrong with a call."""
    print(f"✗ {type(response).__name__}: {error_message(response)}")
    if response.error is not None:
        print(f"  Code: {response.error.code}")
        if response.error.errors:
            print(f"  Details: {response.error.errors}")
    elif response.cause is not None:
        print(f"  Cause: {response.cause}")


class HomeCLI(cmd.Cmd):
    """Interactive shell over the home screen presenter."""

    intro = """
╔═══════════════════════════════════════════════════════════════╗
║                        ITTPizen                                ║
║  Commands: login, feed, tab, more, like, share, comments,      ║
║            comment, post, refresh, status, logout, quit        ║
╚═══════════════════════════════════════════════════════════════╝
"""
    prompt = "ittpizen> "

    def __init__(self, repository: IttpizenRepository):
        super().__init__()
        self.repository = repository
        self.loop = asyncio.new_event_loop()
        self.screen = HomeScreen(
            HomeViewModel(repository),
            share=self._share,
            navigation=HomeNavigation(
                to_detail_post=lambda post_id: print(f"→ post {post_id} (use: post {post_id})"),
                to_user_profile=lambda user_id: print(f"→ profile of {user_id}"),
                to_photo_detail=lambda url: print(f"→ photo {url}"),
            ),
        )
        self._run(self.screen.mount())

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _run(self, coro):
        return self.loop.run_until_complete(coro)

    def _gesture(self, launch: Callable[[], asyncio.Task]) -> None:
        """Launch a screen gesture inside the loop and wait for it."""
        async def run():
            await launch()
        self._run(run())

    def _share(self, text: str) -> None:
        print("\n--- share ---")
        print(text)
        print("-------------\n")

    @property
    def _token(self) -> str:
        return self.screen.user_preference.access_token

    def _require_login(self) -> bool:
        if not self._token:
            print("✗ Not logged in - use: login <email> <password>")
            return False
        return True

    def _visible_posts(self) -> List[Post]:
        return self.screen.render().posts

    def _pick_post(self, arg: str) -> Optional[Post]:
        posts = self._visible_posts()
        try:
            index = int(arg)
            return posts[index]
        except (ValueError, IndexError):
            print(f"✗ Pick a post number between 0 and {len(posts) - 1}")
            return None

    def _print_post(self, post: Post, index: Optional[int] = None):
        prefix = f"[{index}] " if index is not None else ""
        when = post.created_at.strftime("%d %b %H:%M") if post.created_at else "-"
        text = post.text.replace("\n", " ")[:100]
        if len(post.text) > 100:
            text += "..."
        heart = "♥" if post.liked else "♡"

        print(f"{prefix}[{when}] {post.user.name or post.user.id}  #{post.type.value}")
        print(f"   {text}")
        print(f"   {heart} {post.like_count}  💬 {post.comment_count}  ID: {post.id}")
        print()

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def do_login(self, arg):
        """
        Log in and load the feed.

        Usage: login <email> <password>
        """
        parts = shlex.split(arg)
        if len(parts) != 2:
            print("Usage: login <email> <password>")
            return

        response = self._run(self.repository.login(parts[0], parts[1]))
        if not response.is_success:
            _print_failure(response)
            return

        print(f"✓ Logged in as {self.screen.user_preference.name or self.screen.user_preference.user_id}")
        self._run(self.screen.wait_idle())
        self.do_feed("")

    def do_logout(self, arg):
        """Clear the stored session."""
        self.repository.logout()
        print("✓ Logged out")

    def do_feed(self, arg):
        """Show the posts of the selected tab."""
        model = self.screen.render()
        tabs = "  ".join(
            f"[{title}]" if i == model.selected_tab_index else title
            for i, title in enumerate(model.tabs)
        )
        print(f"\n{tabs}")
        print("-" * 60)
        if model.showing_placeholder:
            print("(placeholder posts - log in to load the live feed)\n")

        if not model.posts:
            print("No posts in this tab.")
        for i, post in enumerate(model.posts):
            self._print_post(post, i)

        if model.message:
            print(f"⚠ {self.screen.view_model.consume_message()}")
        if not model.showing_placeholder and not model.end_reached:
            print("More posts available - use 'more'")

    def do_tab(self, arg):
        """
        Select a tab by number.

        Usage: tab <0-5>
        """
        try:
            self.screen.on_tab_selected(int(arg))
        except ValueError:
            print(f"Usage: tab <0-{len(self.screen.tabs) - 1}>")
            return
        self.do_feed("")

    def do_more(self, arg):
        """Load the next page of the feed."""
        if not self._require_login():
            return
        self._gesture(self.screen.on_load_more)
        self.do_feed("")

    def do_refresh(self, arg):
        """Reload the feed from the first page."""
        if not self._require_login():
            return
        self._gesture(self.screen.on_refresh)
        self.do_feed("")

    def do_like(self, arg):
        """
        Like (or unlike, if already liked) a post of the current tab.

        Usage: like <n>
        """
        if not self._require_login():
            return
        post = self._pick_post(arg)
        if post is None:
            return
        self._gesture(lambda: self.screen.on_like_clicked(post))
        self.do_feed("")

    def do_share(self, arg):
        """
        Share a post of the current tab.

        Usage: share <n>
        """
        post = self._pick_post(arg)
        if post is not None:
            self.screen.on_share_clicked(post)

    def do_post(self, arg):
        """
        Show a single post.

        Usage: post <post_id>
        """
        if not self._require_login() or not arg:
            return
        response = self._run(self.repository.get_post_by_id(self._token, arg.strip()))
        if not response.is_success:
            _print_failure(response)
            return
        self._print_post(response.success)

    def do_comments(self, arg):
        """
        Show comments of a post.

        Usage: comments <post_id>
        """
        if not self._require_login() or not arg:
            return
        response = self._run(self.repository.get_post_comment(self._token, arg.strip()))
        if not response.is_success:
            _print_failure(response)
            return
        if not response.success:
            print("No comments yet.")
        for comment in response.success:
            print(f"  {comment.user.name or comment.user.id}: {comment.comment}")

    def do_comment(self, arg):
        """
        Comment on a post.

        Usage: comment <post_id> <text>
        """
        if not self._require_login():
            return
        parts = arg.split(maxsplit=1)
        if len(parts) != 2:
            print("Usage: comment <post_id> <text>")
            return
        response = self._run(self.screen.view_model.create_post_comment(self._token, parts[0], parts[1]))
        if not response.is_success:
            _print_failure(response)
            return
        print("✓ Comment posted")

    def do_status(self, arg):
        """Show session and API call metrics."""
        preference = self.screen.user_preference
        print("\n=== Session ===")
        print(f"Logged in: {'Yes' if preference.is_logged_in else 'No'}")
        print(f"User: {preference.user_id or '-'}")
        print(f"Backend: {self.repository.adapter.base_url}")
        print("\n=== Metrics ===")
        print(json.dumps(monitor.get_dashboard_data()["metrics"], indent=2))

    def do_quit(self, arg):
        """Exit the CLI."""
        self._run(self.screen.unmount())
        self.loop.close()
        print("Goodbye!")
        return True

    do_exit = do_quit
    do_EOF = do_quit

    def emptyline(self):
        pass


def run(repository: IttpizenRepository) -> None:
    HomeCLI(repository).cmdloop()


__all__ = ["HomeCLI", "run"]
