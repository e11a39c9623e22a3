#!/usr/bin/env python3

import os
import tempfile
import unittest
from typing import List, Optional
from unittest import mock

from expecttest import TestCase

from .repo import Repository
from .shell import run_command

__all__ = ["GitTestCase"]


class GitTestCase(TestCase, unittest.IsolatedAsyncioTestCase):
    """Base class for tests that need real repositories.

    Sets up a bare ``origin`` repository, a working clone that the code under
    test operates on (``self.repo``), and a second clone (``upstream_dir``)
    used to push commits that the working clone does not have yet.
    """

    async def asyncSetUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.testing_time = "1112911993"  # Fixed timestamp for git

        self.env = os.environ.copy()
        # Set environment variables for reproducible git behavior
        self.env.setdefault("GIT_TERMINAL_PROMPT", "0")
        self.env.setdefault("EDITOR", ":")
        self.env.setdefault("GIT_MERGE_AUTOEDIT", "no")
        self.env.setdefault("LANG", "C")
        self.env.setdefault("LC_ALL", "C")
        self.env.setdefault("PAGER", "cat")
        self.env.setdefault("TZ", "UTC")
        self.env.setdefault("TERM", "dumb")
        # Keep the user's global and system git config out of the tests
        self.env["GIT_CONFIG_GLOBAL"] = os.path.join(self.temp_dir.name, "gitconfig")
        self.env["GIT_CONFIG_NOSYSTEM"] = "1"
        with open(self.env["GIT_CONFIG_GLOBAL"], "w") as f:
            f.write("[init]\n\tdefaultBranch = main\n")
        # For deterministic commit times
        self.env["GIT_AUTHOR_EMAIL"] = "author@example.com"
        self.env["GIT_AUTHOR_NAME"] = "A U Thor"
        self.env["GIT_COMMITTER_EMAIL"] = "committer@example.com"
        self.env["GIT_COMMITTER_NAME"] = "C O Mitter"
        self.env["GIT_COMMITTER_DATE"] = f"{self.testing_time} -0700"
        self.env["GIT_AUTHOR_DATE"] = f"{self.testing_time} -0700"

        self.env_patcher = mock.patch(
            "commitflow.shell.get_subprocess_env", return_value=self.env
        )
        self.env_patcher.start()

        self.origin_dir = os.path.join(self.temp_dir.name, "origin.git")
        self.work_dir = os.path.join(self.temp_dir.name, "work")
        self.upstream_dir = os.path.join(self.temp_dir.name, "upstream")

        await self.setup_repositories()
        self.repo = Repository(self.work_dir)

    async def asyncTearDown(self):
        self.env_patcher.stop()
        self.temp_dir.cleanup()

    async def setup_repositories(self):
        """Create origin, push an initial commit from the working clone,
        then clone it again as the upstream collaborator.

        Subclasses can override this to start from a different layout.
        """
        try:
            await self.git_run(["init", "--bare", "-b", "main", self.origin_dir])
        except RuntimeError:
            self.fail(
                "git version is too old for tests! Please install a newer version of git."
            )

        await self.git_run(["clone", self.origin_dir, self.work_dir])
        self.write_file(self.work_dir, "README.md", "# Test Repository\n")
        self.write_file(self.work_dir, "notes.txt", "first line\n")
        await self.git_run(["add", "README.md", "notes.txt"], cwd=self.work_dir)
        await self.git_run(["commit", "-m", "Initial commit"], cwd=self.work_dir)
        await self.git_run(["push", "origin", "main"], cwd=self.work_dir)

        await self.git_run(["clone", self.origin_dir, self.upstream_dir])

    async def git_run(
        self, args: List[str], cwd: Optional[str] = None, check: bool = True
    ) -> str:
        """Run git in ``cwd`` (the temp dir by default) and return its stdout."""
        result = await run_command(
            ["git", *args], cwd=cwd or self.temp_dir.name, check=check
        )
        return result.stdout

    def write_file(self, directory: str, name: str, content: str) -> str:
        path = os.path.join(directory, name)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w") as f:  # noqa: ASYNC230
            f.write(content)
        return path

    def read_file(self, directory: str, name: str) -> str:
        with open(os.path.join(directory, name)) as f:  # noqa: ASYNC230
            return f.read()

    async def push_upstream_change(self, name: str, content: str, message: str) -> None:
        """Commit a change in the upstream clone and push it to origin."""
        self.write_file(self.upstream_dir, name, content)
        await self.git_run(["add", name], cwd=self.upstream_dir)
        await self.git_run(["commit", "-m", message], cwd=self.upstream_dir)
        await self.git_run(["push", "origin", "main"], cwd=self.upstream_dir)

    async def work_log(self, ref: str = "HEAD") -> str:
        """One line per commit reachable from ``ref`` in the working clone."""
        return await self.git_run(
            ["log", "--format=%s", ref], cwd=self.work_dir
        )

    async def stash_list(self) -> str:
        return await self.git_run(["stash", "list"], cwd=self.work_dir)
