"""Git hook installation."""

from muxhooks.git.manager import GitHookInfo, GitHookManager, GitHookType, find_git_root

__all__ = ["GitHookInfo", "GitHookManager", "GitHookType", "find_git_root"]
