"""Commit web links derived from a git remote URL."""

from __future__ import annotations

import re

_SUFFIX = r"(?:\.git)?/?$"

GITHUB_RES = (
    re.compile(r"^git@github\.com[:/](.+?)" + _SUFFIX),
    re.compile(r"^(?:https?|ssh)://(?:[^@/]+@)?github\.com/(.+?)" + _SUFFIX),
)
GITLAB_RES = (
    re.compile(r"^git@gitlab\.com[:/](.+?)" + _SUFFIX),
    re.compile(r"^(?:https?|ssh)://(?:[^@/]+@)?gitlab\.com/(.+?)" + _SUFFIX),
)
BITBUCKET_RES = (
    re.compile(r"^git@bitbucket\.org[:/](.+?)" + _SUFFIX),
    re.compile(r"^(?:https?|ssh)://(?:[^@/]+@)?bitbucket\.org/(.+?)" + _SUFFIX),
)
AZURE_RES = (
    re.compile(r"^https?://(?:[^@/]+@)?dev\.azure\.com/([^/]+)/([^/]+)/_git/(.+?)" + _SUFFIX),
    re.compile(r"^git@ssh\.dev\.azure\.com:v3/([^/]+)/([^/]+)/(.+?)" + _SUFFIX),
)
SELF_HOSTED_RES = (
    re.compile(r"^git@([^:/]+)[:/](.+?)" + _SUFFIX),
    re.compile(r"^(?:https?|ssh)://(?:[^@/]+@)?([^/:]+)(?::\d+)?/(.+?)" + _SUFFIX),
)


def _first_match(patterns: tuple[re.Pattern[str], ...], remote_url: str) -> re.Match[str] | None:
    for pattern in patterns:
        match = pattern.match(remote_url)
        if match:
            return match
    return None


def commit_url(remote_url: str | None, commit_id: str) -> str | None:
    """Build a browser URL for ``commit_id`` on the host behind ``remote_url``.

    Supports GitHub, GitLab, Bitbucket, and Azure DevOps in SSH and HTTPS
    form. Self-hosted remotes get a GitLab-style link only when the host name
    contains ``gitlab``; any other host returns ``None``.
    """
    if not remote_url or not commit_id:
        return None
    remote_url = remote_url.strip()

    if match := _first_match(GITHUB_RES, remote_url):
        return f"https://github.com/{match.group(1)}/commit/{commit_id}"
    if match := _first_match(GITLAB_RES, remote_url):
        return f"https://gitlab.com/{match.group(1)}/-/commit/{commit_id}"
    if match := _first_match(BITBUCKET_RES, remote_url):
        return f"https://bitbucket.org/{match.group(1)}/commits/{commit_id}"
    if match := _first_match(AZURE_RES, remote_url):
        org, project, repo = match.groups()
        return f"https://dev.azure.com/{org}/{project}/_git/{repo}/commit/{commit_id}"

    match = _first_match(SELF_HOSTED_RES, remote_url)
    if match and "gitlab" in match.group(1).lower():
        return f"https://{match.group(1)}/{match.group(2)}/-/commit/{commit_id}"
    return None
