import pytest

from cve2osv.core.domain.exceptions import RepoURLError
from cve2osv.core.domain.repo_url import commit_from_url, repo_from_url


@pytest.mark.parametrize("url,expected", [
    ("https://github.com/openssl/openssl", "https://github.com/openssl/openssl"),
    ("https://github.com/openssl/openssl.git", "https://github.com/openssl/openssl"),
    ("https://www.github.com/curl/curl/issues/1234", "https://github.com/curl/curl"),
    ("http://github.com/madler/zlib/releases/tag/v1.2.12", "https://github.com/madler/zlib"),
    ("https://gitlab.com/gnutls/gnutls/-/commit/abcdef1234", "https://gitlab.com/gnutls/gnutls"),
    ("https://bitbucket.org/owner/project/src/master/", "https://bitbucket.org/owner/project"),
    (
        "https://git.kernel.org/pub/scm/linux/kernel/git/torvalds/linux.git/commit/?id=0123456789abcdef",
        "https://git.kernel.org/pub/scm/linux/kernel/git/torvalds/linux.git",
    ),
    (
        "https://sourceware.org/git/?p=glibc.git;a=commit;h=0123456789abcdef",
        "https://sourceware.org/git/glibc.git",
    ),
    ("https://git.example.org/project/commit/0123456789abcdef", "https://git.example.org/project"),
    ("git://git.example.org/project.git", "git://git.example.org/project.git"),
])
def test_repo_from_url(url, expected):
    assert repo_from_url(url) == expected


@pytest.mark.parametrize("url", [
    "https://github.com/advisories/GHSA-xxxx-xxxx-xxxx",
    "https://github.com/openssl",
    "https://www.openssl.org/news/secadv/20220315.txt",
    "ftp://example.org/pub/project.git",
    "not a url",
])
def test_repo_from_url_rejects_non_repositories(url):
    with pytest.raises(RepoURLError):
        repo_from_url(url)


def test_commit_from_url_github():
    assert commit_from_url("https://github.com/curl/curl/commit/ABCDEF1234567") == (
        "https://github.com/curl/curl",
        "abcdef1234567",
    )


def test_commit_from_url_cgit():
    url = "https://git.example.org/project.git/commit/?id=0123456789abcdef"
    assert commit_from_url(url) == ("https://git.example.org/project.git", "0123456789abcdef")


def test_commit_from_url_returns_none_for_non_commit():
    assert commit_from_url("https://github.com/curl/curl/issues/1") is None
    assert commit_from_url("https://example.org/advisory") is None
