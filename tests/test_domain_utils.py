from __future__ import annotations

import pytest

from services.domain_utils import extract_apex_domain, normalize_github_url, normalize_linkedin_profile_url


def test_extract_apex_domain():
    assert extract_apex_domain("https://www.github.com/x") == "github.com"
    assert extract_apex_domain("uk.linkedin.com/in/someone") == "linkedin.com"
    assert extract_apex_domain("") is None
    assert extract_apex_domain("localhost") is None


@pytest.mark.parametrize("raw,expected", [
    ("https://www.linkedin.com/in/Jane-Doe/", "https://linkedin.com/in/jane-doe"),
    ("linkedin.com/in/jane-doe/de", "https://linkedin.com/in/jane-doe"),
    ("https://de.linkedin.com/in/J%C3%BCrgen", "https://linkedin.com/in/jürgen"),
    ("https://linkedin.com/in/jane\u200b", "https://linkedin.com/in/jane"),
    ("https://linkedin.com/company/acme", None),
    ("https://example.com/in/jane", None),
    ("   ", None),
    (None, None),
])
def test_normalize_linkedin_profile_url(raw, expected):
    assert normalize_linkedin_profile_url(raw) == expected


@pytest.mark.parametrize("raw,expected", [
    ("https://github.com/octocat", "https://github.com/octocat"),
    ("github.com/octocat/hello-world", "https://github.com/octocat"),
    ("http://www.github.com/octocat/", "https://github.com/octocat"),
    ("https://github.com/", None),
    ("https://gitlab.com/octocat", None),
    ("", None),
])
def test_normalize_github_url(raw, expected):
    assert normalize_github_url(raw) == expected
