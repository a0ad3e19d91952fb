import pytest

from credential_hygiene.analysis.domain import DomainNormalizer, base_domain
from credential_hygiene.analysis.suffixes import MULTI_PART_SUFFIXES, build_suffix_table


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://www.login.amazon.co.uk/signin", "amazon.co.uk"),
        ("https://mail.google.com", "google.com"),
        ("shop.amazon.co.uk", "amazon.co.uk"),
        ("amazon.com", "amazon.com"),
        ("www.amazon.com/checkout", "amazon.com"),
        ("http://accounts.example.com.au/login?next=/", "example.com.au"),
        ("HTTPS://WWW.Example.COM:8443/path", "example.com"),
        ("https://user@accounts.google.com/", "google.com"),
        ("example.org?ref=mail", "example.org"),
        ("https://bank.co.nz", "bank.co.nz"),
        ("portal.gov.br", "portal.gov.br"),
        ("localhost", "localhost"),
        ("co.uk", "co.uk"),
    ],
)
def test_base_domain(url, expected):
    assert base_domain(url) == expected


@pytest.mark.parametrize("url", ["", None, "https://", "   "])
def test_empty_inputs_give_empty_identity(url):
    assert base_domain(url) == ""


def test_scheme_and_path_do_not_matter():
    assert base_domain("login.example.co.uk") == base_domain("https://login.example.co.uk/a/b")


@pytest.mark.parametrize(
    "url",
    ["https://www.login.amazon.co.uk/signin", "mail.google.com", "a.b.c.example.com.br", "localhost"],
)
def test_canonical_form_is_stable(url):
    canonical = base_domain(url)
    assert base_domain(canonical) == canonical
    assert base_domain(f"https://{canonical}/") == canonical


def test_prefix_stripping_keeps_two_labels():
    normalizer = DomainNormalizer()
    assert normalizer.strip_prefixes("www.login.example.com") == "example.com"
    assert normalizer.strip_prefixes("login.gov") == "login.gov"
    # the host must not collapse to a bare public suffix
    assert normalizer.strip_prefixes("my.co.uk") == "my.co.uk"


def test_prefixes_are_configurable():
    normalizer = DomainNormalizer(subdomain_prefixes=["portal."])
    assert normalizer.strip_prefixes("portal.shop.example.com") == "shop.example.com"
    assert normalizer.strip_prefixes("www.shop.example.com") == "www.shop.example.com"


def test_suffixes_are_configurable():
    normalizer = DomainNormalizer(multi_part_suffixes=["example.test"])
    assert normalizer.base_domain("a.b.example.test") == "b.example.test"
    # co.uk is no longer known, so the last two labels win
    assert normalizer.base_domain("shop.amazon.co.uk") == "co.uk"


def test_suffix_table_contents():
    assert len(MULTI_PART_SUFFIXES) >= 150
    for suffix in ("co.uk", "com.au", "org.nz", "com.br", "co.jp", "gov.in"):
        assert suffix in MULTI_PART_SUFFIXES
    assert "com" not in MULTI_PART_SUFFIXES


def test_build_suffix_table():
    assert build_suffix_table({"uk": ["co", "org"]}) == frozenset({"co.uk", "org.uk"})
