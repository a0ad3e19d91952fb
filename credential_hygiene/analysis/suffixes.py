"""Multi-part public suffixes used to find the registrable part of a host.

Covers the common country-code second-level conventions (``co.uk``,
``com.au``, ...). This is heuristic tuning data, not the full Public Suffix
List: hosts under an unlisted suffix fall back to their last two labels.
"""
from typing import Dict, FrozenSet, Iterable, Tuple

# ccTLD -> second-level labels registered under it.
_SECOND_LEVEL_BY_CCTLD: Dict[str, Tuple[str, ...]] = {
    "uk": ("co", "ac", "org", "me", "ltd", "plc", "net", "sch", "gov", "nhs"),
    "za": ("co", "org", "web", "net"),
    "jp": ("co", "ac", "or", "go"),
    "in": ("co", "org", "net", "gov"),
    "nz": ("co", "org", "net", "gov"),
    "au": ("co", "com", "org", "net", "edu", "gov"),
}

# Anglophone ccTLDs in Africa and the Pacific following the co/org/net/gov pattern.
_CO_ORG_NET_GOV = (
    "ke", "ug", "tz", "zw", "bw", "mw", "zm", "na", "sz", "ls", "bz", "ck",
    "fj", "ki", "nr", "nu", "pg", "pw", "sb", "to", "tv", "vu", "ws",
)

# ccTLDs in Asia and the Americas following the com/net/org/edu/gov pattern.
_COM_NET_ORG_EDU_GOV = (
    "br", "cn", "hk", "my", "ph", "sg", "th", "tw", "vn", "mx", "ar", "cl",
    "pe", "uy", "ve", "ec", "bo", "py", "gt", "hn", "ni", "sv", "cr", "pa",
    "do", "pr", "jm", "tt", "bb", "gd", "lc", "vc", "ag", "kn", "dm",
)


def build_suffix_table(
    by_cctld: Dict[str, Iterable[str]],
) -> FrozenSet[str]:
    """Flatten a ``ccTLD -> second-level labels`` mapping into dotted suffixes."""
    return frozenset(
        f"{label}.{cctld}"
        for cctld, labels in by_cctld.items()
        for label in labels
    )


def _default_mapping() -> Dict[str, Tuple[str, ...]]:
    mapping = dict(_SECOND_LEVEL_BY_CCTLD)
    for cctld in _CO_ORG_NET_GOV:
        mapping[cctld] = ("co", "org", "net", "gov")
    for cctld in _COM_NET_ORG_EDU_GOV:
        mapping[cctld] = ("com", "net", "org", "edu", "gov")
    return mapping


MULTI_PART_SUFFIXES: FrozenSet[str] = build_suffix_table(_default_mapping())
