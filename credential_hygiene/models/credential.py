"""Data model for decrypted credential entries handed over by the vault store."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

from verboselogs import VerboseLogger

from credential_hygiene.analysis.entropy import estimate_entropy_bits

LOGIN_ITEM_TYPE = "key"


class InvalidCredentialError(ValueError):
    """Raised when a store record cannot be turned into a CredentialEntry."""


def _optional_text(field_name: str, value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidCredentialError(
            f"{field_name} must be a string, got {type(value).__name__}"
        )
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class CredentialEntry:
    """Class defining one decrypted login item from the vault.

    Entries are rebuilt from the store's snapshot on every run and never
    mutated.

    Attributes
    ----------
    id : str
        Opaque store identifier, used when deleting the item.
    name : str
        Display name of the item.
    username : str, optional
        Login name or e-mail.
    password : str, optional
        Plaintext password.
    url : str, optional
        Site URL the login belongs to.

    """

    id: str
    name: str = ""
    username: Optional[str] = None
    password: Optional[str] = None
    url: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise InvalidCredentialError(f"invalid credential id: {self.id!r}")
        if self.name is None:
            object.__setattr__(self, "name", "")
        elif not isinstance(self.name, str):
            raise InvalidCredentialError(
                f"name must be a string, got {type(self.name).__name__}"
            )
        object.__setattr__(self, "username", _optional_text("username", self.username))
        # Passwords keep surrounding whitespace, only blanks collapse to None.
        if self.password is not None and not isinstance(self.password, str):
            raise InvalidCredentialError(
                f"password must be a string, got {type(self.password).__name__}"
            )
        if self.password is not None and not self.password.strip():
            object.__setattr__(self, "password", None)
        object.__setattr__(self, "url", _optional_text("url", self.url))

    @property
    def has_username(self) -> bool:
        return self.username is not None

    @property
    def has_password(self) -> bool:
        return self.password is not None

    @property
    def has_url(self) -> bool:
        return self.url is not None

    @property
    def is_incomplete(self) -> bool:
        """Neither a username nor a password is stored."""
        return not (self.has_username or self.has_password)

    @property
    def completeness(self) -> int:
        """Completeness score 0-2: one point each for username and password."""
        return int(self.has_username) + int(self.has_password)

    @property
    def entropy(self) -> int:
        """Estimated password entropy in bits (0 without a password)."""
        return estimate_entropy_bits(self.password or "")

    @classmethod
    def from_content(cls, id: str, name: str, content: str) -> "CredentialEntry":
        """Build an entry from a vault item body (``Username:``/``Password:``/``URL:`` lines)."""
        username, password, url = parse_login_content(content)
        return cls(id=id, name=name, username=username, password=password, url=url)


def login_identity(entry: CredentialEntry) -> str:
    """Key identifying "the same account" within one service.

    The username (case-insensitive) when present, otherwise the password,
    otherwise an empty string.
    """
    if entry.username:
        return entry.username.lower()
    if entry.password:
        return entry.password
    return ""


def parse_login_content(content: str) -> tuple[str, str, str]:
    """Extract username, password and URL from a login item body.

    Parameters
    ----------
    content : str
        The decrypted item content, one ``Label: value`` pair per line.

    Returns
    -------
    tuple[str, str, str]
        ``(username, password, url)``, empty strings for missing lines.

    """
    username = password = url = ""
    for raw_line in (content or "").splitlines():
        line = raw_line.strip()
        if line.startswith("Username:"):
            username = line[len("Username:"):].strip()
        elif line.startswith("Password:"):
            password = line[len("Password:"):].strip()
        elif line.startswith("URL:"):
            url = line[len("URL:"):].strip()
    return username, password, url


def _entry_from_record(record: Any) -> Optional[CredentialEntry]:
    if isinstance(record, CredentialEntry):
        return record
    if not isinstance(record, Mapping):
        raise InvalidCredentialError(f"unsupported record type {type(record).__name__}")

    if record.get("deleted_at"):
        return None
    item_type = record.get("type", record.get("item_type"))
    if item_type is not None and item_type != LOGIN_ITEM_TYPE:
        return None

    record_id = record.get("id")
    if record_id is not None and not isinstance(record_id, str):
        record_id = str(record_id)
    name = record.get("name") or ""

    if "content" in record and record["content"] is not None:
        content = record["content"]
        if isinstance(content, (bytes, bytearray)):
            content = bytes(content).decode("utf-8", errors="replace")
        if not isinstance(content, str):
            raise InvalidCredentialError("content must be text")
        return CredentialEntry.from_content(record_id, name, content)

    return CredentialEntry(
        id=record_id,
        name=name,
        username=record.get("username"),
        password=record.get("password"),
        url=record.get("url"),
    )


def coerce_entries(
    records: Iterable[Any], logger: Optional[VerboseLogger] = None
) -> List[CredentialEntry]:
    """Turn store records into CredentialEntry values, skipping what cannot be used.

    Soft-deleted items and items that are not logins are skipped silently;
    malformed records are logged and skipped so one bad record never aborts
    the rest.
    """
    logger = logger or VerboseLogger(__name__)
    entries: List[CredentialEntry] = []
    for index, record in enumerate(records):
        try:
            entry = _entry_from_record(record)
        except (InvalidCredentialError, UnicodeDecodeError) as err:
            logger.warning(f"Skipping malformed credential record #{index}: {err}")
            continue
        if entry is None:
            logger.spam(f"Skipping non-login or deleted record #{index}")
            continue
        entries.append(entry)
    return entries
