"""
Domain Whitelist

Set of email domains allowed to accept a public invitation. Stored as a
comma-separated string; parsed here and serialized back only when the
record is written.
"""

from typing import FrozenSet, Iterable, Optional, Union


class DomainWhitelist:
    """Immutable set of lower-cased email domains"""

    __slots__ = ("_domains",)

    def __init__(self, domains: Iterable[str] = ()):
        normalized = set()
        for domain in domains:
            domain = domain.strip().lower().lstrip("@").rstrip(".")
            if domain:
                normalized.add(domain)
        self._domains: FrozenSet[str] = frozenset(normalized)

    @classmethod
    def parse(cls, value: Union[str, Iterable[str], None]) -> "DomainWhitelist":
        if value is None:
            return cls()
        if isinstance(value, str):
            return cls(value.split(","))
        return cls(value)

    def serialize(self) -> Optional[str]:
        """Comma-separated storage form, None when unrestricted"""
        if not self._domains:
            return None
        return ",".join(sorted(self._domains))

    @property
    def domains(self) -> FrozenSet[str]:
        return self._domains

    def is_restricted(self) -> bool:
        return bool(self._domains)

    def allows(self, email: str) -> bool:
        """
        Check whether an email may accept under this whitelist.

        An empty whitelist allows everyone. Otherwise the email domain must
        equal an entry or be a subdomain of it.
        """
        if not self._domains:
            return True
        _, sep, domain = email.strip().lower().rpartition("@")
        if not sep or not domain:
            return False
        return any(
            domain == allowed or domain.endswith("." + allowed)
            for allowed in self._domains
        )

    def __contains__(self, domain: str) -> bool:
        return domain.lower() in self._domains

    def __iter__(self):
        return iter(sorted(self._domains))

    def __len__(self) -> int:
        return len(self._domains)

    def __eq__(self, other) -> bool:
        if not isinstance(other, DomainWhitelist):
            return NotImplemented
        return self._domains == other._domains

    def __hash__(self) -> int:
        return hash(self._domains)

    def __repr__(self) -> str:
        return f"DomainWhitelist({sorted(self._domains)!r})"
