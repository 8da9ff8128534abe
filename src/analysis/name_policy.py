"""Package name policy data.

The syntax rule, the abuse blocklist, the vendor allow-list and the reserved
device names are compiled once into an immutable ``NamePolicy``. The default
policy lives at module level; configuration may build a replacement at
startup (see ``cli_config.build_name_policy``).
"""

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Pattern, Tuple

# Pattern quoted verbatim in the syntax violation message
NAME_PATTERN_TEXT = "[a-z0-9]([_.-]?[a-z0-9]+)*/[a-z0-9]([_.-]?[a-z0-9]+)*"

# Same language as NAME_PATTERN_TEXT, written without nested optional quantifiers
_NAME_RE = re.compile(r"[a-z0-9]+(?:[_.-][a-z0-9]+)*/[a-z0-9]+(?:[_.-][a-z0-9]+)*", re.IGNORECASE)

DEFAULT_BLOCKED_TERMS: Tuple[str, ...] = (
    r"free.*watch",
    r"watch.*free",
    r"(stream|online).*anschauver.*pelicula",
    r"ver.*completa",
    r"pelicula.*complet",
    r"season.*episode.*online",
    r"film.*(complet|entier)",
    r"(voir|regarder|guarda|assistir).*(film|complet)",
    r"full.*movie",
    r"online.*(free|tv|full.*hd)",
    r"(free|full|gratuit).*stream",
    r"movie.*free",
    r"free.*(movie|hack)",
    r"watch.*movie",
    r"watch.*full",
    r"generate.*resource",
    r"generate.*unlimited",
    r"hack.*coin",
    r"coin.*(hack|generat)",
    r"vbucks",
    r"hack.*cheat",
    r"hack.*generat",
    r"generat.*hack",
    r"hack.*unlimited",
    r"cheat.*(unlimited|generat)",
    r"(mod|cheat|apk).*(hack|cheat|mod)",
    r"hack.*(apk|mod|free|gold|gems|diamonds|coin)",
    r"putlocker",
    r"generat.*free",
    r"coins.*generat",
    r"(download|telecharg).*album",
    r"album.*(download|telecharg)",
    r"album.*(free|gratuit)",
    r"generat.*coins",
    r"unlimited.*coins",
    r"(fortnite|pubg|apex.*legend|t[1i]k.*t[o0]k).*(free|gratuit|generat|unlimited|coins|mobile|hack|follow)",
)

DEFAULT_ALLOWED_VENDOR_PREFIXES: Tuple[str, ...] = (
    "hexmode",
    "calgamo",
    r"liberty_code(_module)?",
    "dvi",
    "thelia",
    "clayfreeman",
    "watchfulli",
    "assaneonline",
    "awema-pl",
    r"magemodules?",
    "simplepleb",
    "modullo",
)

RESERVED_NAMES: Tuple[str, ...] = (
    "nul", "con", "prn", "aux",
    "com1", "com2", "com3", "com4", "com5", "com6", "com7", "com8", "com9",
    "lpt1", "lpt2", "lpt3", "lpt4", "lpt5", "lpt6", "lpt7", "lpt8", "lpt9",
)

_SUGGEST_RE = re.compile(r"(?:([a-z])([A-Z])|([A-Z])([A-Z][a-z]))")
_UPPERCASE_RE = re.compile(r"[A-Z]")


@dataclass(frozen=True)
class NamePolicy:
    """Compiled, immutable name rules."""
    blocklist: Pattern
    allowlist: Optional[Pattern]
    reserved: frozenset

    @classmethod
    def build(
        cls,
        blocked_terms: Iterable[str] = DEFAULT_BLOCKED_TERMS,
        allowed_vendor_prefixes: Iterable[str] = DEFAULT_ALLOWED_VENDOR_PREFIXES,
        blocklist_pattern: Optional[str] = None,
    ) -> "NamePolicy":
        """Compile a policy from regex fragments.

        Args:
            blocked_terms: Alternatives joined into the composite blocklist.
            allowed_vendor_prefixes: Vendor regex fragments exempt from the blocklist.
            blocklist_pattern: Complete blocklist regex, overrides blocked_terms.
        """
        pattern = blocklist_pattern or "(" + "|".join(blocked_terms) + ")"
        prefixes = list(allowed_vendor_prefixes)
        allowlist = re.compile("^(" + "|".join(prefixes) + ")/") if prefixes else None
        return cls(
            blocklist=re.compile(pattern, re.IGNORECASE),
            allowlist=allowlist,
            reserved=frozenset(RESERVED_NAMES),
        )

    def is_valid_syntax(self, name: str) -> bool:
        return _NAME_RE.fullmatch(name) is not None

    def is_blocked(self, name: str) -> bool:
        """Match the blocklist with ``.`` and ``-`` removed from the name."""
        if not self.blocklist.search(name.replace(".", "").replace("-", "")):
            return False
        return not (self.allowlist and self.allowlist.match(name))

    def is_reserved(self, name: str) -> bool:
        vendor, _, package = name.lower().partition("/")
        return vendor in self.reserved or package in self.reserved

    @staticmethod
    def has_invalid_suffix(name: str) -> bool:
        return name.endswith(".json")

    @staticmethod
    def has_uppercase(name: str) -> bool:
        return _UPPERCASE_RE.search(name) is not None

    @staticmethod
    def suggest_name(name: str) -> str:
        """Hyphenate camel-case boundaries and lower-case the result."""
        return _SUGGEST_RE.sub(r"\1\3-\2\4", name).lower()


DEFAULT_NAME_POLICY = NamePolicy.build()
