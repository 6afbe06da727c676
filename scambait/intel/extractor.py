import re
from typing import Dict, Iterable, Mapping, Set

# Category keys, in the order they appear in the final report
PHONE_NUMBERS = "phoneNumbers"
BANK_ACCOUNTS = "bankAccounts"
UPI_IDS = "upiIds"
PHISHING_LINKS = "phishingLinks"
EMAIL_ADDRESSES = "emailAddresses"
OTHER_IDS = "otherIds"

CATEGORIES = (PHONE_NUMBERS, BANK_ACCOUNTS, UPI_IDS, PHISHING_LINKS, EMAIL_ADDRESSES, OTHER_IDS)

# ---------------------------
# Patterns
# ---------------------------

# Optional 1-3 digit country code, then a 10 digit number with space/dot/hyphen
# separators and optional parentheses around the area code.
PHONE_RE = re.compile(
    r'\b(?:\+?\d{1,3}[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}\b'
)

# 9-18 digit run, or a branch-code style token (4 letters, 7 digits, 1 letter, 6 digits)
BANK_RE = re.compile(
    r'\b(?:\d{9,18}|[A-Z]{4}\d{7}[A-Z]\d{6})\b'
)

# Looser than an email on purpose: payment handles have no TLD (name@upi, x@okaxis)
UPI_RE = re.compile(
    r'\b[a-zA-Z0-9.\-_]+@[a-zA-Z0-9.\-_]+\b'
)

URL_RE = re.compile(
    r'https?://(?:www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b'
    r'(?:[-a-zA-Z0-9()@:%_+.~#?&/=]*)'
)

EMAIL_RE = re.compile(
    r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b'
)

# "ID: 12345", "Ref#ABC123", "code : X9Y8"; only the token is kept
OTHER_ID_RE = re.compile(
    r'\b(?:ID|Ref|Code|No)\s*[:#]\s*([a-zA-Z0-9]{4,15})\b', re.I
)


def _only_digits(s: str) -> str:
    return re.sub(r'\D+', '', s or '')


def empty_intelligence() -> Dict[str, Set[str]]:
    return {k: set() for k in CATEGORIES}


def extract_intelligence(text: str) -> Dict[str, Set[str]]:
    """
    Run every category scan over the same text. All six keys are always
    present; a category with no match maps to an empty set. The same
    substring may land in more than one category.
    """
    t = text or ""
    out = empty_intelligence()

    out[PHONE_NUMBERS].update(_only_digits(m.group(0)) for m in PHONE_RE.finditer(t))
    out[BANK_ACCOUNTS].update(m.group(0) for m in BANK_RE.finditer(t))
    out[UPI_IDS].update(m.group(0) for m in UPI_RE.finditer(t))
    out[PHISHING_LINKS].update(m.group(0) for m in URL_RE.finditer(t))
    out[EMAIL_ADDRESSES].update(m.group(0) for m in EMAIL_RE.finditer(t))
    out[OTHER_IDS].update(m.group(1) for m in OTHER_ID_RE.finditer(t))

    return out


def merge_intelligence(target: Dict[str, Set[str]], incoming: Mapping[str, Iterable[str]]) -> Dict[str, Set[str]]:
    """Union `incoming` into the cumulative `target` in place. Values are never removed."""
    for key in CATEGORIES:
        values = incoming.get(key)
        if not values:
            continue
        target.setdefault(key, set()).update(values)
    return target


def populated_categories(intel: Mapping[str, Iterable[str]]):
    return [k for k in CATEGORIES if intel.get(k)]
