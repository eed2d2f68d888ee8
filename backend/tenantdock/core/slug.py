"""
Subdomain slugs and the schema names derived from them.
"""
import re
import unicodedata

SCHEMA_PREFIX = "tenant_"
SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")
SCHEMA_NAME_PATTERN = re.compile(r"^tenant_[a-z0-9-]+$")


def slugify(value: str) -> str:
    """Normalize free text into a URL-safe slug.

    "Acme Corp" and "acme-corp" both become "acme-corp"; accents are folded
    to ASCII, "_" is treated as a separator and "@" is spelled out.
    """
    value = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    value = value.lower().replace("_", "-").replace("@", "-at-")
    value = re.sub(r"[^a-z0-9\s-]", "", value)
    value = re.sub(r"[\s-]+", "-", value)
    return value.strip("-")


def schema_name_for(slug: str) -> str:
    """Derive the physical schema name for a slug."""
    if not SLUG_PATTERN.match(slug):
        raise ValueError(f"Invalid slug: {slug!r}")
    return f"{SCHEMA_PREFIX}{slug}"
