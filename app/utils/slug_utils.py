import re
import unicodedata


_WHITESPACE = re.compile(r"\s+")
_DISALLOWED = re.compile(r"[^a-z0-9-]")
_REPEATED_HYPHENS = re.compile(r"-{2,}")


def slugify(text: str) -> str:
    """
    Convert arbitrary text into a URL-safe slug.

    Accents are folded to their ASCII base letter, whitespace runs become a single
    hyphen, anything outside ``[a-z0-9-]`` is dropped and hyphens are collapsed and trimmed.

    Args:
        text: Source text

    Returns:
        Slug string, possibly empty
    """
    normalized = unicodedata.normalize("NFKD", str(text))
    ascii_text = normalized.encode("ascii", "ignore").decode("ascii").lower()
    slug = _WHITESPACE.sub("-", ascii_text.strip())
    slug = _DISALLOWED.sub("", slug)
    slug = _REPEATED_HYPHENS.sub("-", slug)
    return slug.strip("-")


def generate_slug(brand: str, name: str, disambiguator: str) -> str:
    """
    Build the slug of a car listing from its brand, name and a disambiguator.

    Examples:
        generate_slug("BMW", "X5", "abc123") -> "bmw-x5-abc123"
        generate_slug("Mercedes-Benz!", "C Class", "000001") -> "mercedes-benz-c-class-000001"

    Args:
        brand: Car brand
        name: Car model name
        disambiguator: Short token that keeps slugs of identical cars apart

    Returns:
        Slug string
    """
    return slugify(f"{brand}-{name}-{disambiguator}")


def id_suffix(object_id, length: int = 6) -> str:
    """
    Return the trailing characters of a document id, used as slug disambiguator.

    Args:
        object_id: ObjectId or its string form
        length: Number of trailing characters to keep

    Returns:
        Lowercase suffix of the id
    """
    return str(object_id)[-length:].lower()
