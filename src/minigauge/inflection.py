"""Word inflection helpers used to name nodes and label edges.

Covers the small subset of English inflection needed to compare relation
names (``member_products``) with type names (``MemberProduct``) and to turn
relation names into readable edge labels.

Examples:
    >>> underscore("memberProducts")
    'member_products'
    >>> camelize(singularize("member_products"))
    'MemberProduct'
    >>> humanize("invoice_item")
    'Invoice item'
"""

import re

UNCOUNTABLE = frozenset({
    "equipment", "information", "rice", "money", "species", "series",
    "fish", "sheep", "jeans", "police", "news", "metadata",
})

IRREGULAR = {
    "people": "person",
    "men": "man",
    "children": "child",
    "sexes": "sex",
    "moves": "move",
    "zombies": "zombie",
}

# Checked in order, first match wins
SINGULAR_RULES = [
    (r"(database)s$", r"\1"),
    (r"(quiz)zes$", r"\1"),
    (r"(matr)ices$", r"\1ix"),
    (r"(vert|ind)ices$", r"\1ex"),
    (r"^(ox)en", r"\1"),
    (r"(alias|status)(es)?$", r"\1"),
    (r"(octop|vir)(us|i)$", r"\1us"),
    (r"^(a)x[ie]s$", r"\1xis"),
    (r"(cris|test)(is|es)$", r"\1is"),
    (r"(shoe)s$", r"\1"),
    (r"(o)es$", r"\1"),
    (r"(bus)(es)?$", r"\1"),
    (r"(m|l)ice$", r"\1ouse"),
    (r"(x|ch|ss|sh)es$", r"\1"),
    (r"(m)ovies$", r"\1ovie"),
    (r"(s)eries$", r"\1eries"),
    (r"([^aeiouy]|qu)ies$", r"\1y"),
    (r"([lr])ves$", r"\1f"),
    (r"(tive)s$", r"\1"),
    (r"(hive)s$", r"\1"),
    (r"([^f])ves$", r"\1fe"),
    (r"(^analy)(sis|ses)$", r"\1sis"),
    (r"((a)naly|(b)a|(d)iagno|(p)arenthe|(p)rogno|(s)ynop|(t)he)(sis|ses)$", r"\1sis"),
    (r"([ti])a$", r"\1um"),
    (r"(n)ews$", r"\1ews"),
    (r"(ss)$", r"\1"),
    (r"s$", ""),
]


def underscore(word: str) -> str:
    """Convert ``CamelCase`` or ``camelCase`` (and spaced words) to ``snake_case``."""
    word = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", word)
    word = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", word)
    word = re.sub(r"[\s\-]+", "_", word.strip())
    return word.lower()


def camelize(word: str) -> str:
    """Convert ``snake_case`` to ``CamelCase``."""
    return "".join(part[:1].upper() + part[1:] for part in re.split(r"[_\s]+", word) if part)


def humanize(word: str) -> str:
    """Make a relation or field name readable: ``invoice_item_id`` -> ``Invoice item``."""
    result = underscore(word)
    if result.endswith("_id"):
        result = result[:-3]
    result = result.replace("_", " ").strip()
    return result[:1].upper() + result[1:]


def titleize(word: str) -> str:
    """Capitalize every word: ``invoice_item`` -> ``Invoice Item``."""
    return " ".join(part.capitalize() for part in humanize(word).split(" "))


def singularize(word: str) -> str:
    """Return the singular form of the last word in ``word``."""
    if not word:
        return word

    last = re.split(r"[_\s]", word.lower())[-1]
    if last in UNCOUNTABLE:
        return word

    for plural, singular in IRREGULAR.items():
        match = re.search(rf"({plural})$", word, flags=re.IGNORECASE)
        if match:
            replacement = singular
            if match.group(1)[:1].isupper():
                replacement = singular.capitalize()
            return word[:match.start()] + replacement

    for pattern, replacement in SINGULAR_RULES:
        if re.search(pattern, word, flags=re.IGNORECASE):
            return re.sub(pattern, replacement, word, count=1, flags=re.IGNORECASE)
    return word
