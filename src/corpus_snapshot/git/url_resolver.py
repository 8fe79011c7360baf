"""Repository URL normalization and name derivation."""

# Segment marking a "<list>/git/<epoch>" style archive url.
_LIST_MARKER = "/git/"


def trim_value(value: str) -> str:
    """Drop CR/LF characters and surrounding whitespace."""
    return value.replace("\r", "").replace("\n", "").strip()


def normalize_url(url: str | None) -> str:
    """Normalize a remote URL for comparison.

    Trims whitespace and removes a single trailing slash. No scheme or
    ``.git`` rewriting is applied, so two urls that differ in either are
    different remotes.
    """
    return trim_value(url or "").removesuffix("/")


def derive_name_from_url(url: str) -> str:
    """Derive a repository name from its URL.

    - https://lore.kernel.org/linux-mm/git/2 -> linux-mm-2
    - https://example.org/repos/project.git/ -> project.git
    - falls back to the whole cleaned url when no path segment is left
    """
    clean = url.split("?", 1)[0]
    clean = clean.split("#", 1)[0]
    clean = clean.removesuffix("/")

    name = ""
    if _LIST_MARKER in clean:
        before_marker = clean.rsplit(_LIST_MARKER, 1)[0]
        list_name = before_marker.rsplit("/", 1)[-1]
        tail = clean.rsplit("/", 1)[-1]
        if list_name and tail:
            name = f"{list_name}-{tail}"

    if not name:
        name = clean.rsplit("/", 1)[-1]

    if not name:
        name = clean

    return name
