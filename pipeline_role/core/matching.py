"""Glob matching of git refs against mapping patterns."""

from fnmatch import fnmatchcase


def matches(pattern, ref):
    """Return True if ``ref`` fully matches the glob ``pattern``.

    ``/`` has no special meaning: ``*`` (and ``**``) match any run of
    characters, ``?`` exactly one, ``[...]`` a character class.
    """
    if not isinstance(pattern, str) or not isinstance(ref, str):
        return False
    return fnmatchcase(ref, pattern)


def matches_any(patterns, ref):
    return any(matches(pattern, ref) for pattern in patterns)
