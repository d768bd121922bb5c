"""
Argument normalisation
Lets ``--flatten`` be given with or without a colour
"""

from typing import List, Sequence

FLATTEN_FLAG = "--flatten"

# Value handed to the option parser when --flatten carries no colour
FLATTEN_DEFAULT_MARKER = ""


def normalize_args(args: Sequence[str]) -> List[str]:
    """Insert an empty value after a bare ``--flatten``.

    ``--flatten`` is bare when it is the last token or the next token starts
    with ``-``. Any other following token is taken as the colour.
    """
    normalized: List[str] = []
    tokens = list(args)
    for index, token in enumerate(tokens):
        normalized.append(token)
        if token != FLATTEN_FLAG:
            continue
        following = tokens[index + 1] if index + 1 < len(tokens) else None
        if following is None or following.startswith("-"):
            normalized.append(FLATTEN_DEFAULT_MARKER)
    return normalized
