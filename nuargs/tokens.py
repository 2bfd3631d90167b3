"""
nuargs token resolver.

Classifies one raw token as an option reference or a positional token,
independently of any schema. The caller decides what the names mean.

Modes
- standard: every dash-prefixed token names exactly one option; all leading
  dashes are stripped ("-a" → ("a",), "--all" → ("all",), "-all" → ("all",)).
- unix-style grouping: "--name" names one long option, while a single dash
  followed by several characters names several single-character options
  ("-xyz" → ("x", "y", "z")).

Tokens that do not start with a dash are positional. Tokens made only of dashes
are positional too, rather than references to an option with an empty name
(which could only fail as unknown): "-" stays usable as the usual stdin/stdout
value, and "--" reaches the command as a plain token.
"""
import functools


@functools.lru_cache(maxsize=1024)
def resolve(token, /, *, unix=False):
    """
    Return the option names referenced by `token`, or None for a positional token.

    Parameters
    - token: str
      one raw argument as received from the process argument vector.
    - unix: bool (keyword-only)
      enable unix-style grouping of single-dash short flags.

    Returns
    - tuple[str, ...]: one name (standard mode, long options) or several
      single-character names (grouped short flags).
    - None: the token is positional.
    """
    if not isinstance(token, str):
        raise TypeError("resolve() argument must be a string")

    if not token.startswith("-") or not token.strip("-"):
        return None

    if not unix:
        return (token.lstrip("-"),)

    if token.startswith("--"):
        return (token[2:],)
    return tuple(token[1:])


__all__ = (
    "resolve",
)
