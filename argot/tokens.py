r"""
Argot tokens: splitting a raw command line and classifying single tokens.

Splitting
- split(prompt) breaks a command line on unquoted spaces.
  • '...' and "..." group spaces into one token; the quote characters that open
    and close a span are dropped.
  • Inside one kind of quote, the other kind is an ordinary character:
        this "is 'a' test"  → ["this", "is 'a' test"]
        this 'is "a" test'  → ["this", 'is "a" test']
  • Runs of spaces collapse and blank tokens are never produced.
  • An unterminated quote swallows the rest of the input (no error).
  • Only the space character separates tokens; tabs stay inside tokens.

Classification
- is_named(token): the token carries a prefix ('-' or '/').
- extract_name(token): the bare name, i.e. the token without its leading run of
  prefix characters and without anything from the last separator ('=' or ':') on.
        "/--/-/-//arg"  → "arg"
        "/arg-"         → "arg-"
        "/arg/"         → "arg/"
        "--option=42"   → "option"
- extract_value(token): whatever follows the first separator, or None.
        "/option:42"    → "42"
        "-option=a=b"   → "a=b"
        "-option"       → None

All functions are pure and keep no state between calls.
"""
import re

PREFIXES = frozenset("-/")
SEPARATORS = frozenset("=:")


def split(prompt, /):
    """
    Split a command line into tokens honoring single and double quotes.

    Returns a new list on every call.
    """
    if not isinstance(prompt, str):
        raise TypeError("split() argument must be a string")

    tokens = []
    buffer = []
    single = False
    double = False

    for char in prompt:
        if char == "'" and not double:
            single = not single
        elif char == '"' and not single:
            double = not double
        elif char == " " and not (single or double):
            if (token := "".join(buffer)).strip():
                tokens.append(token)
            buffer.clear()
        else:
            buffer.append(char)

    # unterminated quotes land here too
    if (token := "".join(buffer)).strip():
        tokens.append(token)

    return tokens


def is_named(token, /):
    """
    Tell whether a token is written as a named argument (-x, --x, /x).
    """
    return token[:1] in PREFIXES


def extract_name(token, /):
    """
    Return the bare argument name carried by a token.

    The leading prefix run ends at the first character that is neither a prefix
    nor a separator; later '-' and '/' characters belong to the name. The last
    separator in the token bounds the name.
    """
    end = len(token)
    strip = 0
    leading = True

    for index, char in enumerate(token):
        if char in PREFIXES and leading:
            strip += 1
        elif char in SEPARATORS:
            end = index
        else:
            leading = False

    # a separator inside the prefix run leaves nothing to name
    return token[strip:max(end, strip)]


def extract_value(token, /):
    """
    Return the inline value of a token (after the first '=' or ':'), or None.
    """
    if match := re.search(r"[=:]", token):
        return token[match.end():]
    return None


__all__ = (
    "split",
    "is_named",
    "extract_name",
    "extract_value",
)
