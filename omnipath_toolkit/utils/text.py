"""Text helpers for log and error messages."""

from typing import Iterable, List, Optional, Sized


def plural(objects: Sized, word: str, irregular: Optional[str] = None) -> str:
    """
    Plural form of a word depending on the count of the objects.

    Args:
        objects: The objects to count
        word: The name of the objects
        irregular: Irregular plural form (anything else than adding an "s")
    """
    if len(objects) > 1:
        return irregular or f"{word}s"

    return word


def pretty_list(words: Iterable[str], quotes: bool = True) -> str:
    """
    Pretty print a list of words: sorted, separated by commas, the last
    two joined by "and".

    Args:
        words: The words
        quotes: Wrap all words in backticks
    """
    words = sorted(words)

    if quotes:
        words = [f"`{w}`" for w in words]

    if len(words) < 2:
        return "".join(words)

    return f"{', '.join(words[:-1])} and {words[-1]}"


def indent(lines: Iterable[str], depth: int = 4) -> List[str]:
    """Add ``depth`` spaces in front of each line."""
    return [" " * depth + line for line in lines]
