"""Tab-completion suggestions for the REPL."""

from __future__ import annotations

# Where a prefix was listed twice, the first listing wins.
_COMPLETIONS: dict[str, tuple[str, ...]] = {
    "(e": ("(exit ",),
    "(ex": ("(exit ",),
    "(u": ('(use "',),
    "(us": ('(use "',),
    "(bw": ("(bw-",),
    "(bw-r": ("(bw-rsh ",),
    "(bw-l": ("(bw-lsh ",),
    "(bw-a": ("(bw-and ",),
    "(bw-o": ("(bw-or ",),
    "(bw-x": ("(bw-xor ",),
    "(bw-n": ("(bw-not ",),
    "(:": ("(:= ",),
    "(th": ("(throw ",),
    "(tr": ("(try ",),
    "(en": ("(env ",),
    "(dr": ("(",),
    "(lo": ("(loop ",),
    "(it": ('(iter "',),
    "(im": ('(import "',),
    "(imp": ('(import "',),
    "(impo": ('(import "',),
    "(impor": ('(import "',),
    "(d": ("(drop ",),
    "(dro": ("(drop ",),
    "(s": ("(set ",),
    "(se": ("(set ",),
    "(as": ("(assert ",),
    "(cl": ("(clone ",),
    "(c": ("(clone ",),
}


def complete(text: str) -> list[str]:
    """Return the completions for an edit buffer that exactly matches a prefix."""
    return list(_COMPLETIONS.get(text, ()))