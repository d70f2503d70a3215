from __future__ import annotations


def confirm(prompt: str) -> bool:
    try:
        raw = input(prompt).strip().strip('"')
    except EOFError:
        return False
    return raw.lower() in ("y", "yes")
