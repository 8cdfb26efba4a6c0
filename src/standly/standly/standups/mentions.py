"""@mention parsing for standup comments.

Mentions use a person's full name or first name (``@Sarah`` or ``@Sarah Chen``);
``@everyone`` notifies the whole team. Matching is case-insensitive and stops at
a word boundary, so ``@Rob`` does not match ``@Robert``.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional, Sequence

EVERYONE = "everyone"

_EVERYONE_ANYWHERE = re.compile(r"@everyone\b", re.IGNORECASE)
_EVERYONE_PREFIX = re.compile(r"^@everyone\b", re.IGNORECASE)
_MENTION_SPLIT = re.compile(r"(@[\w\s]+)")
_URL = re.compile(r"(https?://[^\s]+)")


def first_name(name: str) -> str:
    return (name or "").split(" ")[0]


def is_user_mentioned(text: str, name: str) -> bool:
    if _EVERYONE_ANYWHERE.search(text or ""):
        return True
    if not name:
        return False

    for candidate in (name, first_name(name)):
        if re.search(rf"@{re.escape(candidate)}\b", text or "", re.IGNORECASE):
            return True
    return False


def _segment(kind: str, value: str) -> dict:
    return {"kind": kind, "value": value}


def _match_name(part: str, names_longest_first: Sequence[str]) -> Optional[str]:
    for name in names_longest_first:
        if part.startswith(f"@{name}"):
            return name
        if part.startswith(f"@{first_name(name)}"):
            return first_name(name)
    return None


def split_mentions(text: str, names: Iterable[str]) -> list[dict]:
    """Split ``text`` into ``text``/``mention``/``everyone`` segments.

    A captured ``@...`` run may carry trailing words; only the matched name is
    the mention, the rest stays plain text.
    """
    ordered = sorted((n for n in names if n), key=len, reverse=True)
    segments: list[dict] = []

    for part in _MENTION_SPLIT.split(text or ""):
        if not part:
            continue

        if part.startswith("@"):
            if _EVERYONE_PREFIX.match(part):
                segments.append(_segment("everyone", "@" + EVERYONE))
                suffix = part[len(EVERYONE) + 1 :]
                if suffix:
                    segments.append(_segment("text", suffix))
                continue

            matched = _match_name(part, ordered)
            if matched:
                segments.append(_segment("mention", f"@{matched}"))
                suffix = part[len(matched) + 1 :]
                if suffix:
                    segments.append(_segment("text", suffix))
                continue

        segments.append(_segment("text", part))

    return segments


def split_links(text: str) -> list[dict]:
    return [
        _segment("link" if _URL.fullmatch(part) else "text", part)
        for part in _URL.split(text or "")
        if part
    ]


def render_segments(text: str, names: Iterable[str]) -> list[dict]:
    """Mentions first, then links inside the remaining plain text."""
    out: list[dict] = []
    for seg in split_mentions(text, names):
        if seg["kind"] == "text":
            out.extend(split_links(seg["value"]))
        else:
            out.append(seg)
    return out


def active_mention_query(text: str, cursor: Optional[int] = None) -> Optional[str]:
    """The partial name after ``@`` in the word being typed, or None."""
    before = (text or "")[: len(text or "") if cursor is None else max(cursor, 0)]
    last_word = before.split(" ")[-1]
    if last_word.startswith("@"):
        return last_word[1:]
    return None


def mention_suggestions(query: str, users: Iterable[dict], current_user_id: Optional[int]) -> list[dict]:
    """Users whose name contains ``query`` (excluding the caller), then ``everyone``."""
    q = (query or "").lower()
    out = [
        {**u, "is_everyone": False}
        for u in users
        if q in (u.get("name") or "").lower() and u.get("id") != current_user_id
    ]
    if q in EVERYONE:
        out.append({"id": EVERYONE, "name": EVERYONE, "role": "Notify all users", "avatar": "", "is_everyone": True})
    return out


def insert_mention(text: str, query: str, name: str, *, is_everyone: bool = False) -> str:
    """Replace the last ``@query`` with ``@<first name> ``."""
    to_insert = EVERYONE if is_everyone else first_name(name)
    token = f"@{query}"
    idx = (text or "").rfind(token)
    if idx == -1:
        return text
    return f"{text[:idx]}@{to_insert} {text[idx + len(token):]}"
