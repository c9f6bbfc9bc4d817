"""Kana to romaji keywords stored alongside each snapshot record."""

from __future__ import annotations

_HIRAGANA_ROMAJI: dict[str, str] = {
    "あ": "a", "い": "i", "う": "u", "え": "e", "お": "o",
    "か": "ka", "き": "ki", "く": "ku", "け": "ke", "こ": "ko",
    "が": "ga", "ぎ": "gi", "ぐ": "gu", "げ": "ge", "ご": "go",
    "さ": "sa", "し": "shi", "す": "su", "せ": "se", "そ": "so",
    "ざ": "za", "じ": "ji", "ず": "zu", "ぜ": "ze", "ぞ": "zo",
    "た": "ta", "ち": "chi", "つ": "tsu", "て": "te", "と": "to",
    "だ": "da", "ぢ": "di", "づ": "du", "で": "de", "ど": "do",
    "な": "na", "に": "ni", "ぬ": "nu", "ね": "ne", "の": "no",
    "は": "ha", "ひ": "hi", "ふ": "fu", "へ": "he", "ほ": "ho",
    "ば": "ba", "び": "bi", "ぶ": "bu", "べ": "be", "ぼ": "bo",
    "ぱ": "pa", "ぴ": "pi", "ぷ": "pu", "ぺ": "pe", "ぽ": "po",
    "ま": "ma", "み": "mi", "む": "mu", "め": "me", "も": "mo",
    "や": "ya", "ゆ": "yu", "よ": "yo",
    "ら": "ra", "り": "ri", "る": "ru", "れ": "re", "ろ": "ro",
    "わ": "wa", "ゐ": "wi", "ゑ": "we", "を": "wo", "ん": "n",
}

# Katakana code points sit 0x60 above their hiragana counterparts.
_KANA_ROMAJI: dict[str, str] = {
    **_HIRAGANA_ROMAJI,
    **{chr(ord(kana) + 0x60): romaji for kana, romaji in _HIRAGANA_ROMAJI.items()},
}


def kana_to_romaji_keywords(text: str) -> list[str]:
    """
    Romanize each run of kana in `text`.

    Characters outside the table (including small kana) end the current run.
    The result is sorted and de-duplicated:

        "テスト資料" -> ["tesuto"]
        "しりょう" -> ["shiri", "u"]
    """
    parts: list[str] = []
    current: list[str] = []

    for ch in text:
        romaji = _KANA_ROMAJI.get(ch)
        if romaji is not None:
            current.append(romaji)
            continue
        if current:
            parts.append("".join(current))
            current = []

    if current:
        parts.append("".join(current))

    return sorted(set(parts))
