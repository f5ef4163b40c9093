"""Mapping of grammatical tokens used in table sources to info words and flags."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

GF_RET_FORMS = 0x8000
GF_FORM_MASK = 0x7000
GF_MULTIPLE = 0x0800
GF_GEND_MASK = 0x0600
GF_ADVERB = 0x0180
GF_COMPARED = 0x0100
GF_SHORT_ONE = 0x0080

GF_VERB_TIME = 0x0007
VT_INFINITIV = 0x0001
VT_IMPERATIV = 0x0002
VT_FUTURE = 0x0003
VT_PRESENT = 0x0004
VT_PAST = 0x0005

GF_VERB_FORM = 0x0018
VF_VERB_ACTIVE = 0x0008
VF_VERB_PASSIV = 0x0010
VF_VERB_DOING = 0x0018

VB_FIRST_FACE = 0x0020
VB_SECOND_FACE = 0x0040
VB_THIRD_FACE = 0x0060

AF_ANIMATED = 0x01
AF_NOT_ALIVE = 0x02
AF_HARD_FORM = 0x04
AF_JOINING_C = 0x08

_BOTH = AF_ANIMATED | AF_NOT_ALIVE
_KEEP_FORM = ~GF_FORM_MASK


@dataclass(frozen=True)
class GramState:
    """Current grammatical info word and flag byte."""

    grinfo: int = 0
    bflags: int = 0


@dataclass(frozen=True)
class _Rule:
    grmask: int
    grinfo: int
    mflags: int
    bflags: int


class GramMap:
    """Token table; each token masks and sets bits of the current state."""

    def __init__(self) -> None:
        self._rules: Dict[str, _Rule] = {}

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, key: object) -> bool:
        return key in self._rules

    def add(self, key: str, grmask: int, grinfo: int, mflags: int, bflags: int) -> "GramMap":
        """Register a token; an already registered token keeps its first rule."""
        self._rules.setdefault(key, _Rule(grmask, grinfo, mflags, bflags))
        return self

    def map_info(self, expression: str, state: GramState) -> GramState:
        """Apply the '|'-separated tokens of ``expression`` to ``state``."""
        grinfo, bflags = state.grinfo, state.bflags
        pos = 0
        while pos < len(expression):
            end = expression.find("|", pos)
            if end < 0:
                end = len(expression)
            if end == pos:
                raise ValueError(f"invalid grammatic expression '{expression[pos:]}'")
            token = expression[pos:end]
            rule = self._rules.get(token)
            if rule is None:
                raise ValueError(f"unknown grammatic token '{token}'")
            grinfo = ((grinfo & rule.grmask) | rule.grinfo) & 0xFFFF
            bflags = ((bflags & rule.mflags) | rule.bflags) & 0xFF
            pos = end + 1 if end < len(expression) else end
        return GramState(grinfo, bflags)

    @classmethod
    def russian(cls) -> "GramMap":
        """Tokens of the Russian table syntax."""
        g = cls()
        g.add("В", _KEEP_FORM, 3 << 12, -1, _BOTH)
        g.add("Вн", _KEEP_FORM, 3 << 12, ~_BOTH, AF_NOT_ALIVE)
        g.add("Во", _KEEP_FORM, 3 << 12, ~_BOTH, AF_ANIMATED)
        g.add("Д", _KEEP_FORM, 2 << 12, -1, _BOTH)
        g.add("И", _KEEP_FORM, 0, -1, _BOTH)
        g.add("П", _KEEP_FORM, 5 << 12, -1, _BOTH)
        g.add("П2", _KEEP_FORM, 7 << 12, -1, _BOTH)
        g.add("Р", _KEEP_FORM, 1 << 12, -1, _BOTH)
        g.add("Р2", _KEEP_FORM, 6 << 12, -1, _BOTH)
        g.add("Т", _KEEP_FORM, 4 << 12, -1, _BOTH)
        g.add("время Б", 0, VT_FUTURE, -1, _BOTH)
        g.add("время Н", 0, VT_PRESENT, -1, _BOTH)
        g.add("время П", 0, VT_PAST, -1, _BOTH)
        g.add("вф", -1, GF_RET_FORMS, -1, 0)
        g.add("деепр", GF_VERB_TIME, VF_VERB_DOING, -1, _BOTH)
        g.add("действ", GF_VERB_TIME, VF_VERB_ACTIVE, -1, _BOTH)
        g.add("затрудн", -1, 0, -1, AF_HARD_FORM)
        g.add("инфинитив", 0, VT_INFINITIV, 0, _BOTH)
        g.add("кф", GF_VERB_TIME | GF_VERB_FORM | GF_GEND_MASK | GF_MULTIPLE, GF_SHORT_ONE, -1, _BOTH)
        g.add("лицо 1", GF_VERB_TIME, VB_FIRST_FACE, -1, _BOTH)
        g.add("лицо 2", GF_VERB_TIME, VB_SECOND_FACE, -1, _BOTH)
        g.add("лицо 3", GF_VERB_TIME, VB_THIRD_FACE, -1, _BOTH)
        g.add("нр", 0, GF_ADVERB, -1, _BOTH)
        g.add("повел", 0, VT_IMPERATIV, -1, _BOTH)
        g.add("проф", -1, 0, -1, 0)
        g.add("род", GF_VERB_TIME | GF_VERB_FORM | GF_MULTIPLE, 0, -1, 0)
        g.add("род ж", GF_VERB_TIME | GF_VERB_FORM, 2 << 9, -1, 0)
        g.add("род м", GF_VERB_TIME | GF_VERB_FORM, 1 << 9, -1, 0)
        g.add("род с", GF_VERB_TIME | GF_VERB_FORM, 3 << 9, -1, 0)
        g.add("соед", -1, 0, -1, AF_JOINING_C)
        g.add("ср", 0, GF_COMPARED, -1, _BOTH)
        g.add("страд", GF_VERB_TIME, VF_VERB_PASSIV, -1, _BOTH)
        g.add("число", GF_VERB_TIME | GF_VERB_FORM, 0, -1, _BOTH)
        g.add("число Е", GF_VERB_TIME | GF_VERB_FORM, 0, -1, _BOTH)
        g.add("число М", GF_VERB_TIME | GF_VERB_FORM, GF_MULTIPLE, -1, _BOTH)
        return g

    @classmethod
    def ukrainian(cls) -> "GramMap":
        """Tokens of the Ukrainian table syntax."""
        g = cls()
        g.add("act", GF_VERB_TIME, VF_VERB_ACTIVE, -1, _BOTH)
        g.add("face 1", GF_VERB_TIME, VB_FIRST_FACE, -1, _BOTH)
        g.add("face 2", GF_VERB_TIME, VB_SECOND_FACE, -1, _BOTH)
        g.add("face 3", GF_VERB_TIME, VB_THIRD_FACE, -1, _BOTH)
        g.add("fem", GF_VERB_TIME | GF_VERB_FORM, 2 << 9, -1, 0)
        g.add("fut", 0, VT_FUTURE, -1, _BOTH)
        g.add("ger", GF_VERB_TIME, VF_VERB_DOING, -1, _BOTH)
        g.add("imp", 0, VT_IMPERATIV, -1, _BOTH)
        g.add("inf", 0, VT_INFINITIV, 0, _BOTH)
        g.add("msc", GF_VERB_TIME | GF_VERB_FORM, 1 << 9, -1, 0)
        g.add("nwt", GF_VERB_TIME | GF_VERB_FORM, 3 << 9, -1, 0)
        g.add("prs", 0, VT_PRESENT, -1, _BOTH)
        g.add("pst", 0, VT_PAST, -1, _BOTH)
        g.add("psv", GF_VERB_TIME, VF_VERB_PASSIV, -1, _BOTH)
        g.add("sing", GF_VERB_TIME | GF_VERB_FORM, 0, -1, _BOTH)
        g.add("plur", GF_VERB_TIME | GF_VERB_FORM, GF_MULTIPLE, -1, _BOTH)
        g.add("В", _KEEP_FORM, 3 << 12, -1, _BOTH)
        g.add("Вн", _KEEP_FORM, 3 << 12, ~_BOTH, AF_NOT_ALIVE)
        g.add("Во", _KEEP_FORM, 3 << 12, ~_BOTH, AF_ANIMATED)
        g.add("Д", _KEEP_FORM, 2 << 12, -1, _BOTH)
        g.add("З", _KEEP_FORM, 6 << 12, -1, _BOTH)
        g.add("И", _KEEP_FORM, 0, -1, _BOTH)
        g.add("П", _KEEP_FORM, 5 << 12, -1, _BOTH)
        g.add("Р", _KEEP_FORM, 1 << 12, -1, _BOTH)
        g.add("Т", _KEEP_FORM, 4 << 12, -1, _BOTH)
        g.add("вф", -1, GF_RET_FORMS, -1, 0)
        return g