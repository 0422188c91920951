"""
Сравнение двух записей о предке: одно ли это животное.

Транскрибированные родословные шумные, поэтому сравнение эвристическое –
цепочка правил, первое сработавшее решает:
    1. совпадение регистрационного номера (≥ 4 значимых символов);
    2. точное совпадение нормализованных имён;
    3. вхождение одного имени в другое, если оба длиннее 8 символов
       (титулованное и нетитулованное написание: «GIC Somecat's Name»).
Пороги подобраны под реальные данные – менять только осознанно.
"""
from __future__ import annotations
import re
from typing import Callable, Sequence, Tuple

MIN_REGISTRATION_LENGTH = 4
MIN_SUBSTRING_NAME_LENGTH = 8  # строго больше

_APOSTROPHES = re.compile(r"[`´']")
_NOT_NAME_CHAR = re.compile(r"[^a-z0-9æøåäö'*]")
_SPACES = re.compile(r"\s+")
_NOT_ALNUM = re.compile(r"[^a-zA-Z0-9]")


def normalize_name(name: str | None) -> str:
    if not name:
        return ""
    s = name.lower()
    s = _APOSTROPHES.sub("'", s)
    s = s.replace("@", "*")  # разделитель питомника
    s = _NOT_NAME_CHAR.sub(" ", s)
    return _SPACES.sub(" ", s).strip()


def clean_registration(registration: str | None) -> str:
    if not registration:
        return ""
    return _NOT_ALNUM.sub("", registration).lower()


# --------------------------------------------------------------------------- #
# правила
# --------------------------------------------------------------------------- #
def match_registration(a, b) -> bool:
    reg_a = clean_registration(a.registration)
    reg_b = clean_registration(b.registration)
    return bool(reg_a) and reg_a == reg_b and len(reg_a) >= MIN_REGISTRATION_LENGTH


def match_exact_name(a, b) -> bool:
    return normalize_name(a.name) == normalize_name(b.name)


def match_name_substring(a, b) -> bool:
    name_a = normalize_name(a.name)
    name_b = normalize_name(b.name)
    if len(name_a) <= MIN_SUBSTRING_NAME_LENGTH or len(name_b) <= MIN_SUBSTRING_NAME_LENGTH:
        return False
    return name_a in name_b or name_b in name_a


Rule = Tuple[str, Callable[..., bool]]

DEFAULT_STRATEGIES: Tuple[Rule, ...] = (
    ("registration", match_registration),
    ("exact_name", match_exact_name),
    ("name_substring", match_name_substring),
)


def match_rule(a, b, strategies: Sequence[Rule] = DEFAULT_STRATEGIES) -> str | None:
    """Имя первого сработавшего правила либо ``None``.

    ``a`` и ``b`` – любые объекты с атрибутами ``name`` и ``registration``
    (``AncestorRef``, ``AncestorEntry``).
    """
    if not a.name or not b.name:
        return None
    for rule_name, rule in strategies:
        if rule(a, b):
            return rule_name
    return None


def is_same_individual(a, b, strategies: Sequence[Rule] = DEFAULT_STRATEGIES) -> bool:
    return match_rule(a, b, strategies) is not None
