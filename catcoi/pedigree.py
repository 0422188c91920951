"""
Родословная одного родителя (кот или кошка) в виде бинарного дерева
фиксированной глубины – до 5 поколений, 2 + 4 + 8 + 16 + 32 = 62 слота.

Слоты хранятся в плоском массиве.  Слот поколения ``g`` с битовым путём ``b``
(sire = 0, dam = 1, старший бит – ближайший к родителю шаг) лежит по индексу
``2**g - 2 + b``.  Сам родитель в дерево не входит: поколение 1 – его
собственные отец и мать.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Tuple

import pandas as pd

MAX_GENERATIONS = 5
LABELS = ("sire", "dam")
N_SLOTS = 2 ** (MAX_GENERATIONS + 1) - 2  # 62


class InvalidPedigreeError(ValueError):
    """Ключ пути или значение слота не укладывается в схему родословной."""


@dataclass(frozen=True)
class AncestorRef:
    name: str = ""
    registration: str | None = None

    def __bool__(self) -> bool:
        return bool(self.name)


@dataclass(frozen=True)
class AncestorEntry:
    """Одно вхождение предка в развёрнутый список одной стороны."""
    name: str
    registration: str | None
    generation: int
    path: str


# --------------------------------------------------------------------------- #
# адресация слотов
# --------------------------------------------------------------------------- #
def slot_index(labels: Tuple[str, ...] | List[str]) -> int:
    """Индекс слота по последовательности меток ``sire``/``dam``."""
    g = len(labels)
    if g == 0 or g > MAX_GENERATIONS:
        raise InvalidPedigreeError(
            f"path depth {g} is outside 1..{MAX_GENERATIONS}: {'_'.join(labels)!r}"
        )
    bits = 0
    for label in labels:
        if label not in LABELS:
            raise InvalidPedigreeError(f"unknown path label {label!r} in {'_'.join(labels)!r}")
        bits = (bits << 1) | LABELS.index(label)
    return 2 ** g - 2 + bits


def slot_labels(index: int) -> Tuple[str, ...]:
    """Обратное к ``slot_index``: метки пути для индекса слота."""
    if not 0 <= index < N_SLOTS:
        raise IndexError(index)
    g = 1
    while index >= 2 ** (g + 1) - 2:
        g += 1
    bits = index - (2 ** g - 2)
    return tuple(LABELS[(bits >> (g - 1 - k)) & 1] for k in range(g))


def slot_generation(index: int) -> int:
    return len(slot_labels(index))


def parse_path(key: str) -> Tuple[str, ...]:
    if not isinstance(key, str) or not key:
        raise InvalidPedigreeError(f"malformed path key {key!r}")
    labels = tuple(key.split("_"))
    slot_index(labels)  # валидация
    return labels


# --------------------------------------------------------------------------- #
# дерево
# --------------------------------------------------------------------------- #
class PedigreeTree:
    """Неизменяемая родословная одного родителя.

    ``owner`` – сам родитель, только для отображения; в расчёт не идёт.
    """

    __slots__ = ("_slots", "owner")

    def __init__(self, slots: Dict[Tuple[str, ...], AncestorRef] | None = None,
                 owner: AncestorRef | None = None):
        arr: List[AncestorRef | None] = [None] * N_SLOTS
        for labels, ref in (slots or {}).items():
            arr[slot_index(labels)] = ref
        self._slots: Tuple[AncestorRef | None, ...] = tuple(arr)
        self.owner = owner

    def __getitem__(self, key: str) -> AncestorRef | None:
        return self._slots[slot_index(parse_path(key))]

    def __iter__(self) -> Iterator[Tuple[int, AncestorRef]]:
        """(индекс слота, предок) для всех заполненных слотов."""
        for i, ref in enumerate(self._slots):
            if ref:
                yield i, ref

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PedigreeTree):
            return NotImplemented
        return self._slots == other._slots and self.owner == other.owner

    def __repr__(self) -> str:
        owner = self.owner.name if self.owner else "?"
        return f"<PedigreeTree {owner!r}: {len(self)} of {N_SLOTS} slots>"

    def with_owner(self, owner: AncestorRef | None) -> "PedigreeTree":
        tree = PedigreeTree.__new__(PedigreeTree)
        tree._slots = self._slots
        tree.owner = owner
        return tree

    def generations(self) -> int:
        """Глубина самого дальнего заполненного слота (0 для пустого дерева)."""
        return max((slot_generation(i) for i, _ in self), default=0)


def _ref_from_value(value, key: str) -> AncestorRef:
    if value is None:
        return AncestorRef()
    if isinstance(value, AncestorRef):
        return value
    if isinstance(value, str):
        return AncestorRef(name=value.strip())
    if isinstance(value, Mapping):
        name = value.get("name") or ""
        reg = value.get("registration")
        # пустые ячейки из pandas приходят как NaN
        if not isinstance(name, str):
            name = "" if pd.isna(name) else str(name)
        if reg is not None and not isinstance(reg, str):
            reg = None if pd.isna(reg) else str(reg)
        return AncestorRef(name=name.strip(), registration=(reg.strip() or None) if reg else None)
    raise InvalidPedigreeError(f"slot {key!r}: expected a record or a name, got {type(value).__name__}")


def tree_from_mapping(record: Mapping) -> PedigreeTree:
    """Строит дерево из записи, ключи которой – пути (``sire``, ``sire_dam`` …).

    Допускается и вложенная форма ``{"sire": {"name": ..., "dam": {...}}}``.
    Ключи ``name``/``registration`` верхнего уровня описывают самого родителя.
    """
    slots: Dict[Tuple[str, ...], AncestorRef] = {}

    def _walk(rec: Mapping, prefix: Tuple[str, ...]):
        for key, value in rec.items():
            if key in ("name", "registration"):
                continue
            labels = prefix + parse_path(key)
            if len(labels) > MAX_GENERATIONS:
                raise InvalidPedigreeError(
                    f"path {'_'.join(labels)!r} is deeper than {MAX_GENERATIONS} generations"
                )
            ref = _ref_from_value(value, "_".join(labels))
            if ref:
                if labels in slots and slots[labels] != ref:
                    raise InvalidPedigreeError(f"slot {'_'.join(labels)!r} is given twice")
                slots[labels] = ref
            if isinstance(value, Mapping):
                # внутри слота путями считаются только ключи, начинающиеся с sire/dam
                _walk({k: v for k, v in value.items()
                       if isinstance(k, str) and k.split("_", 1)[0] in LABELS}, labels)

    if not isinstance(record, Mapping):
        raise InvalidPedigreeError(f"expected a mapping, got {type(record).__name__}")
    _walk(record, ())
    owner = _ref_from_value(
        {"name": record.get("name"), "registration": record.get("registration")}, "owner"
    )
    return PedigreeTree(slots, owner=owner or None)


def tree_from_frame(df: pd.DataFrame) -> PedigreeTree:
    """Дерево из таблицы со столбцами ``path, name[, registration]``."""
    missing = {"path", "name"} - set(df.columns)
    if missing:
        raise InvalidPedigreeError(f"pedigree table lacks columns: {sorted(missing)}")
    repeated = df.loc[df["path"].duplicated(), "path"]
    if not repeated.empty:
        raise InvalidPedigreeError(f"slots given twice: {sorted(set(repeated))}")
    record = {}
    for row in df.itertuples(index=False):
        record[row.path] = {
            "name": row.name,
            "registration": getattr(row, "registration", None),
        }
    return tree_from_mapping(record)


# --------------------------------------------------------------------------- #
# развёртка
# --------------------------------------------------------------------------- #
def flatten(tree: PedigreeTree, side: str) -> List[AncestorEntry]:
    """Плоский список предков одной стороны (``sire`` или ``dam``).

    Каждый заполненный слот даёт ровно одну запись; пустые пропускаются.
    """
    if side not in LABELS:
        raise ValueError(f"side must be 'sire' or 'dam', got {side!r}")
    return [
        AncestorEntry(
            name=ref.name,
            registration=ref.registration,
            generation=len(labels),
            path="_".join((side,) + labels),
        )
        for labels, ref in ((slot_labels(i), ref) for i, ref in tree)
    ]


def ancestors_frame(tree: PedigreeTree, side: str) -> pd.DataFrame:
    entries = flatten(tree, side)
    return pd.DataFrame(
        {
            "name": [e.name for e in entries],
            "registration": [e.registration for e in entries],
            "generation": [e.generation for e in entries],
            "path": [e.path for e in entries],
        },
        columns=["name", "registration", "generation", "path"],
    )
