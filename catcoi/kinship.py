"""
Коэффициент инбридинга (COI) потомства по Райту, 1922:

    F = Σ (1/2)^(n1 + n2 + 1) · (1 + F_A)

где сумма берётся по всем парам путей (путь через отца × путь через мать)
к каждому общему предку, n1/n2 – число поколений от отца/матери до предка.
F_A (инбридинг самого предка) по 5-поколенной родословной не вычислить,
поэтому принимается равным 0.

Две функции верхнего уровня:
* ``compute_coi`` – расчёт по двум деревьям ``PedigreeTree``;
* ``build_mating_table`` – таблица пробных вязок коты × кошки.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from itertools import product
from typing import Callable, Dict, List, Mapping, NamedTuple, Sequence

import numpy as np
import pandas as pd
from numba import njit
from tqdm import tqdm

from .identity import DEFAULT_STRATEGIES, Rule, match_rule, normalize_name
from .pedigree import PedigreeTree, flatten, tree_from_mapping
from .risk import classify


@dataclass(frozen=True)
class CommonAncestorMatch:
    sire_path: str
    dam_path: str
    n1: int
    n2: int
    contribution: float


@dataclass
class CommonAncestorSummary:
    """Все пары путей к одному общему предку."""
    name: str
    matches: List[CommonAncestorMatch] = field(default_factory=list)

    @property
    def total_contribution(self) -> float:
        return sum(m.contribution for m in self.matches)


@dataclass
class COIResult:
    coi_percent: float
    common_ancestors: List[CommonAncestorSummary]

    def to_dict(self) -> dict:
        return {
            "coiPercent": self.coi_percent,
            "commonAncestors": [
                {
                    "name": s.name,
                    "totalContributionPercent": 100.0 * s.total_contribution,
                    "paths": [
                        {
                            "sirePath": m.sire_path,
                            "damPath": m.dam_path,
                            "n1": m.n1,
                            "n2": m.n2,
                            "contributionPercent": 100.0 * m.contribution,
                        }
                        for m in s.matches
                    ],
                }
                for s in self.common_ancestors
            ],
        }

    def to_frame(self) -> pd.DataFrame:
        """Одна строка на пару путей – для аудита результата."""
        rows = [
            (s.name, m.sire_path, m.dam_path, m.n1, m.n2, 100.0 * m.contribution)
            for s in self.common_ancestors
            for m in s.matches
        ]
        return pd.DataFrame(
            rows,
            columns=["ancestor", "sire_path", "dam_path", "n1", "n2", "contribution_percent"],
        )


class PairDecision(NamedTuple):
    """Запись трассировки: одна совпавшая пара (предок отца, предок матери)."""
    sire_path: str
    dam_path: str
    sire_name: str
    dam_name: str
    rule: str
    n1: int
    n2: int
    contribution: float
    duplicate: bool


TraceFn = Callable[[PairDecision], None]


@njit(cache=True)
def _path_contributions(n1: np.ndarray, n2: np.ndarray) -> np.ndarray:
    out = np.empty(n1.shape[0], dtype=np.float64)
    for k in range(n1.shape[0]):
        out[k] = 0.5 ** (n1[k] + n2[k] + 1)
    return out


def compute_coi(
    sire_tree: PedigreeTree,
    dam_tree: PedigreeTree,
    trace: TraceFn | None = None,
    strategies: Sequence[Rule] = DEFAULT_STRATEGIES,
) -> COIResult:
    """COI потомка кота с родословной ``sire_tree`` и кошки с ``dam_tree``.

    Каждая пара (путь у отца, путь у матери) учитывается ровно один раз;
    несколько путей к одному предку складываются, а не схлопываются.
    ``trace`` получает ``PairDecision`` на каждое совпадение.
    """
    sire_entries = flatten(sire_tree, "sire")
    dam_entries = flatten(dam_tree, "dam")

    seen = set()
    hits = []  # (sire_entry, dam_entry, rule)
    dups = []
    for s in sire_entries:
        for d in dam_entries:
            rule = match_rule(s, d, strategies)
            if rule is None:
                continue
            key = (s.path, d.path)
            if key in seen:
                dups.append((s, d, rule))
                continue
            seen.add(key)
            hits.append((s, d, rule))

    n1 = np.array([s.generation for s, _, _ in hits], dtype=np.int64)
    n2 = np.array([d.generation for _, d, _ in hits], dtype=np.int64)
    assert (n1 >= 1).all() and (n2 >= 1).all(), "generation numbers start at 1"
    contrib = _path_contributions(n1, n2)

    groups: Dict[str, CommonAncestorSummary] = {}
    for (s, d, rule), c in zip(hits, contrib):
        match = CommonAncestorMatch(s.path, d.path, s.generation, d.generation, float(c))
        key = normalize_name(s.name)
        if key not in groups:
            groups[key] = CommonAncestorSummary(name=s.name)
        groups[key].matches.append(match)
        if trace is not None:
            trace(PairDecision(s.path, d.path, s.name, d.name, rule,
                               s.generation, d.generation, float(c), False))
    if trace is not None:
        for s, d, rule in dups:
            trace(PairDecision(s.path, d.path, s.name, d.name, rule,
                               s.generation, d.generation, 0.0, True))

    # sorted() стабилен: равные вклады остаются в порядке обнаружения
    summaries = sorted(groups.values(), key=lambda g: -g.total_contribution)
    return COIResult(coi_percent=100.0 * float(contrib.sum()), common_ancestors=summaries)


def compute_inbreeding_coefficient(
    sire_pedigree: Mapping | PedigreeTree,
    dam_pedigree: Mapping | PedigreeTree,
    trace: TraceFn | None = None,
) -> dict:
    """То же, что ``compute_coi``, но на входе/выходе – простые словари.

    Родословные задаются записями с ключами-путями
    (``sire``, ``dam``, ``sire_sire`` … до 5 уровней).
    """
    if not isinstance(sire_pedigree, PedigreeTree):
        sire_pedigree = tree_from_mapping(sire_pedigree)
    if not isinstance(dam_pedigree, PedigreeTree):
        dam_pedigree = tree_from_mapping(dam_pedigree)
    return compute_coi(sire_pedigree, dam_pedigree, trace=trace).to_dict()


def build_mating_table(
    sires: Mapping[str, PedigreeTree],
    dams: Mapping[str, PedigreeTree],
    max_coi: float | None = None,
    progress: bool = True,
) -> pd.DataFrame:
    """Таблица пробных вязок (sire_id, dam_id, coi_percent, risk_level, common_ancestors).

    Если задан ``max_coi``, остаются только пары с COI ≤ ``max_coi``.
    """
    sire_ids = np.asarray(list(sires.keys()), dtype=object)
    dam_ids = np.asarray(list(dams.keys()), dtype=object)

    # матрица COI коты × кошки
    coi_mat = np.zeros((sire_ids.shape[0], dam_ids.shape[0]), dtype=np.float64)
    n_common = np.zeros(coi_mat.shape, dtype=np.int64)
    pairs = product(enumerate(sire_ids), enumerate(dam_ids))
    for (j, sid), (i, did) in tqdm(pairs, total=coi_mat.size, desc="matings", disable=not progress):
        res = compute_coi(sires[sid], dams[did])
        coi_mat[j, i] = res.coi_percent
        n_common[j, i] = len(res.common_ancestors)

    sire_idx, dam_idx = np.nonzero(
        np.ones(coi_mat.shape, dtype=bool) if max_coi is None else coi_mat <= max_coi
    )
    coi = coi_mat[sire_idx, dam_idx]
    return pd.DataFrame(
        {
            "sire_id": sire_ids[sire_idx],
            "dam_id": dam_ids[dam_idx],
            "coi_percent": coi,
            "risk_level": [classify(x).level for x in coi],
            "common_ancestors": n_common[sire_idx, dam_idx],
        },
        columns=["sire_id", "dam_id", "coi_percent", "risk_level", "common_ancestors"],
    )
