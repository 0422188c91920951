"""
Загрузка каталога с данными и расчёт пробных вязок.

Каталог:
    cats.csv       – id, name, sex (M/F)[, registration]
    pedigrees.csv  – cat_id, path, name, registration (длинный формат)
"""
from __future__ import annotations
import logging
from typing import Dict, Tuple

import pandas as pd

from .kinship import COIResult, PairDecision, build_mating_table, compute_coi
from .pedigree import AncestorRef, PedigreeTree, tree_from_frame
from .risk import classify

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
LOGGER = logging.getLogger(__name__)


def _load_data(data_dir: str):
    cats = pd.read_csv(f"{data_dir}/cats.csv", dtype={"id": str})
    pedigrees = pd.read_csv(f"{data_dir}/pedigrees.csv", dtype={"cat_id": str, "registration": str})
    dup = cats.loc[cats["id"].duplicated(), "id"]
    if not dup.empty:
        raise ValueError(f"Duplicate cat ids in cats.csv: {', '.join(sorted(set(dup)))}")
    return cats, pedigrees


def load_trees(cats: pd.DataFrame, pedigrees: pd.DataFrame) -> Dict[str, PedigreeTree]:
    """id кошки → её родословная. Кошки без строк в pedigrees.csv получают пустое дерево."""
    by_cat = {cat_id: g for cat_id, g in pedigrees.groupby("cat_id")}
    trees = {}
    for row in cats.itertuples(index=False):
        g = by_cat.get(row.id)
        tree = tree_from_frame(g) if g is not None else PedigreeTree()
        reg = getattr(row, "registration", None)
        owner = AncestorRef("" if pd.isna(row.name) else str(row.name),
                            None if pd.isna(reg) else str(reg))
        trees[row.id] = tree.with_owner(owner)
    unknown = set(by_cat) - set(trees)
    if unknown:
        LOGGER.warning("⚠️  Pedigrees for unknown cats ignored: %s", ", ".join(sorted(unknown)))
    return trees


def _split_by_sex(cats: pd.DataFrame, trees: Dict[str, PedigreeTree]) -> Tuple[dict, dict]:
    sex = cats.set_index("id")["sex"].str.upper()
    sires = {cid: t for cid, t in trees.items() if sex[cid] == "M"}
    dams = {cid: t for cid, t in trees.items() if sex[cid] == "F"}
    return sires, dams


def log_decision(decision: PairDecision) -> None:
    """Колбэк трассировки: пишет каждое совпадение в DEBUG."""
    if decision.duplicate:
        LOGGER.debug("    skip duplicate pair %s × %s", decision.sire_path, decision.dam_path)
        return
    LOGGER.debug(
        "    %s [%s] ~ %s [%s] by %s: (1/2)^(%d+%d+1) = %.4f%%",
        decision.sire_name, decision.sire_path, decision.dam_name, decision.dam_path,
        decision.rule, decision.n1, decision.n2, 100.0 * decision.contribution,
    )


def evaluate_mating(data_dir: str, sire_id: str, dam_id: str) -> COIResult:
    LOGGER.info("📦  Loading data …")
    cats, pedigrees = _load_data(data_dir)
    trees = load_trees(cats, pedigrees)
    sires, dams = _split_by_sex(cats, trees)

    for cid, side, pool in ((sire_id, "sire", sires), (dam_id, "dam", dams)):
        if cid not in trees:
            raise KeyError(f"Unknown cat id: {cid!r}")
        if cid not in pool:
            raise ValueError(f"Cat {cid!r} cannot be the {side}: wrong sex")

    LOGGER.info("🔍  Computing COI for %s × %s …", trees[sire_id].owner.name, trees[dam_id].owner.name)
    result = compute_coi(trees[sire_id], trees[dam_id], trace=log_decision)
    risk = classify(result.coi_percent)
    LOGGER.info("✅  COI = %.2f%% (%s), common ancestors: %d",
                result.coi_percent, risk.level, len(result.common_ancestors))
    return result


def evaluate_all_matings(data_dir: str, max_coi: float | None = None) -> pd.DataFrame:
    """COI для всех пар коты × кошки из каталога."""
    LOGGER.info("📦  Loading data …")
    cats, pedigrees = _load_data(data_dir)
    trees = load_trees(cats, pedigrees)
    sires, dams = _split_by_sex(cats, trees)
    if not sires or not dams:
        raise RuntimeError("Need at least one male and one female cat")

    LOGGER.info("🔍  Building test-mating table (%d × %d) …", len(sires), len(dams))
    table = build_mating_table(sires, dams, max_coi=max_coi)
    LOGGER.info("✅  %d matings evaluated", len(table))
    return table
