import numpy as np
import pandas as pd
import pytest
from pathlib import Path

from catcoi.main import main
from catcoi.model import evaluate_all_matings, evaluate_mating


def _write_data(tmp_path: Path):
    (tmp_path / "cats.csv").write_text(
        "id,name,sex,registration\n"
        "S1,Gizmo Junior,M,NO*111\n"
        "D1,Nessie Junior,F,\n"
        "D2,Unrelated Lady,F,\n"
    )
    (tmp_path / "pedigrees.csv").write_text(
        "cat_id,path,name,registration\n"
        "S1,sire,Gizmo,NO*NRR 1234\n"
        "S1,dam,Nessie,\n"
        "S1,sire_sire,Old Tom,\n"
        "D1,sire,GIC Gizmo,NO NRR-1234\n"
        "D1,dam,Nessie,\n"
        "D2,sire,Tom,\n"
        "D2,dam,Kitty,\n"
    )


def test_end_to_end(tmp_path: Path):
    _write_data(tmp_path)

    df = evaluate_all_matings(str(tmp_path))
    # 1 кот × 2 кошки
    assert len(df) == 2
    coi = df.set_index("dam_id")["coi_percent"]
    assert np.isclose(coi["D1"], 25.0)
    assert coi["D2"] == 0.0

    df2 = evaluate_all_matings(str(tmp_path), max_coi=10.0)
    assert list(df2["dam_id"]) == ["D2"]

    res = evaluate_mating(str(tmp_path), "S1", "D1")
    assert np.isclose(res.coi_percent, 25.0)
    assert {s.name for s in res.common_ancestors} == {"Gizmo", "Nessie"}


def test_wrong_sex_and_unknown_id(tmp_path: Path):
    _write_data(tmp_path)
    with pytest.raises(ValueError):
        evaluate_mating(str(tmp_path), "D1", "D2")
    with pytest.raises(KeyError):
        evaluate_mating(str(tmp_path), "S1", "X9")


def test_cli(tmp_path: Path, capsys):
    _write_data(tmp_path)
    out = tmp_path / "matings.csv"
    main(["--data_dir", str(tmp_path), "--out", str(out)])
    assert len(pd.read_csv(out)) == 2

    paths = tmp_path / "paths.csv"
    main(["--data_dir", str(tmp_path), "--sire", "S1", "--dam", "D1", "--out", str(paths), "--trace"])
    printed = capsys.readouterr().out
    assert "COI: 25.00%" in printed
    assert "very-high" in printed
    assert len(pd.read_csv(paths)) == 2


def test_duplicate_cat_id_rejected(tmp_path: Path):
    _write_data(tmp_path)
    with open(tmp_path / "cats.csv", "a") as f:
        f.write("S1,Gizmo Again,M,\n")
    with pytest.raises(ValueError):
        evaluate_all_matings(str(tmp_path))
