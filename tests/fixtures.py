"""Мини‑родословные для юнит‑тестов."""
from catcoi.pedigree import LABELS, MAX_GENERATIONS
from itertools import product


def full_pedigree(prefix: str) -> dict:
    """Полные 5 поколений, все 62 имени различны и одной длины."""
    record = {}
    i = 0
    for g in range(1, MAX_GENERATIONS + 1):
        for labels in product(LABELS, repeat=g):
            record["_".join(labels)] = {"name": f"{prefix} {i:02d}"}
            i += 1
    return record


# полусибсы: у кота и кошки общий отец
half_sib_sire = {"name": "Gizmo Junior", "sire": {"name": "Gizmo"}, "dam": {"name": "Bella"}}
half_sib_dam = {"name": "Nessie", "sire": {"name": "Gizmo"}, "dam": {"name": "Rosa"}}

# полные сибсы
full_sib_sire = {"sire": {"name": "Gizmo"}, "dam": {"name": "Nessie"}}
full_sib_dam = {"sire": {"name": "Gizmo"}, "dam": {"name": "Nessie"}}

# «Grand Champ» дважды у кота (поколение 3) и дважды у кошки (поколения 2 и 3)
repeat_sire = {
    "sire": "Max",
    "dam": "Mia",
    "sire_sire_sire": {"name": "Grand Champ"},
    "dam_sire_sire": {"name": "Grand Champ"},
}
repeat_dam = {
    "sire": "Leo",
    "dam": "Luna",
    "sire_sire": {"name": "Grand Champ"},
    "dam_sire_sire": {"name": "Grand Champ"},
}
