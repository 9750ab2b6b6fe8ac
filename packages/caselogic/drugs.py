from __future__ import annotations

from typing import Iterable, NamedTuple

from packages.core.schemas.case import DrugType, Medication

OTC_DRUGS = (
    "Paracetamol",
    "Ibuprofen",
    "Aspirin",
    "Acetaminophen",
    "Antacid",
    "Vitamin C",
    "Vitamin D",
    "Multivitamins",
    "Oral Rehydration Salts",
    "Cough Syrup",
    "Loratadine",
    "Cetirizine",
    "Diphenhydramine",
    "Omeprazole",
    "Famotidine",
    "Loperamide",
    "Hydrocortisone Cream",
)

CONTROLLED_DRUGS = (
    "Codeine",
    "Tramadol",
    "Diazepam",
    "Alprazolam",
    "Morphine",
    "Oxycodone",
    "Fentanyl",
    "Methylphenidate",
    "Amphetamine",
    "Phenobarbital",
)

_OTC_KEYS = tuple(name.lower() for name in OTC_DRUGS)
_CONTROLLED_KEYS = tuple(name.lower() for name in CONTROLLED_DRUGS)


class DrugClassification(NamedTuple):
    type: DrugType
    is_otc: bool

    def to_dict(self) -> dict:
        return {"type": self.type, "isOTC": self.is_otc}


def _matches(normalized: str, keys: tuple[str, ...]) -> bool:
    return bool(normalized) and any(key in normalized for key in keys)


def classify_drug(name: str) -> DrugClassification:
    """Substring match against the reference lists; Controlled wins over OTC.

    Unknown names fall back to PrescriptionOnly, never OTC.
    """
    normalized = (name or "").strip().lower()
    if _matches(normalized, _CONTROLLED_KEYS):
        return DrugClassification("Controlled", False)
    if _matches(normalized, _OTC_KEYS):
        return DrugClassification("OTC", True)
    return DrugClassification("PrescriptionOnly", False)


def classify_medications(medications: Iterable[Medication]) -> list[dict]:
    rows: list[dict] = []
    for medication in medications:
        classification = classify_drug(medication.name)
        rows.append(
            {
                "name": medication.name,
                "drugType": classification.type,
                "isOTC": classification.is_otc,
            }
        )
    return rows


__all__ = [
    "CONTROLLED_DRUGS",
    "DrugClassification",
    "OTC_DRUGS",
    "classify_drug",
    "classify_medications",
]
