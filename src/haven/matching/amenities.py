"""
Normalización de amenities.

Los listings NYC traen amenities como flags + categorías y los legacy
como texto libre. Todo se convierte a una única lista de labels
canónicos antes de filtrar, aprender o scorear.
"""

import re
import unicodedata
from typing import Optional, Union

from haven.models.listing import AmenityFlags, LegacyListing, NYCListing

# Flag -> label canónico (mismo orden que las features del modelo)
AMENITY_LABELS: dict[str, str] = {
    "washer_dryer_in_unit": "In-unit laundry",
    "washer_dryer_in_building": "Laundry in building",
    "dishwasher": "Dishwasher",
    "ac": "AC",
    "pets": "Pet-friendly",
    "fireplace": "Fireplace",
    "gym": "Gym",
    "parking": "Parking",
    "pool": "Pool",
}


class AmenityNormalizer:
    """Mapea texto libre de amenities a labels canónicos por keywords + negaciones."""

    # El orden importa: in-unit antes que laundry genérico
    LABEL_PATTERNS: dict[str, list[str]] = {
        "In-unit laundry": [
            r"\bin[- ]?unit (?:laundry|washer)",
            r"\bwasher ?(?:/|and|&)? ?dryer in[- ]?unit\b",
            r"\bw ?/ ?d in[- ]?unit\b",
        ],
        "Laundry in building": [
            r"\blaundry (?:in|on)[- ](?:building|site|premises)\b",
            r"\b(?:shared|on[- ]site|common) laundry\b",
            r"\blaundry room\b",
        ],
        "Dishwasher": [r"\bdish ?washer\b"],
        "AC": [r"\bac\b", r"\ba ?/ ?c\b", r"\bair[- ]condition(?:ing|ed)?\b", r"\bcentral air\b"],
        "Pet-friendly": [
            r"\bpet[- ]?friendly\b",
            r"\bpets? (?:allowed|ok|welcome)\b",
            r"\bcats? (?:and|&) dogs?\b",
        ],
        "Fireplace": [r"\bfire ?place\b"],
        "Gym": [r"\bgym\b", r"\bfitness (?:center|room)\b"],
        "Parking": [r"\bparking\b", r"\bgarage\b"],
        "Pool": [r"\b(?:swimming )?pool\b"],
    }

    NEGATION_PATTERNS: list[str] = [
        r"\bno\b",
        r"\bnot\b",
        r"\bwithout\b",
        r"\bnot allowed\b",
    ]

    # "City view", "Water views": la base se conserva y el sufijo se unifica
    VIEW_SUFFIX_PATTERN = r"\s*\bviews?$"

    def _normalize(self, text: str) -> str:
        normalized = unicodedata.normalize("NFKD", text or "")
        ascii_text = normalized.encode("ascii", "ignore").decode("ascii")
        return re.sub(r"\s+", " ", ascii_text).strip().lower()

    def _is_negated(self, text: str) -> bool:
        return any(re.search(pattern, text) for pattern in self.NEGATION_PATTERNS)

    def view_label(self, text: str) -> str:
        """Label de vista: tanto "City" como "City views" dan "City view"."""
        base = re.sub(self.VIEW_SUFFIX_PATTERN, "", text.strip(), flags=re.IGNORECASE).strip()
        return f"{base} view" if base else "View"

    def canonical_label(self, text: str) -> Optional[str]:
        """
        Label canónico para un amenity en texto libre.

        Returns:
            El label canónico si matchea un patrón conocido, el texto
            original recortado si no, o None si el texto niega el amenity
            ("No pets") o está vacío.
        """
        original = (text or "").strip()
        if not original:
            return None

        normalized = self._normalize(original)
        for label, patterns in self.LABEL_PATTERNS.items():
            for pattern in patterns:
                if re.search(pattern, normalized):
                    if self._is_negated(normalized):
                        return None
                    return label
        if re.search(self.VIEW_SUFFIX_PATTERN, normalized):
            return None if self._is_negated(normalized) else self.view_label(original)
        return original

    def labels_for_flags(self, flags: AmenityFlags) -> list[str]:
        labels = [label for flag, label in AMENITY_LABELS.items() if getattr(flags, flag)]
        outdoor = (flags.outdoor_area or "").strip()
        if outdoor:
            labels.append(outdoor)
        view = (flags.view or "").strip()
        if view:
            labels.append(self.view_label(view))
        return labels

    def labels_for_text(self, items: list[str]) -> list[str]:
        labels = []
        for item in items:
            label = self.canonical_label(item)
            if label and label not in labels:
                labels.append(label)
        return labels


_normalizer = AmenityNormalizer()


def extract_amenities(listing: Union[NYCListing, LegacyListing]) -> list[str]:
    """Lista canónica de amenities de un listing, sin importar su formato."""
    if isinstance(listing, NYCListing):
        return _normalizer.labels_for_flags(listing.amenities)
    return _normalizer.labels_for_text(listing.amenities)


def normalize_amenity(amenity: str) -> str:
    """Clave de comparación: minúsculas y sin espacios en los bordes."""
    return amenity.lower().strip()
