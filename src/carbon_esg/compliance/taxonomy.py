# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Mandatory reporting categories (CSRD / BEGES completeness).

The taxonomy is a plain data table: each category lists the tokens that
identify an entry belonging to it.  Matching logic lives in a single
generic function so that adding a category never touches code.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from carbon_esg.data.models import ActivityEntry, MandatoryCategory, Scope, normalize_text
from carbon_esg.errors import TaxonomyError


def _category(id: str, name: str, scope: Scope, keywords: Iterable[str]) -> MandatoryCategory:
    return MandatoryCategory(
        id=id,
        name=name,
        scope=scope,
        keywords=frozenset(normalize_text(k) for k in keywords),
    )


# ---------------------------------------------------------------------------
# The nine mandatory categories (3 scope 1, 2 scope 2, 4 scope 3)
# ---------------------------------------------------------------------------
MANDATORY_CATEGORIES: tuple[MandatoryCategory, ...] = (
    # Scope 1
    _category("heating", "Chauffage (Gaz/Fioul)", Scope.scope1, [
        "gaz", "fioul", "chauffage", "combustible", "combustibles", "gaznaturel",
        "fiouldomestique", "fioullourd", "propane", "butane", "charbon", "bois",
        "granules", "diesel", "gazole", "essence", "coke", "lignite", "gpl",
    ]),
    _category("fleet", "Flotte de véhicules", Scope.scope1, [
        "vehicule", "vehicules", "voiture", "camion", "utilitaire", "flotte", "km",
        "kilometr", "tracteur", "chariot", "poids lourd", "hybride", "electrique",
    ]),
    _category("refrigerants", "Fluides frigorigènes (Climatisation)", Scope.scope1, [
        "frigorigene", "refrigerant", "refrigerants", "climatisation", "froid", "r-",
        "r134", "r404", "r410", "r407", "r32", "r22", "r11", "r12", "hfc", "cfc", "hcfc",
    ]),
    # Scope 2
    _category("electricity", "Électricité", Scope.scope2, [
        "electricite", "electrique", "kwh", "mwh", "energie", "solaire", "eolien",
        "hydraulique", "mix", "tunisie", "france", "allemagne",
    ]),
    _category("heat_networks", "Réseaux de chaleur/froid", Scope.scope2, [
        "vapeur", "chaleur", "reseau", "eau chaude", "chauffage urbain", "district",
        "vapeurindustrielle", "eauchaude",
    ]),
    # Scope 3
    _category("purchases", "Achats de biens et services", Scope.scope3, [
        "achat", "achats", "bien", "service", "fournisseur", "approvisionnement",
        "matiere", "materiaux", "equipement", "immobilisation", "acier", "aluminium",
        "beton", "ciment", "verre", "plastique", "papier", "cuivre", "alimentation",
        "boeuf", "porc", "volaille", "poisson", "lait", "fromage", "oeuf", "legumes",
        "fruits", "cereales", "agneau", "numerique", "email", "streaming",
        "visioconference", "stockage", "cloud", "cat1", "cat2",
    ]),
    _category("waste", "Déchets", Scope.scope3, [
        "dechet", "dechets", "recyclage", "enfouissement", "incineration",
        "valorisation", "ordure", "tri", "compostage", "methanisation", "cat5",
    ]),
    _category("travel", "Déplacements professionnels/Domicile-travail", Scope.scope3, [
        "deplacement", "professionnel", "domicile", "travail", "trajet", "avion",
        "train", "bus", "metro", "tramway", "voyage", "mission", "tgv", "ter",
        "passager", "court-courrier", "long-courrier", "moyen-courrier", "cat6", "cat7",
    ]),
    _category("freight", "Fret (Transport de marchandises)", Scope.scope3, [
        "fret", "marchandise", "logistique", "livraison", "expedition", "amont",
        "aval", "distribution", "transport routier", "transport ferroviaire",
        "transport maritime", "transport aerien", "transport fluvial", "t.km",
        "poids moyen", "poids lourd", "cargo", "cat4", "cat9",
    ]),
)


def validate_taxonomy(categories: Sequence[MandatoryCategory]) -> None:
    """Raise :class:`TaxonomyError` if *categories* cannot be scored."""
    if not categories:
        raise TaxonomyError("Taxonomy must contain at least one category")

    seen: set[str] = set()
    for cat in categories:
        if not cat.id:
            raise TaxonomyError(f"Category '{cat.name}' has an empty id")
        if cat.id in seen:
            raise TaxonomyError(f"Duplicate category id '{cat.id}'")
        seen.add(cat.id)
        if not cat.keywords:
            raise TaxonomyError(f"Category '{cat.id}' has no keywords")
        for kw in cat.keywords:
            if not kw.strip():
                raise TaxonomyError(f"Category '{cat.id}' has a blank keyword")
            if kw != normalize_text(kw):
                raise TaxonomyError(
                    f"Keyword '{kw}' in category '{cat.id}' is not normalised"
                )


def matches_category(entry: ActivityEntry, category: MandatoryCategory) -> bool:
    """True when *entry* fills *category*.

    Both conditions are required: a keyword hit in the entry text, and
    strictly positive emissions.  The entry must also be in the same scope.
    """
    if entry.scope != category.scope:
        return False
    if not entry.emissions > 0:
        return False
    text = entry.search_text
    return any(kw in text for kw in category.keywords)


validate_taxonomy(MANDATORY_CATEGORIES)
