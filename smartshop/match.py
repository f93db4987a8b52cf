# smartshop/match.py
from typing import Dict, List, Optional, Tuple

from rapidfuzz import fuzz, process

from smartshop.schemas.product import Product
from smartshop.utils import remove_accents


def build_product_name_map(products: List[Product]) -> Dict[str, str]:
    """
    [Product(id="a1", name="Sữa Vinamilk 1L"), ...] -> {"a1": "Sữa Vinamilk 1L", ...}
    """
    out: Dict[str, str] = {}
    for p in products:
        name = (p.name or "").strip()
        if name and p.id:
            out[p.id] = name
    return out


def fuzzy_match_products(
    name_raw: Optional[str],
    product_map: Dict[str, str],
    score_cutoff: int = 70,
    limit: int = 3
) -> List[Tuple[str, str, float]]:
    """
    Match a free-text product name against catalog names.
    Accents and case are ignored; WRatio scoring.
    Returns [(product_id, name, score), ...], best first.
    """
    if not name_raw or not product_map:
        return []

    matches = process.extract(
        name_raw,
        product_map,
        scorer=fuzz.WRatio,
        processor=remove_accents,
        score_cutoff=score_cutoff,
        limit=limit
    )
    # With a mapping as choices each match is (name, score, key)
    return [(pid, name, float(score)) for name, score, pid in matches]


def search_products(products: List[Product], query: Optional[str]) -> List[Product]:
    """Accent-insensitive substring search over name and id."""
    needle = remove_accents(query).strip()
    if not needle:
        return list(products)
    return [p for p in products if needle in remove_accents(f"{p.name} {p.id}")]
