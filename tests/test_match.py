"""Tests for product fuzzy matching and catalog search."""
import pytest

from smartshop.match import build_product_name_map, fuzzy_match_products, search_products


@pytest.fixture
def catalog(make_product):
    return [
        make_product(id="A", name="Sữa Vinamilk 1L"),
        make_product(id="B", name="Bánh mì Kinh Đô"),
        make_product(id="C", name="Cà phê G7"),
        make_product(id="sku-42", name="Nước mắm Nam Ngư"),
    ]


class TestBuildProductNameMap:
    """Tests for building product name map."""

    def test_maps_id_to_name(self, catalog):
        result = build_product_name_map(catalog)
        assert result["A"] == "Sữa Vinamilk 1L"
        assert len(result) == 4

    def test_strips_whitespace(self, make_product):
        result = build_product_name_map([make_product(id="A", name="  Sữa  ")])
        assert result == {"A": "Sữa"}

    def test_skips_blank_names(self, make_product):
        result = build_product_name_map([make_product(id="A", name="   ")])
        assert result == {}

    def test_handles_empty_list(self):
        assert build_product_name_map([]) == {}


class TestFuzzyMatchProducts:
    """Tests for fuzzy product matching."""

    def test_exact_match_scores_high(self, catalog):
        matches = fuzzy_match_products("Sữa Vinamilk 1L", build_product_name_map(catalog))

        assert matches[0][:2] == ("A", "Sữa Vinamilk 1L")
        assert matches[0][2] >= 95.0

    def test_accents_and_case_ignored(self, catalog):
        matches = fuzzy_match_products("SUA VINAMILK 1L", build_product_name_map(catalog))

        assert matches[0][0] == "A"
        assert matches[0][2] >= 95.0

    def test_partial_name_matches(self, catalog):
        matches = fuzzy_match_products("Sua Vinamilk", build_product_name_map(catalog))
        assert matches[0][0] == "A"

    def test_unrelated_name_returns_empty(self, catalog):
        assert fuzzy_match_products("Xyz 12345", build_product_name_map(catalog), score_cutoff=85) == []

    def test_empty_name_returns_empty(self, catalog):
        assert fuzzy_match_products("", build_product_name_map(catalog)) == []
        assert fuzzy_match_products(None, build_product_name_map(catalog)) == []

    def test_empty_map_returns_empty(self):
        assert fuzzy_match_products("Sữa", {}) == []

    def test_limit_and_order(self):
        product_map = {
            "1": "Sữa tươi 1L",
            "2": "Sữa tươi 180ml",
            "3": "Sữa tươi ít đường",
            "4": "Sữa tươi không đường",
        }

        matches = fuzzy_match_products("Sữa tươi 1L", product_map, limit=3)

        assert len(matches) == 3
        assert matches[0][0] == "1"
        scores = [score for _, _, score in matches]
        assert scores == sorted(scores, reverse=True)


class TestSearchProducts:

    def test_blank_query_returns_all(self, catalog):
        assert search_products(catalog, None) == catalog
        assert search_products(catalog, "  ") == catalog

    @pytest.mark.parametrize("query,expected", [
        ("sua", ["A"]),
        ("CÀ PHÊ", ["C"]),
        ("kinh do", ["B"]),
        ("nuoc mam", ["sku-42"]),
        ("sku-42", ["sku-42"]),
    ])
    def test_accent_insensitive(self, catalog, query, expected):
        assert [p.id for p in search_products(catalog, query)] == expected
