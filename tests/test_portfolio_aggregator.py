import unittest
from decimal import Decimal
from types import SimpleNamespace

from services.analytics.aggregator import classify_risk, mean_risk_score, normalize_investments, summarize
from services.analytics.errors import InvalidInput
from services.analytics.types import InvestmentType, RiskLevel


def _inv(type_="Stocks", value=100, risk="Low", sector="Tech", asset_name="Asset"):
    return {"asset_name": asset_name, "type": type_, "value": value, "risk": risk, "sector": sector}


class TestSummarize(unittest.TestCase):
    def test_two_investment_scenario(self):
        summary = summarize([
            _inv("Stocks", 1000, "High", "Tech"),
            _inv("Bonds", 500, "Low", "Finance"),
        ])

        self.assertEqual(summary.total_value, 1500)
        self.assertEqual(summary.risk_score, 2.0)
        self.assertEqual(summary.risk_level, RiskLevel.medium)
        self.assertEqual(
            [(s.key, s.value) for s in summary.type_allocation],
            [("Stocks", 1000), ("Bonds", 500)],
        )
        self.assertEqual(
            [(s.key, s.value) for s in summary.sector_allocation],
            [("Tech", 1000), ("Finance", 500)],
        )

    def test_empty_list_is_zero_state(self):
        summary = summarize([])

        self.assertTrue(summary.is_empty)
        self.assertEqual(summary.total_value, 0)
        self.assertEqual(summary.risk_level, RiskLevel.low)
        self.assertIsNone(summary.risk_score)
        self.assertEqual(summary.type_allocation, [])
        self.assertEqual(summary.sector_allocation, [])

    def test_allocations_sum_to_total(self):
        rows = [
            _inv("Crypto", 250.5, "High", "Tech"),
            _inv("Stocks", 100, "Medium", "Energy"),
            _inv("Crypto", 49.5, "High", "Finance"),
            _inv("Deposits", 300, "Low", "Tech"),
            _inv("Real Estate", 1200, "Medium", "Housing"),
        ]
        summary = summarize(rows)

        self.assertAlmostEqual(sum(s.value for s in summary.type_allocation), summary.total_value)
        self.assertAlmostEqual(sum(s.value for s in summary.sector_allocation), summary.total_value)
        self.assertEqual(summary.total_value, 1900)

    def test_groups_keep_first_seen_order(self):
        summary = summarize([
            _inv("Bonds", 1, sector="B"),
            _inv("Stocks", 2, sector="A"),
            _inv("Bonds", 3, sector="B"),
            _inv("Crypto", 4, sector="C"),
        ])

        self.assertEqual([s.key for s in summary.type_allocation], ["Bonds", "Stocks", "Crypto"])
        self.assertEqual([s.key for s in summary.sector_allocation], ["B", "A", "C"])
        self.assertEqual(summary.type_allocation[0].value, 4)

    def test_deterministic_for_equal_input(self):
        rows = [_inv("Stocks", 10, "High", "Tech"), _inv("Bonds", 20, "Low", "Gov")]
        copy = [dict(r) for r in rows]

        self.assertEqual(summarize(rows), summarize(copy))

    def test_accepts_orm_like_rows(self):
        row = SimpleNamespace(asset_name="House", type="Real Estate", value=Decimal("250000.00"), risk="Medium", sector="Housing")
        summary = summarize([row])

        self.assertEqual(summary.total_value, 250000.0)
        self.assertEqual(summary.type_allocation[0].key, InvestmentType.real_estate.value)


class TestRiskLevel(unittest.TestCase):
    def test_mean_exactly_one_point_five_is_low(self):
        summary = summarize([_inv(risk="Low"), _inv(risk="Medium")])
        self.assertEqual(summary.risk_score, 1.5)
        self.assertEqual(summary.risk_level, RiskLevel.low)

    def test_mean_exactly_two_point_five_is_medium(self):
        summary = summarize([_inv(risk="Medium"), _inv(risk="High")])
        self.assertEqual(summary.risk_score, 2.5)
        self.assertEqual(summary.risk_level, RiskLevel.medium)

    def test_mean_above_two_point_five_is_high(self):
        summary = summarize([_inv(risk="High"), _inv(risk="High"), _inv(risk="Medium")])
        self.assertEqual(summary.risk_level, RiskLevel.high)

    def test_classify_risk_without_score(self):
        self.assertEqual(classify_risk(None), RiskLevel.low)
        self.assertIsNone(mean_risk_score([]))


class TestMalformedRecords(unittest.TestCase):
    def test_unknown_risk_raises(self):
        with self.assertRaises(InvalidInput) as ctx:
            summarize([_inv(), _inv(risk="Unknown")])
        self.assertEqual(ctx.exception.index, 1)
        self.assertEqual(ctx.exception.field, "risk")

    def test_non_numeric_value_raises(self):
        for bad in ("100", None, True, float("nan"), float("inf")):
            with self.subTest(value=bad):
                with self.assertRaises(InvalidInput):
                    summarize([_inv(value=bad)])

    def test_negative_value_raises(self):
        with self.assertRaises(InvalidInput):
            summarize([_inv(value=-1)])

    def test_unknown_type_raises(self):
        with self.assertRaises(InvalidInput):
            summarize([_inv(type_="Options")])

    def test_missing_sector_raises(self):
        with self.assertRaises(InvalidInput):
            summarize([_inv(sector="  ")])

    def test_none_list_raises(self):
        with self.assertRaises(InvalidInput):
            normalize_investments(None)

    def test_invalid_input_is_a_value_error(self):
        with self.assertRaises(ValueError):
            summarize([_inv(risk="Extreme")])


if __name__ == "__main__":
    unittest.main()
