import asyncio
import os
import random
import unittest
from unittest.mock import patch

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base
import models  # noqa: F401
from models.analysis_report import AnalysisReport
from models.investment import Investment
from models.portfolio import Portfolio
from models.user import User
from services.analytics.errors import InvalidInput
from services.investment_service import (
    create_investment,
    delete_investment,
    list_investments,
    update_investment,
)
from services.portfolio_service import get_or_create_portfolio, get_portfolio_summary
from services.profile_service import create_profile, get_profile, update_profile
from services.report_service import create_report, list_reports


def _session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine, autoflush=False)()


class _ServiceTestCase(unittest.TestCase):
    def setUp(self):
        self.db = _session()
        self.user = User(email="owner@example.com", supabase_user_id="uuid-owner")
        self.other = User(email="other@example.com", supabase_user_id="uuid-other")
        self.db.add_all([self.user, self.other])
        self.db.commit()

    def tearDown(self):
        self.db.close()

    def _add(self, user_id=None, **overrides):
        fields = {"asset_name": "Index Fund", "type": "Stocks", "value": 1000.0, "risk": "High", "sector": "Tech"}
        fields.update(overrides)
        return create_investment(self.db, user_id or self.user.id, **fields)


class TestPortfolioService(_ServiceTestCase):
    def test_get_or_create_is_idempotent(self):
        first = get_or_create_portfolio(self.db, self.user.id)
        second = get_or_create_portfolio(self.db, self.user.id)

        self.assertEqual(first.id, second.id)
        self.assertEqual(self.db.query(Portfolio).filter_by(user_id=self.user.id).count(), 1)
        self.assertEqual(first.total_investments, 0.0)

    def test_summary_for_new_user_is_zero_state(self):
        summary = get_portfolio_summary(self.db, self.user.id)

        self.assertEqual(summary["total_value"], 0)
        self.assertEqual(summary["risk_level"], "Low")
        self.assertEqual(summary["type_allocation"], [])
        self.assertEqual(summary["sector_allocation"], [])

    def test_summary_with_weights(self):
        self._add(type="Stocks", value=1000.0, risk="High", sector="Tech")
        self._add(type="Bonds", value=500.0, risk="Low", sector="Finance")
        self._add(user_id=self.other.id, value=99999.0)

        summary = get_portfolio_summary(self.db, self.user.id)

        self.assertEqual(summary["total_value"], 1500.0)
        self.assertEqual(summary["risk_level"], "Medium")
        self.assertEqual(
            [(a["key"], a["value"], a["weight"]) for a in summary["type_allocation"]],
            [("Stocks", 1000.0, 66.67), ("Bonds", 500.0, 33.33)],
        )
        self.assertEqual([a["key"] for a in summary["sector_allocation"]], ["Tech", "Finance"])

    def test_malformed_stored_row_raises(self):
        portfolio = get_or_create_portfolio(self.db, self.user.id)
        self.db.add(Investment(
            user_id=self.user.id, portfolio_id=portfolio.id, asset_name="Mystery",
            type="Stocks", value=10.0, risk="Unknown", sector="Tech",
        ))
        self.db.commit()

        with self.assertRaises(InvalidInput):
            get_portfolio_summary(self.db, self.user.id)


class TestInvestmentService(_ServiceTestCase):
    def test_mutations_refresh_portfolio_total(self):
        a = self._add(value=1000.0)
        b = self._add(value=250.0)
        portfolio = get_or_create_portfolio(self.db, self.user.id)
        self.assertEqual(portfolio.total_investments, 1250.0)

        update_investment(self.db, self.user.id, a.id, value=400.0)
        self.db.refresh(portfolio)
        self.assertEqual(portfolio.total_investments, 650.0)

        delete_investment(self.db, self.user.id, b.id)
        self.db.refresh(portfolio)
        self.assertEqual(portfolio.total_investments, 400.0)

    def test_update_ignores_none_fields(self):
        inv = self._add(sector="Energy")
        updated = update_investment(self.db, self.user.id, inv.id, sector=None, risk="Low")

        self.assertEqual(updated.sector, "Energy")
        self.assertEqual(updated.risk, "Low")

    def test_investments_are_scoped_to_owner(self):
        inv = self._add()

        self.assertEqual(list_investments(self.db, self.other.id), [])
        with self.assertRaises(ValueError):
            update_investment(self.db, self.other.id, inv.id, value=1.0)
        with self.assertRaises(ValueError):
            delete_investment(self.db, self.other.id, inv.id)


class TestProfileService(_ServiceTestCase):
    def test_create_update_and_duplicate(self):
        create_profile(self.db, self.user.id, first_name="Ada", last_name="Lovelace", email="ada@example.com")
        with self.assertRaises(ValueError):
            create_profile(self.db, self.user.id, first_name="Ada", last_name="L", email="ada@example.com")

        update_profile(self.db, self.user.id, phone="555-0100")
        profile = get_profile(self.db, self.user.id)
        self.assertEqual(profile.phone, "555-0100")
        self.assertEqual(profile.first_name, "Ada")

    def test_update_missing_profile(self):
        with self.assertRaises(ValueError):
            update_profile(self.db, self.user.id, phone="1")


class TestReportService(_ServiceTestCase):
    def _create(self, seed=0):
        return asyncio.run(create_report(self.db, self.user.id, rng=random.Random(seed), feed_url=""))

    def test_report_persisted_with_risk_and_prediction(self):
        self._add(type="Stocks", value=1000.0, risk="High", sector="Tech")
        self._add(type="Bonds", value=500.0, risk="Low", sector="Finance")

        with patch.dict(os.environ, {"SUGGESTION_SELECTION": "priority"}):
            report = self._create()

        self.assertEqual(report.risk, "Medium")
        paragraphs = report.prediction.split("\n\n")
        self.assertEqual(len(paragraphs), 5)
        self.assertIn("asset types", paragraphs[0])
        self.assertIn("Well-known stocks", paragraphs[2])

    def test_report_uses_stored_market_ticks(self):
        from services.market_data_service import record_tick

        record_tick(self.db, "AAPL", 150.0)
        record_tick(self.db, "MSFT", 300.0)
        record_tick(self.db, "GOOGL", 140.0)
        record_tick(self.db, "AMZN", 160.0)
        self._add()

        with patch.dict(os.environ, {"SUGGESTION_SELECTION": "priority"}):
            report = self._create()

        self.assertIn("MSFT, AMZN and AAPL", report.prediction)

    def test_empty_portfolio_report_is_low(self):
        report = self._create()
        self.assertEqual(report.risk, "Low")
        self.assertEqual(self.db.query(Portfolio).filter_by(user_id=self.user.id).count(), 1)

    def test_reports_accumulate_newest_first(self):
        first = self._create(seed=1)
        second = self._create(seed=2)

        reports = list_reports(self.db, self.user.id)
        self.assertEqual([r.id for r in reports], [second.id, first.id])
        self.assertEqual(list_reports(self.db, self.other.id), [])

    def test_invalid_rows_write_nothing(self):
        portfolio = get_or_create_portfolio(self.db, self.user.id)
        self.db.add(Investment(
            user_id=self.user.id, portfolio_id=portfolio.id, asset_name="Bad",
            type="Stocks", value=10.0, risk="Unknown", sector="Tech",
        ))
        self.db.commit()

        with self.assertRaises(InvalidInput):
            self._create()
        self.assertEqual(self.db.query(AnalysisReport).count(), 0)


if __name__ == "__main__":
    unittest.main()
