from .user import User
from .user_profile import UserProfile
from .portfolio import Portfolio
from .investment import Investment
from .analysis_report import AnalysisReport
from .market_data import MarketData
