from news.engines.base import SummarizationEngine, UnavailableEngine
from news.engines.factory import create_engine

__all__ = ["SummarizationEngine", "UnavailableEngine", "create_engine"]
