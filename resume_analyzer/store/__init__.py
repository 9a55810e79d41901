from .analysis_store import AnalysisStore, SqliteAnalysisStore, get_default_store

__all__ = ["AnalysisStore", "SqliteAnalysisStore", "get_default_store"]
