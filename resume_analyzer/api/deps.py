from resume_analyzer.services.augmentation import ResumeAugmenter, get_default_augmenter
from resume_analyzer.store import AnalysisStore, get_default_store


def get_store() -> AnalysisStore:
    return get_default_store()


def get_augmenter() -> ResumeAugmenter:
    return get_default_augmenter()
