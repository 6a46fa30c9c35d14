from .cleaner import Cleaner, CleanedBatch, remove_punctuation

__all__ = ["Cleaner", "CleanedBatch", "remove_punctuation"]
