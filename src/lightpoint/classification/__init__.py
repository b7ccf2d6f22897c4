"""HMRC case classification: weighted signals, routing and override."""

from lightpoint.classification.classifier import CaseClassifier
from lightpoint.classification.documents import combine_documents
from lightpoint.classification.routing import route

__all__ = ["CaseClassifier", "combine_documents", "route"]
