from engine.normalize import loki, prometheus
from engine.normalize.rest import JsonShape, RestNormalizer, classify

__all__ = ["loki", "prometheus", "JsonShape", "RestNormalizer", "classify"]
