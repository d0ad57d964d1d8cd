from smartconnect.spam.classifier import SpamClassifier, SpamVerdict, parse_verdict

__all__ = ["SpamClassifier", "SpamVerdict", "parse_verdict"]
