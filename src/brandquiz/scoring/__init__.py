"""Scoring engine and response recording."""

from brandquiz.scoring.engine import ScoringEngine
from brandquiz.scoring.responses import ResponseRecorder, Submission, SubmittedAnswer, hash_ip

__all__ = ["ScoringEngine", "ResponseRecorder", "Submission", "SubmittedAnswer", "hash_ip"]
