"""Enumeration types for FinVoice data models."""

from enum import Enum


class PipelineStage(str, Enum):
    RECEIVED = "received"
    TRANSCRIBED = "transcribed"
    RETRIEVED = "retrieved"
    GENERATED = "generated"
    PARSED = "parsed"
    SYNTHESIZED = "synthesized"
    FAILED = "failed"


class ContextStatus(str, Enum):
    FOUND = "found"
    NO_MATCHES = "no_matches"
    UNAVAILABLE = "unavailable"
