"""Format priority sequencing."""

from .format_sequencer import FORMAT_PRIORITY_TABLE, CandidateSequence, FormatSequencer

__all__ = ["FORMAT_PRIORITY_TABLE", "CandidateSequence", "FormatSequencer"]
