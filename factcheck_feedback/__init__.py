"""factcheck-feedback: user feedback on fact-check replies with synced vote tallies."""

__version__ = "0.1.0"
