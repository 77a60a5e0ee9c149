"""Command-line tools for factcheck-feedback.

- ``python -m factcheck_feedback.cli recount``: reconcile feedback tallies.
- ``python -m factcheck_feedback.cli block-user``: block a user.

Each command constructs its own providers rather than relying on the API
server's wiring, because CLI tools run as one-shot scripts.
"""
