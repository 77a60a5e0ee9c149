"""Allow ``python -m factcheck_feedback.cli`` execution."""

from factcheck_feedback.cli.admin import main

main()
