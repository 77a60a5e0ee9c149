"""Feedback persistence providers.

SQLiteFeedbackStore keeps one row per (article, reply, user, app) in the
``article_reply_feedbacks`` table.  Rows are used to:
    1. Record each user's latest vote and comment on an article-reply pair
    2. Recompute the positive/negative tallies embedded in the article
"""
