"""
Feedback capture: validates prospect corrections and packages them for storage.

Modules
-------
reconcile : CorrectionDraft + clamp_weight() + reconcile() — pure validation,
            reports reasons instead of raising.
record    : build_feedback_record() — flattens answers, recommendation and
            feedback into one sheet row.
"""
