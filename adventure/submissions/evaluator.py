def normalize_submission_text(text: str) -> str:
    """Trim surrounding whitespace and lower-case."""
    return (text or "").strip().lower()


def evaluate(submitted_text: str, canonical_solution: str) -> bool:
    """
    Decide whether a submission passes.

    The submission passes when the canonical solution, trimmed and
    lower-cased, appears anywhere inside the trimmed, lower-cased
    submission. Surrounding markup, comments or extra code are allowed.
    The code is never executed.
    """
    return normalize_submission_text(canonical_solution) in normalize_submission_text(submitted_text)
