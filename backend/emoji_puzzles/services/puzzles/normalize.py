def normalize_answer(value: str) -> str:
    """Reduce free text to the key used for answer comparison.

    Trims, case-folds, spells out ``&`` as "and", then keeps only Unicode
    letters and digits, so whitespace, punctuation, symbols and emoji all
    drop out. The result is only ever compared, never stored.
    """
    folded = value.strip().casefold().replace('&', 'and')
    return ''.join(ch for ch in folded if ch.isalnum())


def answers_match(guess: str, answer: str) -> bool:
    return normalize_answer(guess) == normalize_answer(answer)
