CHARS_PER_WORD = 5.0


def accuracy_percent(target_len: int, mistakes: int) -> float:
    """
    Share of the target typed correctly on first entry, 0-100 scale.
    Not clamped: erasing and retyping wrong characters keeps adding
    mistakes, so they can exceed target_len and the result goes negative.
    """
    if target_len <= 0:
        raise ValueError("target_len must be positive")
    return 100.0 * (target_len - mistakes) / target_len


def words_per_minute(char_count: int, seconds: float) -> float:
    # WPM = (chars / 5) / (elapsed minutes)
    if seconds <= 0:
        return 0.0
    return (char_count / CHARS_PER_WORD) / (seconds / 60.0)
