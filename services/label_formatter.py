DEFAULT_LABEL_LENGTH = 10
ELLIPSIS = ".."


def format_label(value, max_length: int = DEFAULT_LABEL_LENGTH):
    """Shorten tick/legend text only; never apply to data used for sorting."""
    if not isinstance(value, str):
        return value
    if len(value) > max_length:
        return value[:max_length] + ELLIPSIS
    return value
