from .errors import WeirdError


def verify_unique(objs, obj_type="IDs"):
    if len(set(objs)) < len(objs):
        raise WeirdError(f"Duplicate {obj_type}: {objs}")


def pluralize(num, thing="edge"):
    """Returns e.g. "1 edge", "0 edges", or "1,234 edges".

    Only regular plurals (adding an "s") are handled; see
    pluralize_children() for "child".
    """
    if num == 1:
        return f"1 {thing}"
    return f"{num:,} {thing}s"


def pluralize_children(num):
    if num == 1:
        return "1 child"
    return f"{num:,} children"


def verify_subset(s1, s2, custom_message=None):
    """Raises a WeirdError if s1 isn't a subset of s2.

    Parameters
    ----------
    s1: collection

    s2: collection

    custom_message: str or None
        Used as the error message, if given. Otherwise the message lists both
        collections, which gets unwieldy for large ones.
    """
    if set(s1) <= set(s2):
        return
    if custom_message is None:
        raise WeirdError(f"{s1} is not a subset of {s2}")
    raise WeirdError(custom_message)


def normalize_id(obj_id):
    """Converts digit strings (e.g. JSON object keys) to ints.

    Stored data keys things by string IDs after going through JSON, but
    internally we use int IDs. Anything else is returned unchanged.
    """
    if isinstance(obj_id, str) and obj_id.isdigit():
        return int(obj_id)
    return obj_id
