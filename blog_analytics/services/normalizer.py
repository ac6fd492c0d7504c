"""Blog URL normalization."""


def normalize_url(url: str) -> str:
    """Canonicalize a user-supplied blog address.

    Trims whitespace, strips every trailing slash and adds ``https://`` when
    no HTTP scheme is present. The result is also the duplicate-detection key.

    Args:
        url: Blog address as typed by the curator

    Returns:
        Fetchable base URL without a trailing slash
    """
    clean_url = url.strip().rstrip("/")

    if not clean_url.startswith("http"):
        clean_url = "https://" + clean_url

    return clean_url
