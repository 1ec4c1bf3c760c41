def no_progress_bar(iterable, **kwargs):
    """Stand-in for ``tqdm`` that hands back ``iterable`` untouched.

    Keyword arguments meant for ``tqdm`` (``total``, ``desc``) are ignored.
    """
    return iterable


def get_progress_bar(progress_bar=True):
    """Returns the wrapper used to report progress over an iterable.

    Parameters
    ----------
    progress_bar : bool, default=True
        If True, ``tqdm.auto.tqdm`` is returned, otherwise :func:`no_progress_bar`.

    Raises
    ------
    ImportError
        If a progress bar is requested and ``tqdm`` is not installed.
    """
    if not progress_bar:
        return no_progress_bar

    try:
        from tqdm.auto import tqdm
    except ImportError:
        raise ImportError(
            "tqdm must be installed to use a progress bar. Either install tqdm or "
            "re-run with progress_bar = False"
        )
    return tqdm
