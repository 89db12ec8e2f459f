import os
import pathlib
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname


def path_to_uri(path: str) -> str:
    """
    Converts a file system path to a file:// uri.
    """
    return pathlib.Path(os.path.abspath(path)).as_uri()


def uri_to_path(uri: str) -> str:
    """
    Converts a file:// uri to a file system path.

    :param uri: the uri; a plain path is returned unchanged
    """
    parsed = urlparse(uri)
    if parsed.scheme != "file":
        if parsed.scheme == "" or len(parsed.scheme) == 1:  # plain path (possibly with a Windows drive letter)
            return uri
        raise ValueError(f"Not a file uri: {uri}")
    host = "{0}{0}{mnt}{0}".format(os.path.sep, mnt=parsed.netloc) if parsed.netloc else ""
    return os.path.normpath(os.path.join(host, url2pathname(unquote(parsed.path))))
