#!/usr/bin/env python
import os
import string
import logging

from ..exceptions import DirectoryUnavailable

LOG = logging.getLogger(__name__)

__all__ = [
    'split_path',
    'split_extension',
    'join_paths',
    'lower_ascii',
    'is_digit',
    'is_digits',
    'list_files',
    'get_file_size',
]

PATH_SEPARATORS = ('/', '\\')

# Only ascii letters are folded so string lengths and offsets never change
_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


def split_path(filename):
    """
    Split a filename into its folder and its name.
    The folder keeps its trailing separator so it can be prepended as is.

    Forward slashes are looked for first, backslashes second.

    Ex:
        /path/to/file.0001.png
        ->
        ('/path/to/', 'file.0001.png')

    Args:
        filename (str): Absolute or relative filename

    Returns:
        tuple of str: (path, name), path is empty if the filename has none
    """
    for separator in PATH_SEPARATORS:
        pos = filename.rfind(separator)
        if pos != -1:
            return filename[:pos + 1], filename[pos + 1:]
    return '', filename


def split_extension(name):
    """
    Split a name on its last period

    Ex:
        file.0001.png -> ('file.0001', 'png')
        file          -> ('file', '')

    Returns:
        tuple of str: (stem, extension) the extension does not contain the period
    """
    stem, dot, ext = name.rpartition('.')
    if not dot:
        return name, ''
    return stem, ext


def join_paths(*paths):
    """
    Join paths using forward slashes
    """
    return os.path.join(*paths).replace('\\', '/')


def lower_ascii(text):
    """
    Lower case only the ascii letters of a string
    """
    return text.translate(_ASCII_LOWER)


def is_digit(char):
    return '0' <= char <= '9'


def is_digits(text):
    """
    True if the string is made only of ascii digits
    """
    return bool(text) and all(is_digit(c) for c in text)


def list_files(path):
    """
    Names of the files directly inside a folder.
    Folders are skipped, the result is not sorted.

    Args:
        path (str): Folder to list, an empty string is the current folder

    Raises:
        DirectoryUnavailable: if the folder can't be opened

    Returns:
        list of str
    """
    result = []
    try:
        for entry in os.scandir(path or '.'):
            if entry.name in ('.', '..'):
                continue
            if entry.is_dir():
                continue
            result.append(entry.name)
    except OSError as e:
        raise DirectoryUnavailable(path, e) from e
    return result


def get_file_size(path):
    """
    Size of a file in bytes, 0 if it can't be read
    """
    try:
        return os.path.getsize(path)
    except OSError as e:
        LOG.warning("Couldn't read size of {0} - {1}".format(path, e))
        return 0
