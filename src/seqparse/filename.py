#!/usr/bin/env python
import logging
import itertools
import collections

from .utils import split_path, is_digit

LOG = logging.getLogger(__name__)

__all__ = [
    'TEXT',
    'NUMBER',
    'FileNameElement',
    'FileNameContent',
    'split_elements',
    'decompose',
    'match_files',
]

TEXT = 'text'
NUMBER = 'number'


class FileNameElement(collections.namedtuple('FileNameElement', ['data', 'type'])):
    """
    Piece of a filename, either a run of text or a run of digits.
    Digits are kept as text so the padding is never lost.
    """
    __slots__ = ()

    @property
    def isNumber(self):
        return self.type == NUMBER

    @property
    def isText(self):
        return self.type == TEXT


def split_elements(name):
    """
    Split a name into alternating runs of text and digits

    Ex:
        file08_001.png
        ->
        [('file', TEXT), ('08', NUMBER), ('_', TEXT), ('001', NUMBER), ('.png', TEXT)]

    Returns:
        list of FileNameElement
    """
    result = []
    for isNumber, chars in itertools.groupby(name, key=is_digit):
        result.append(FileNameElement(''.join(chars), NUMBER if isNumber else TEXT))
    return result


def _valid_padding(first, second):
    """
    Whether two different digit strings could come from the same padding.

    Ex:
        99, 100     -> True   (100 is just bigger than ## allows)
        0001, 5     -> True   (different numbers)
        1, 01       -> False  (same number, different padding)
        010, 1000   -> False  (010 can't be written with less than 3 digits)
    """
    if len(first) == len(second):
        return True
    shorter, longer = sorted((first, second), key=len)
    if shorter[0] == '0' and len(shorter) > 1:
        return False
    if longer[0] == '0' and int(longer) == int(shorter):
        return False
    return True


def match_files(first, second):
    """
    Check if two files could belong to the same sequence

    Both names must have the same layout, identical text and numbers at
    the same places. The numbers that differ are candidates for the frame
    number, the ones changing the least are returned.

    Ex:
        myfile001_000.jpg, myfile001_001.jpg -> [1]
        file01_01.jpg, file02_02.jpg         -> [0, 1]
        file001.jpg, other002.jpg            -> None

    Args:
        first (FileNameContent)
        second (FileNameContent)

    Returns:
        list of int or None: index of the frame number among the numbers of the name
    """
    elements = first.orderedElements
    otherElements = second.orderedElements
    if len(elements) != len(otherElements):
        return None

    candidates = []
    numberIndex = 0
    for element, other in zip(elements, otherElements):
        if element.type != other.type:
            return None
        if element.isText:
            if element.data != other.data:
                return None
            continue
        if element.data != other.data and _valid_padding(element.data, other.data):
            candidates.append((numberIndex, abs(int(element.data) - int(other.data))))
        numberIndex += 1

    if not candidates:
        # Identical names, or only padding differences
        return None

    minimum = min(delta for _, delta in candidates)
    return [index for index, delta in candidates if delta == minimum]


class FileNameContent(object):
    """
    Description of a single file name

    Args:
        absoluteFileName (str): Filename, optionally with its path
    """

    def __init__(self, absoluteFileName):
        if not isinstance(absoluteFileName, str):
            raise TypeError("Filename must be a string, got {0}".format(type(absoluteFileName)))
        self._absoluteFileName = absoluteFileName
        self._path, self._name = split_path(absoluteFileName)
        self._elements = tuple(split_elements(self._name))
        self._numbers = tuple(e.data for e in self._elements if e.isNumber)

        self._extension = ''
        if '.' in self._name:
            self._extension = self._name.rpartition('.')[2]

        self._pattern = self._build_pattern()

    def __eq__(self, other):
        if not isinstance(other, FileNameContent):
            return NotImplemented
        return self._absoluteFileName == other._absoluteFileName

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash(self._absoluteFileName)

    def __repr__(self):
        return "{0}({1!r})".format(self.__class__.__name__, self._absoluteFileName)

    def __str__(self):
        return self._absoluteFileName

    def _build_pattern(self):
        # Each number is tagged with its index so it can be told apart later
        result = []
        numberIndex = 0
        for element in self._elements:
            if element.isNumber:
                result.append('#' * len(element.data) + str(numberIndex))
                numberIndex += 1
            else:
                result.append(element.data)
        return ''.join(result)

    @property
    def absoluteFileName(self):
        """
        Filename as given on init
        """
        return self._absoluteFileName

    @property
    def path(self):
        """
        Folder of the file with its trailing separator

        Ex:
            /Users/Lala/Pictures/
        """
        return self._path

    @property
    def name(self):
        """
        Filename without its path
        """
        return self._name

    @property
    def extension(self):
        return self._extension

    @property
    def orderedElements(self):
        return self._elements

    @property
    def numbers(self):
        """
        Digit strings of the name, left to right
        """
        return self._numbers

    @property
    def textElements(self):
        return [e.data for e in self._elements if e.isText]

    @property
    def hasExactlyOneNumber(self):
        return len(self._numbers) == 1

    @property
    def isComposedOnlyOfDigits(self):
        """
        True for names like 0001 or 0001.png
        """
        return len(self._elements) in (1, 2) and self._elements[0].isNumber

    @property
    def canonicalPattern(self):
        """
        Name with every number replaced by # and followed by its index

        Ex:
            file08_001.png
            ->
            file##0_###1.png
        """
        return self._pattern

    def get_number(self, index):
        """
        Digit string of a number in the name

        Ex:
            file08_001.png, 1
            ->
            '001'

        Returns:
            str or None: None if the name has no number at this index
        """
        if 0 <= index < len(self._numbers):
            return self._numbers[index]
        return None

    def match(self, other):
        """
        See match_files
        """
        return match_files(self, other)

    def generate_pattern(self, indexes):
        """
        Pattern of the file with the frame number at the given number indexes.
        Other numbers are written back as they are.

        Ex:
            /path/file08_001.png, [1]
            ->
            /path/file08_###.png

        Args:
            indexes (list of int): Index of the numbers to turn into #

        Returns:
            str or None: None if an index doesn't exist in the name
        """
        for index in indexes:
            if not 0 <= index < len(self._numbers):
                return None
        result = [self._path]
        numberIndex = 0
        for element in self._elements:
            if element.isNumber:
                if numberIndex in indexes:
                    result.append('#' * len(element.data))
                else:
                    result.append(element.data)
                numberIndex += 1
            else:
                result.append(element.data)
        return ''.join(result)


def decompose(filename):
    """
    Shortcut for FileNameContent(filename)
    """
    return FileNameContent(filename)
