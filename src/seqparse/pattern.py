#!/usr/bin/env python
"""
Patterns describing a family of filenames

A pattern is literal text mixed with variables:

    ####            frame number padded to the count of #
    %04d            frame number padded to 4 digits
    %d              frame number without padding
    %v              short view name, l / r / view<N>
    %V              long view name, left / right / view<N>

Ex:
    /path/to/shot_%V.####.exr
    ->
    /path/to/shot_left.0001.exr
    /path/to/shot_right.0001.exr
"""
import logging
import collections

from .exceptions import SequenceParsingError, TokenizeError, RenderError
from .utils import split_path, split_extension, lower_ascii, is_digit, is_digits

LOG = logging.getLogger(__name__)

__all__ = [
    'FRAME_NUMBER',
    'SHORT_VIEW',
    'LONG_VIEW',
    'NO_VIEW',
    'Literal',
    'Variable',
    'Pattern',
    'PatternMatch',
    'tokenize',
    'extract_pattern_parts',
    'check_variable',
    'match_pattern',
    'generate_filename',
]

FRAME_NUMBER = 'frameNumber'
SHORT_VIEW = 'shortView'
LONG_VIEW = 'longView'

VARIABLE_KINDS = [
    FRAME_NUMBER,
    SHORT_VIEW,
    LONG_VIEW,
]

# View number used when a pattern has no view variable
NO_VIEW = -1

SHORT_VIEW_NAMES = {0: 'l', 1: 'r'}
LONG_VIEW_NAMES = {0: 'left', 1: 'right'}
VIEW_PREFIX = 'view'

PRINTF_TERMINATORS = {
    'd': FRAME_NUMBER,
    'v': SHORT_VIEW,
    'V': LONG_VIEW,
}

PatternMatch = collections.namedtuple('PatternMatch', ['frame', 'view'])


class Literal(object):
    """
    Run of literal text in a pattern.
    The text is stored as given but compared without case.
    """

    def __init__(self, text):
        self._text = text
        self._lowered = lower_ascii(text)

    def __len__(self):
        return len(self._text)

    def __eq__(self, other):
        if isinstance(other, Literal):
            return self._lowered == other._lowered
        if isinstance(other, str):
            return self._lowered == lower_ascii(other)
        return NotImplemented

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash(self._lowered)

    def __repr__(self):
        return "{0}({1!r})".format(self.__class__.__name__, self._text)

    @property
    def text(self):
        return self._text

    @property
    def lowered(self):
        return self._lowered

    def find(self, filename, start=0):
        """
        Case insensitive search of this text in a filename

        Returns:
            int: position of the text, -1 if not found
        """
        return lower_ascii(filename).find(self._lowered, start)


class Variable(object):
    """
    Variable of a pattern

    Args:
        kind (str): FRAME_NUMBER, SHORT_VIEW or LONG_VIEW
        token (str): Text of the variable in the pattern, ex: '####', '%04d', '%v'
        precedingLiteralCount (int): How many literal characters come before the variable
        width (int, optional): Padding of a frame number variable, None if not padded
    """

    def __init__(self, kind, token, precedingLiteralCount, width=None):
        self._kind = kind
        self._token = token
        self._precedingLiteralCount = precedingLiteralCount
        self._width = width

    def __eq__(self, other):
        if not isinstance(other, Variable):
            return NotImplemented
        return (self._kind, self._token, self._precedingLiteralCount, self._width) == \
            (other._kind, other._token, other._precedingLiteralCount, other._width)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash((self._kind, self._token, self._precedingLiteralCount, self._width))

    def __len__(self):
        return len(self._token)

    def __repr__(self):
        return "{0}({1!r}, {2!r}, {3})".format(
            self.__class__.__name__, self._kind, self._token, self._precedingLiteralCount)

    @property
    def kind(self):
        return self._kind

    @property
    def token(self):
        return self._token

    @property
    def text(self):
        return self._token

    @property
    def precedingLiteralCount(self):
        return self._precedingLiteralCount

    @property
    def width(self):
        return self._width

    @property
    def isFrameNumber(self):
        return self._kind == FRAME_NUMBER

    @property
    def isView(self):
        return self._kind in (SHORT_VIEW, LONG_VIEW)

    @property
    def hashWidth(self):
        """
        Padding given with # characters, None for printf style variables
        """
        if self.isFrameNumber and self._token.startswith('#'):
            return self._width
        return None

    @property
    def printfWidth(self):
        """
        Padding given with %0Nd, None for # and %d variables
        """
        if self.isFrameNumber and self._token.startswith('%'):
            return self._width
        return None

    def check(self, text, kind=None):
        return check_variable(self, text, kind=kind)

    def format(self, frameNumber, viewNumber=NO_VIEW):
        """
        Expand the variable for a frame and view

        Ex:
            %04d, frameNumber=12 -> 0012
            %V, viewNumber=1     -> right
            %v, viewNumber=3     -> view3

        Raises:
            RenderError: if the variable kind is unknown
        """
        if self._kind == FRAME_NUMBER:
            if self._width:
                return '{0:0{1}d}'.format(int(frameNumber), self._width)
            return str(int(frameNumber))
        elif self._kind == SHORT_VIEW:
            return SHORT_VIEW_NAMES.get(viewNumber, '{0}{1}'.format(VIEW_PREFIX, viewNumber))
        elif self._kind == LONG_VIEW:
            return LONG_VIEW_NAMES.get(viewNumber, '{0}{1}'.format(VIEW_PREFIX, viewNumber))
        raise RenderError("Unrecognized variable: {0}".format(self._token))


class Pattern(object):
    """
    Tokenized pattern

    Built by tokenize, holds the ordered literal runs and variables
    of the pattern name plus its path and extension.

    Ex:
        /path/to/file%04dname###.jpg
        ->
        path:       /path/to/
        extension:  jpg
        elements:   Literal('file'), Variable('%04d', 4), Literal('name'),
                    Variable('###', 8), Literal('.jpg')
    """

    def __init__(self, string, path='', elements=None, extension=''):
        self._string = string
        self._path = path
        self._extension = extension
        self._elements = tuple(elements or ())
        self._literals = tuple(e for e in self._elements if isinstance(e, Literal))
        self._variables = tuple(e for e in self._elements if isinstance(e, Variable))
        self._literalText = ''.join(l.lowered for l in self._literals)

    def __iter__(self):
        return iter(self._elements)

    def __len__(self):
        return len(self._elements)

    def __repr__(self):
        return "{0}({1!r})".format(self.__class__.__name__, self._string)

    def __str__(self):
        return self._string

    @property
    def string(self):
        """
        Pattern as it was given to tokenize
        """
        return self._string

    @property
    def path(self):
        return self._path

    @property
    def extension(self):
        return self._extension

    @property
    def elements(self):
        return self._elements

    @property
    def literals(self):
        return self._literals

    @property
    def variables(self):
        return self._variables

    @property
    def literalText(self):
        """
        All literal characters of the pattern, lower cased, in order
        """
        return self._literalText

    @property
    def hasFrameNumber(self):
        return any(v.isFrameNumber for v in self._variables)

    @property
    def hasView(self):
        return any(v.isView for v in self._variables)

    def match(self, filename):
        return match_pattern(filename, self)

    def generate(self, frameNumber, viewNumber=NO_VIEW):
        return generate_filename(self, frameNumber, viewNumber)


class _PatternScanner(object):
    """
    Left to right scan of a pattern name, see extract_pattern_parts
    """

    def __init__(self, string):
        self.string = string
        self.elements = []
        self.literal = []
        self.printf = []
        self.literalCount = 0

    def flush_literal(self):
        if self.literal:
            text = ''.join(self.literal)
            self.elements.append(Literal(text))
            self.literalCount += len(text)
            self.literal = []

    def add_variable(self, kind, token, width=None):
        self.flush_literal()
        self.elements.append(Variable(kind, token, self.literalCount, width=width))

    def abort_printf(self):
        # Not a supported printf style variable, keep it as text
        self.literal.extend(self.printf)
        self.printf = []

    def close_printf(self, terminator):
        digits = ''.join(self.printf[1:])
        token = '%' + digits + terminator
        kind = PRINTF_TERMINATORS[terminator]
        self.printf = []
        if kind == FRAME_NUMBER:
            width = int(digits) if digits else None
            self.add_variable(kind, token, width=width)
        elif digits:
            raise TokenizeError(self.string, "Padded view variables are not supported: {0}".format(token))
        else:
            self.add_variable(kind, token)

    def scan(self):
        string = self.string
        size = len(string)
        i = 0
        while i < size:
            c = string[i]
            if self.printf:
                if c == '%':
                    raise TokenizeError(self.string, "Nested variables are not supported: {0}".format(self.string))
                if c in PRINTF_TERMINATORS:
                    self.close_printf(c)
                elif is_digit(c) and (len(self.printf) > 1 or c == '0'):
                    self.printf.append(c)
                else:
                    self.abort_printf()
                    # The character is handled again outside of the variable
                    continue
                i += 1
            elif c == '#':
                end = i
                while end < size and string[end] == '#':
                    end += 1
                self.add_variable(FRAME_NUMBER, string[i:end], width=end - i)
                i = end
            elif c == '%':
                following = string[i + 1] if i + 1 < size else ''
                if not following:
                    self.literal.append(c)
                    i += 1
                elif following == '%':
                    # Escaped
                    self.literal.append(c)
                    i += 2
                else:
                    self.printf.append(c)
                    i += 1
            else:
                self.literal.append(c)
                i += 1

        if self.printf:
            self.abort_printf()
        self.flush_literal()
        return self.elements


def extract_pattern_parts(patternUnPathedWithoutExt, patternExtension=''):
    """
    Split a pattern name into its literal runs and variables, ordered left to right

    Ex:
        file%04dname###, jpg
        ->
        [Literal('file'), Variable('%04d', 4), Literal('name'), Variable('###', 8), Literal('.jpg')]

    The second value of each variable is the count of literal characters found before it.

    Args:
        patternUnPathedWithoutExt (str): Pattern without its path and extension
        patternExtension (str, optional): Extension without the period

    Raises:
        TokenizeError: if the pattern nests variables or pads a view variable

    Returns:
        list of Literal and Variable
    """
    elements = _PatternScanner(patternUnPathedWithoutExt).scan()
    if patternExtension:
        elements.append(Literal('.' + patternExtension))
    return elements


def tokenize(pattern):
    """
    Tokenize a full pattern

    Ex:
        /path/to/shot_%v.####.exr

    Args:
        pattern (str): Pattern with an optional path and extension

    Raises:
        TypeError: if the pattern isn't a string
        TokenizeError: if the pattern uses unsupported variables

    Returns:
        Pattern
    """
    if not isinstance(pattern, str):
        raise TypeError("Pattern must be a string, got {0}".format(type(pattern)))
    path, name = split_path(pattern)
    stem, extension = split_extension(name)
    if not stem:
        # No extension, ex: '.####'
        stem, extension = name, ''
    elements = extract_pattern_parts(stem, extension)
    return Pattern(pattern, path=path, elements=elements, extension=extension)


def _parse_view_name(name):
    if name.startswith(VIEW_PREFIX) and is_digits(name[len(VIEW_PREFIX):]):
        return True, int(name[len(VIEW_PREFIX):])
    return False, None


def check_variable(variable, text, kind=None):
    """
    Check that a piece of filename is a valid value for a variable

    Frame numbers must have at least as many digits as the variable width.
    More digits are only allowed for bigger numbers, not for extra padding.

    Ex:
        ####, 0012   -> (True, 12)
        ####, 12     -> (False, None)
        ####, 12345  -> (True, 12345)
        ####, 01234  -> (False, None)
        %v, r        -> (True, 1)
        %V, view3    -> (True, 3)

    Args:
        variable (Variable): Variable of the pattern
        text (str): Piece of the filename
        kind (str, optional): How the piece was read from the filename.
            If supplied, it must match the variable kind.

    Raises:
        SequenceParsingError: if the variable kind is unknown

    Returns:
        tuple: (valid, frameNumberOrViewNumber)
    """
    if kind is not None and kind != variable.kind:
        return False, None

    if variable.kind == SHORT_VIEW:
        lowered = lower_ascii(text)
        if lowered == 'l':
            return True, 0
        elif lowered == 'r':
            return True, 1
        return _parse_view_name(lowered)

    elif variable.kind == LONG_VIEW:
        lowered = lower_ascii(text)
        if lowered == 'left':
            return True, 0
        elif lowered == 'right':
            return True, 1
        return _parse_view_name(lowered)

    elif variable.kind == FRAME_NUMBER:
        if not is_digits(text):
            return False, None
        width = variable.width
        if width:
            if len(text) < width:
                return False, None
            # Extra padding on numbers bigger than the width is not allowed
            if len(text) > width and text[0] == '0':
                return False, None
        return True, int(text)

    raise SequenceParsingError("Variable token unrecognized: {0}".format(variable.token))


def _leading_digits(text, start):
    end = start
    while end < len(text) and is_digit(text[end]):
        end += 1
    return text[start:end]


class _FilenameMatcher(object):
    """
    Walks a filename against the variables of a pattern, see match_pattern
    """

    def __init__(self, filename, pattern):
        self.filename = filename
        self.lowered = lower_ascii(filename)
        self.pattern = pattern
        self.variables = pattern.variables
        self.literalText = pattern.literalText
        self.literalCount = 0
        self.nextVariable = 0
        self.frame = None
        self.view = NO_VIEW
        self.viewSet = False

    def anchored_variable(self):
        """
        Next variable to fill if it is expected at the current position
        """
        if self.nextVariable >= len(self.variables):
            return None
        variable = self.variables[self.nextVariable]
        if variable.precedingLiteralCount != self.literalCount:
            return None
        return variable

    def set_frame(self, frame):
        # Several frame variables must all hold the same number
        if self.frame is not None and frame != self.frame:
            return False
        self.frame = frame
        self.nextVariable += 1
        return True

    def set_view(self, view):
        if self.viewSet and view != self.view:
            return False
        self.view = view
        self.viewSet = True
        self.nextVariable += 1
        return True

    def literal_at(self, text):
        """
        True if the pattern spells text literally at the current position
        """
        return self.literalText.startswith(text, self.literalCount)

    def consume_digits(self, digits):
        variable = self.anchored_variable()
        if variable is not None:
            valid, frame = check_variable(variable, digits, FRAME_NUMBER)
            return valid and self.set_frame(frame)

        # Digits written in the pattern itself, ex: shot010_####
        literalDigits = _leading_digits(self.literalText, self.literalCount)
        if not literalDigits or not digits.startswith(literalDigits):
            return False
        self.literalCount += len(literalDigits)
        remaining = digits[len(literalDigits):]
        if not remaining:
            return True
        variable = self.anchored_variable()
        if variable is None:
            return False
        valid, frame = check_variable(variable, remaining, FRAME_NUMBER)
        return valid and self.set_frame(frame)

    def read_view_word(self, pos):
        """
        Long view name starting at pos, with the keyword it starts with

        Returns:
            tuple of str: (word, keyword) or (None, None)
        """
        mid = self.lowered[pos:]
        for keyword in LONG_VIEW_NAMES.values():
            if mid.startswith(keyword):
                return keyword, keyword
        if mid.startswith(VIEW_PREFIX):
            number = _leading_digits(mid, len(VIEW_PREFIX))
            if number:
                return VIEW_PREFIX + number, VIEW_PREFIX
        return None, None

    def run(self):
        filename = self.lowered
        size = len(filename)
        i = 0
        while i < size:
            c = filename[i]
            if is_digit(c):
                digits = _leading_digits(filename, i)
                if not self.consume_digits(digits):
                    LOG.debug("{0} - unexpected number {1}".format(self.filename, digits))
                    return False
                i += len(digits)
                continue

            if c not in ('l', 'r', 'v'):
                self.literalCount += 1
                i += 1
                continue

            word, keyword = self.read_view_word(i)
            if word is not None:
                variable = self.anchored_variable()
                if variable is not None and variable.isView:
                    valid, view = check_variable(variable, word, variable.kind)
                    if valid:
                        if not self.set_view(view):
                            LOG.debug("{0} - view {1} doesn't match previous view".format(self.filename, word))
                            return False
                        i += len(word)
                        continue
                if self.literal_at(keyword):
                    self.literalCount += len(keyword)
                    i += len(keyword)
                    continue
                LOG.debug("{0} - unexpected view name {1}".format(self.filename, word))
                return False

            if c in ('l', 'r'):
                # Single letters are common in names, only a %v expected here makes it a view
                variable = self.anchored_variable()
                if variable is not None and variable.kind == SHORT_VIEW:
                    if not self.set_view(0 if c == 'l' else 1):
                        return False
                    i += 1
                    continue

            self.literalCount += 1
            i += 1

        return self.nextVariable == len(self.variables)


def match_pattern(filename, pattern):
    """
    Check if a filename belongs to a pattern and extract its frame and view numbers

    The literal runs of the pattern must all be found, in order, without case.
    Then numbers and view names of the filename are read left to right and
    each one must land where the next variable of the pattern is expected.

    Known limitation: literal runs are searched as substrings, 'marleen'
    is found inside 'marleenBG'.

    Ex:
        shot_l.0001.exr, shot_%v.####.exr
        ->
        PatternMatch(frame=1, view=0)

    Args:
        filename (str): Filename to test, its path is ignored
        pattern (Pattern or str): Pattern to match against

    Returns:
        PatternMatch or None: frame is None if the pattern has no frame variable,
            view is NO_VIEW if the pattern has no view variable
    """
    if not isinstance(pattern, Pattern):
        pattern = tokenize(pattern)
    if not isinstance(filename, str):
        raise TypeError("Filename must be a string, got {0}".format(type(filename)))
    name = split_path(filename)[1]

    position = 0
    for literal in pattern.literals:
        found = literal.find(name, position)
        if found == -1:
            return None
        position = found + len(literal)

    if not pattern.variables:
        return PatternMatch(None, NO_VIEW)

    matcher = _FilenameMatcher(name, pattern)
    if not matcher.run():
        return None
    return PatternMatch(matcher.frame, matcher.view)


def generate_filename(pattern, frameNumber, viewNumber=NO_VIEW):
    """
    Expand a pattern into a filename

    Ex:
        /path/to/shot_%V.%04d.exr, 12, 1
        ->
        /path/to/shot_right.0012.exr

    Args:
        pattern (Pattern or str): Pattern to expand
        frameNumber (int): Frame used for frame number variables
        viewNumber (int, optional): View used for view variables

    Raises:
        RenderError: if a variable can't be expanded

    Returns:
        str
    """
    if not isinstance(pattern, Pattern):
        pattern = tokenize(pattern)
    result = [pattern.path]
    for element in pattern.elements:
        if isinstance(element, Literal):
            result.append(element.text)
        elif isinstance(element, Variable):
            result.append(element.format(frameNumber, viewNumber))
        else:
            raise RenderError("Unrecognized pattern element: {0!r}".format(element))
    return ''.join(result)
