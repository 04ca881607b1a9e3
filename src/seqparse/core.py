#!/usr/bin/env python

import logging
import collections
import collections.abc

from .filename import FileNameContent
from .pattern import Pattern, NO_VIEW, tokenize
from .utils import split_path, join_paths, list_files, get_file_size, config

__all__ = [
    'FileSequence',
    'PatternSequence',
    'get_frame_ranges',
    'get_sequence_range',
    'sequence_from_pattern',
    'sequence_from_file',
    'sequences_from_files',
    'scan_for_sequences',
]

LOG = logging.getLogger(__name__)


def get_frame_ranges(frames, maxHole=None):
    """
    Group frame numbers into contiguous ranges

    Walks up from the first frame. If maxHole or more frames in a row are
    missing, the frames after the hole are not reported.

    Ex:
        [1, 2, 3, 5, 8, 9]
        ->
        [(1, 3), (5, 5), (8, 9)]

    Args:
        frames (iterable of int): Frame numbers
        maxHole (int, optional): Missing frames tolerated between two ranges,
            defaults to the maxSequenceHole setting

    Returns:
        list of tuple: (start, end) inclusive
    """
    if maxHole is None:
        maxHole = config.get_config()['maxSequenceHole']
    frames = set(frames)
    result = []
    if not frames:
        return result

    first = min(frames)
    last = max(frames)
    while first <= last:
        breakCounter = 0
        while first not in frames and breakCounter < maxHole:
            first += 1
            breakCounter += 1
        if breakCounter >= maxHole:
            LOG.debug("Hole of more than {0} frames after {1}, stopping".format(maxHole, first - breakCounter))
            break
        end = first
        while end + 1 in frames:
            end += 1
        result.append((first, end))
        first = end + 1
    return result


def get_sequence_range(frames, maxHole=None):
    """
    Get the frame range for a sequence in an easy to read format

    Ex:
        [1, 2, 4]   -> '1-2 / 4'
        [1, 2, 3]   -> '1-3'
        [7]         -> '7'

    Returns:
        str
    """
    chunks = []
    for start, end in get_frame_ranges(frames, maxHole=maxHole):
        if start == end:
            chunks.append(str(start))
        else:
            chunks.append('{0}-{1}'.format(start, end))
    # Plain 'a-b / c', no surrounding parentheses
    return ' / '.join(chunks)


class FileSequence(object):
    """
    Sequence of files built from their names only

    Files are added one by one with insert. The first file is the reference,
    the second one decides which number of the name is the frame number,
    every file after that must change that same number only.

    Ex:
        /path/shotA_0001.png
        /path/shotA_0002.png
        /path/shotA_0004.png
        ->
        /path/shotA_####.png
        shotA_####.png 1-2 / 4

    Args:
        firstFile (FileNameContent or str, optional): First file of the sequence
        enableSizeEstimation (bool, optional): Sum the size of the files on disk,
            defaults to the sizeEstimation setting
    """

    def __init__(self, firstFile=None, enableSizeEstimation=None):
        if enableSizeEstimation is None:
            enableSizeEstimation = config.get_config()['sizeEstimation']
        self._sizeEstimationEnabled = bool(enableSizeEstimation)

        self._sequence = []
        self._paths = set()
        self._frames = {}
        self._frameNumberIndexes = []
        self._totalSize = 0

        if firstFile is not None:
            self.insert(firstFile)

    def __len__(self):
        return len(self._sequence)

    def __iter__(self):
        return iter(self.paths)

    def __contains__(self, path):
        if isinstance(path, FileNameContent):
            path = path.absoluteFileName
        return path in self._paths

    def __repr__(self):
        return "{0}({1!r})".format(self.__class__.__name__, self.get_pattern())

    def _append(self, file):
        self._sequence.append(file)
        self._paths.add(file.absoluteFileName)
        if self._sizeEstimationEnabled:
            self._totalSize += get_file_size(file.absoluteFileName)

    def _read_frame_number(self, file, indexes):
        """
        Frame number of a file at the given number indexes.
        All of them must hold the same number.

        Returns:
            int or None
        """
        frame = None
        for index in indexes:
            number = file.get_number(index)
            if number is None:
                continue
            if frame is None:
                frame = int(number)
            elif int(number) != frame:
                return None
        return frame

    def insert(self, file):
        """
        Try to add a file to the sequence

        Args:
            file (FileNameContent or str)

        Returns:
            bool: True if the file was added, False if it isn't part of the sequence
        """
        if not isinstance(file, FileNameContent):
            file = FileNameContent(file)

        if not self._sequence:
            self._append(file)
            return True

        reference = self._sequence[0]
        if file.path != reference.path:
            return False
        if file.absoluteFileName in self._paths:
            LOG.debug("{0} is already in the sequence".format(file.absoluteFileName))
            return False

        indexes = file.match(reference)
        if indexes is None:
            return False

        # Numbers outside of the frame number must be written the same way
        for index in range(len(reference.numbers)):
            if index not in indexes and file.get_number(index) != reference.get_number(index):
                LOG.debug("{0} - number {1} differs from {2}".format(
                    file.absoluteFileName, index, reference.absoluteFileName))
                return False

        if not self._frameNumberIndexes:
            # Second file, the frame number position is now known
            referenceFrame = self._read_frame_number(reference, indexes)
            frame = self._read_frame_number(file, indexes)
            if referenceFrame is None or frame is None:
                LOG.debug("{0} - numbers at {1} don't agree".format(file.absoluteFileName, indexes))
                return False
            self._frameNumberIndexes = list(indexes)
            self._frames[referenceFrame] = reference.absoluteFileName
        elif indexes != self._frameNumberIndexes:
            LOG.debug("{0} - frame number found at {1}, expected {2}".format(
                file.absoluteFileName, indexes, self._frameNumberIndexes))
            return False
        else:
            frame = self._read_frame_number(file, indexes)
            if frame is None:
                LOG.debug("{0} - numbers at {1} don't agree".format(file.absoluteFileName, indexes))
                return False

        if frame in self._frames:
            LOG.debug("{0} - frame {1} is already taken by {2}".format(
                file.absoluteFileName, frame, self._frames[frame]))
            return False

        self._frames[frame] = file.absoluteFileName
        self._append(file)
        return True

    def contains(self, absoluteFileName):
        return absoluteFileName in self._paths

    @property
    def empty(self):
        return not self._sequence

    @property
    def count(self):
        """
        Number of files in the sequence
        """
        return len(self._sequence)

    @property
    def isSingleFile(self):
        return len(self._sequence) == 1

    @property
    def files(self):
        """
        Files of the sequence in the order they were added

        Returns:
            list of FileNameContent
        """
        return list(self._sequence)

    @property
    def paths(self):
        """
        Absolute filenames in the order they were added

        Returns:
            list of str
        """
        return [f.absoluteFileName for f in self._sequence]

    @property
    def frameIndexes(self):
        """
        Files of the sequence by frame number, sorted.
        Empty until the sequence has two files.

        Returns:
            OrderedDict: {frameNumber: absoluteFileName}
        """
        return collections.OrderedDict(sorted(self._frames.items()))

    @property
    def frames(self):
        return sorted(self._frames)

    @property
    def varyingNumericRunIndexes(self):
        """
        Index of the number(s) of the name holding the frame number

        Ex:
            file08_001.png, file08_002.png
            ->
            [1]
        """
        return list(self._frameNumberIndexes)

    @property
    def firstFrame(self):
        """
        Returns:
            int or None
        """
        if not self._frames:
            return None
        return min(self._frames)

    @property
    def lastFrame(self):
        """
        Returns:
            int or None
        """
        if not self._frames:
            return None
        return max(self._frames)

    @property
    def missing(self):
        """
        Frame numbers missing between the first and last frame

        Returns:
            list of int
        """
        if not self._frames:
            return []
        return [x for x in range(self.firstFrame, self.lastFrame + 1) if x not in self._frames]

    @property
    def estimatedTotalSize(self):
        """
        Size in bytes of all the files, 0 if size estimation is disabled
        """
        return self._totalSize

    @property
    def sizeEstimationEnabled(self):
        return self._sizeEstimationEnabled

    @property
    def extension(self):
        if not self._sequence:
            return ''
        return self._sequence[0].extension

    @property
    def path(self):
        """
        Folder of the sequence with its trailing separator
        """
        if not self._sequence:
            return ''
        return self._sequence[0].path

    def get_ranges(self, maxHole=None):
        return get_frame_ranges(self._frames, maxHole=maxHole)

    def get_pattern(self):
        """
        Pattern of the sequence with # for the frame number

        Ex:
            /path/to/shotA_####.png

        Returns:
            str: the absolute filename for a single file, empty for an empty sequence
        """
        if self.empty:
            return ''
        if self.isSingleFile:
            return self._sequence[0].absoluteFileName
        return self._sequence[0].generate_pattern(self._frameNumberIndexes)

    def get_user_friendly_pattern(self, maxHole=None):
        """
        Pattern of the sequence without its path, followed by its frame ranges

        Ex:
            shotA_####.png 1-2 / 4

        Returns:
            str: the filename for a single file, empty for an empty sequence
        """
        if self.empty:
            return ''
        if self.isSingleFile:
            return self._sequence[0].name
        pattern = split_path(self.get_pattern())[1]
        frameRange = get_sequence_range(self._frames, maxHole=maxHole)
        if not frameRange:
            return pattern
        return '{0} {1}'.format(pattern, frameRange)

    def render(self, userFriendly=False):
        if userFriendly:
            return self.get_user_friendly_pattern()
        return self.get_pattern()


class PatternSequence(collections.abc.Mapping):
    """
    Files matching a pattern, by frame number then view number

    Ex:
        {
            1: {0: '/path/shot_l.0001.exr', 1: '/path/shot_r.0001.exr'},
            2: {0: '/path/shot_l.0002.exr', 1: '/path/shot_r.0002.exr'},
        }

    Supports slices on frame numbers:
        sequence[1:10]

    Args:
        pattern (Pattern or str)
    """

    def __init__(self, pattern):
        if not isinstance(pattern, Pattern):
            pattern = tokenize(pattern)
        self._pattern = pattern
        self._frames = {}

    def __getitem__(self, index):
        if not isinstance(index, slice):
            return self._frames[index]
        result = []
        start, end, step = self._parse_slice_indices(index)
        if start is None or end is None:
            # Empty sequence
            return result
        for x in range(start, end + 1, step):
            if x in self._frames:
                result.append(self._frames[x])
        return result

    def __len__(self):
        return len(self._frames)

    def __iter__(self):
        return iter(sorted(self._frames))

    def __repr__(self):
        return "{0}({1!r})".format(self.__class__.__name__, self._pattern.string)

    def _parse_slice_indices(self, slice):
        """
        Used for handling slices in get item
        """
        start = slice.start
        end = slice.stop
        step = slice.step
        if not isinstance(step, int):
            step = 1
        if not isinstance(start, int):
            start = self.firstFrame
        if not isinstance(end, int):
            end = self.lastFrame
        return start, end, step

    @property
    def pattern(self):
        return self._pattern

    @property
    def string(self):
        return self._pattern.string

    @property
    def firstFrame(self):
        if not self._frames:
            return None
        return min(self._frames)

    @property
    def lastFrame(self):
        if not self._frames:
            return None
        return max(self._frames)

    @property
    def frames(self):
        return sorted(self._frames)

    @property
    def views(self):
        """
        All the view numbers found, sorted
        """
        result = set()
        for views in self._frames.values():
            result.update(views)
        return sorted(result)

    def add(self, frameNumber, viewNumber, absoluteFileName):
        """
        Store a file at a frame and view

        Returns:
            bool: False if another file already holds that frame and view
        """
        views = self._frames.setdefault(frameNumber, {})
        if viewNumber in views:
            LOG.warning("Several files with frame number {0} have the same view {1}: {2}, {3}".format(
                frameNumber, viewNumber, views[viewNumber], absoluteFileName))
            return False
        views[viewNumber] = absoluteFileName
        return True

    def try_insert(self, filename):
        """
        Add a file of the pattern folder if it matches the pattern

        Args:
            filename (str): Name of the file, without path

        Returns:
            bool
        """
        match = self._pattern.match(filename)
        if match is None:
            return False
        # Patterns without frame variable hold a single frame
        frame = match.frame if match.frame is not None else 0
        return self.add(frame, match.view, self._pattern.path + split_path(filename)[1])

    def get_paths(self, onlyView=NO_VIEW):
        """
        Flat list of files, ordered by frame then view

        Args:
            onlyView (int, optional): Keep only this view, files without view are always kept

        Returns:
            list of str
        """
        result = []
        for frame in sorted(self._frames):
            views = self._frames[frame]
            for view in sorted(views):
                if onlyView != NO_VIEW and view != onlyView and view != NO_VIEW:
                    continue
                result.append(views[view])
        return result

    def get_ranges(self, maxHole=None):
        return get_frame_ranges(self._frames, maxHole=maxHole)


def sequence_from_pattern(pattern):
    """
    Find the files of a pattern on disk

    Ex:
        /path/to/shot_%v.####.exr

    Args:
        pattern (Pattern or str)

    Raises:
        ValueError: if the pattern is empty
        TokenizeError: if the pattern uses unsupported variables
        DirectoryUnavailable: if the pattern folder can't be listed

    Returns:
        PatternSequence
    """
    if not pattern:
        raise ValueError("Empty pattern")
    sequence = PatternSequence(pattern)
    for name in sorted(list_files(sequence.pattern.path)):
        sequence.try_insert(name)
    LOG.debug("Found {0} frames for {1}".format(len(sequence), sequence.string))
    return sequence


def sequence_from_file(absoluteFileName, enableSizeEstimation=None):
    """
    Find the sequence a file belongs to, by looking at the other files of its folder

    Args:
        absoluteFileName (str): Any file of the sequence
        enableSizeEstimation (bool, optional)

    Raises:
        DirectoryUnavailable: if the folder of the file can't be listed

    Returns:
        FileSequence
    """
    firstFile = FileNameContent(absoluteFileName)
    names = list_files(firstFile.path)
    sequence = FileSequence(firstFile, enableSizeEstimation=enableSizeEstimation)
    for name in sorted(names):
        sequence.insert(FileNameContent(firstFile.path + name))
    return sequence


def sequences_from_files(paths, enableSizeEstimation=None):
    """
    Group filenames into sequences

    Each file is tried against the sequences found so far,
    a new sequence is started when none of them accepts it.

    Ex:
        ['a.0001.png', 'a.0002.png', 'b.0001.png', 'notes.txt']
        ->
        [FileSequence('a.####.png'), FileSequence('b.0001.png'), FileSequence('notes.txt')]

    Returns:
        list of FileSequence: sorted by pattern
    """
    result = []
    for path in sorted(paths):
        file = FileNameContent(path)
        for sequence in result:
            if sequence.insert(file):
                break
        else:
            result.append(FileSequence(file, enableSizeEstimation=enableSizeEstimation))
    result.sort(key=lambda s: s.get_pattern())
    return result


def scan_for_sequences(path, enableSizeEstimation=None):
    """
    Group the files of a folder into sequences

    Raises:
        DirectoryUnavailable: if the folder can't be listed

    Returns:
        list of FileSequence
    """
    paths = [join_paths(path, name) for name in list_files(path)]
    return sequences_from_files(paths, enableSizeEstimation=enableSizeEstimation)
