import os
import shutil
import tempfile
import unittest

import seqparse
from seqparse.utils import config

import logging
logging.basicConfig()
LOG = logging.getLogger(__name__)


def make_files(folder, names, content=b''):
    for name in names:
        with open(os.path.join(folder, name), 'wb') as f:
            f.write(content)


class ConfigIsolation(object):
    """
    Makes sure the default settings are used
    """

    def setUp(self):
        self._previousConfigEnv = os.environ.pop(config.CONFIG_ENV_VAR, None)
        config.reset_config()

    def tearDown(self):
        if self._previousConfigEnv is not None:
            os.environ[config.CONFIG_ENV_VAR] = self._previousConfigEnv
        config.reset_config()


class TestFrameRanges(ConfigIsolation, unittest.TestCase):

    def test_ranges(self):
        self.assertEqual(seqparse.get_frame_ranges([1, 2, 3, 5, 8, 9]), [(1, 3), (5, 5), (8, 9)])
        self.assertEqual(seqparse.get_frame_ranges([9, 8, 5, 3, 2, 1]), [(1, 3), (5, 5), (8, 9)])
        self.assertEqual(seqparse.get_frame_ranges([]), [])

    def test_max_hole(self):
        self.assertEqual(seqparse.get_frame_ranges([1, 2, 10], maxHole=5), [(1, 2)])
        self.assertEqual(seqparse.get_frame_ranges([1, 2, 10], maxHole=10), [(1, 2), (10, 10)])

    def test_max_hole_boundary(self):
        # A hole of exactly maxHole frames already stops the walk
        self.assertEqual(seqparse.get_frame_ranges([1, 3], maxHole=1), [(1, 1)])
        self.assertEqual(seqparse.get_frame_ranges([1, 3], maxHole=2), [(1, 1), (3, 3)])
        self.assertEqual(seqparse.get_sequence_range([1, 1002]), '1')
        self.assertEqual(seqparse.get_sequence_range([1, 1001]), '1 / 1001')

    def test_default_max_hole(self):
        self.assertEqual(seqparse.get_frame_ranges([1, 500]), [(1, 1), (500, 500)])
        self.assertEqual(seqparse.get_frame_ranges([1, 5000]), [(1, 1)])

    def test_sequence_range(self):
        self.assertEqual(seqparse.get_sequence_range([1, 2, 4]), '1-2 / 4')
        self.assertEqual(seqparse.get_sequence_range([1, 2, 3]), '1-3')
        self.assertEqual(seqparse.get_sequence_range([7]), '7')
        self.assertEqual(seqparse.get_sequence_range([]), '')


class TestFileSequence(ConfigIsolation, unittest.TestCase):

    def build(self, *names):
        seq = seqparse.FileSequence(enableSizeEstimation=False)
        for name in names:
            self.assertTrue(seq.insert(name), name)
        return seq

    def test_empty(self):
        seq = seqparse.FileSequence()
        self.assertTrue(seq.empty)
        self.assertEqual(seq.count, 0)
        self.assertEqual(seq.get_pattern(), '')
        self.assertEqual(seq.render(), '')
        self.assertEqual(seq.render(userFriendly=True), '')
        self.assertIsNone(seq.firstFrame)
        self.assertIsNone(seq.lastFrame)
        self.assertEqual(seq.frames, [])

    def test_single_file(self):
        seq = seqparse.FileSequence('/shots/only.png')
        self.assertTrue(seq.isSingleFile)
        self.assertEqual(seq.get_pattern(), '/shots/only.png')
        self.assertEqual(seq.get_user_friendly_pattern(), 'only.png')
        self.assertIsNone(seq.firstFrame)
        self.assertEqual(seq.varyingNumericRunIndexes, [])

    def test_sequence(self):
        seq = self.build('/shots/shotA_0001.png', '/shots/shotA_0002.png', '/shots/shotA_0004.png')
        self.assertEqual(seq.count, 3)
        self.assertEqual(len(seq), 3)
        self.assertEqual(seq.varyingNumericRunIndexes, [0])
        self.assertEqual(seq.frames, [1, 2, 4])
        self.assertEqual(seq.firstFrame, 1)
        self.assertEqual(seq.lastFrame, 4)
        self.assertEqual(seq.missing, [3])
        self.assertEqual(seq.get_ranges(), [(1, 2), (4, 4)])
        self.assertEqual(seq.get_pattern(), '/shots/shotA_####.png')
        self.assertEqual(seq.render(), '/shots/shotA_####.png')
        self.assertEqual(seq.get_user_friendly_pattern(), 'shotA_####.png 1-2 / 4')
        self.assertEqual(seq.render(userFriendly=True), 'shotA_####.png 1-2 / 4')
        self.assertEqual(seq.path, '/shots/')
        self.assertEqual(seq.extension, 'png')

    def test_frame_indexes(self):
        seq = self.build('/shots/shotA_0002.png', '/shots/shotA_0001.png')
        self.assertEqual(list(seq.frameIndexes.items()), [
            (1, '/shots/shotA_0001.png'),
            (2, '/shots/shotA_0002.png'),
        ])
        self.assertEqual(seq.paths, ['/shots/shotA_0002.png', '/shots/shotA_0001.png'])
        self.assertEqual(list(seq), seq.paths)

    def test_rejected_text(self):
        seq = self.build('/shots/shotA_0001.png', '/shots/shotA_0002.png')
        self.assertFalse(seq.insert('/shots/shotB_0005.png'))
        self.assertFalse(seq.insert('/shots/shotA_0005.jpg'))
        self.assertEqual(seq.count, 2)

    def test_different_padding(self):
        seq = self.build('/shots/shotA_0001.png', '/shots/shotA_0002.png', '/shots/shotA_0004.png')
        self.assertTrue(seq.insert('/shots/shotA_5.png'))
        self.assertEqual(seq.frames, [1, 2, 4, 5])
        self.assertEqual(seq.get_user_friendly_pattern(), 'shotA_####.png 1-2 / 4-5')

    def test_padding_only_change(self):
        seq = self.build('/shots/file1.png')
        self.assertFalse(seq.insert('/shots/file01.png'))
        self.assertTrue(seq.isSingleFile)

    def test_different_folder(self):
        seq = self.build('/shots/shotA_0001.png', '/shots/shotA_0002.png')
        self.assertFalse(seq.insert('/other/shotA_0003.png'))
        self.assertFalse(seq.insert('shotA_0003.png'))

    def test_duplicate(self):
        seq = self.build('/shots/shotA_0001.png')
        self.assertFalse(seq.insert('/shots/shotA_0001.png'))
        self.assertTrue(seq.insert('/shots/shotA_0002.png'))
        self.assertFalse(seq.insert('/shots/shotA_0002.png'))
        self.assertFalse(seq.insert(seqparse.decompose('/shots/shotA_0001.png')))
        self.assertEqual(seq.count, 2)

    def test_duplicate_frame(self):
        seq = self.build('/shots/shotA_0001.png', '/shots/shotA_0002.png')
        self.assertFalse(seq.insert('/shots/shotA_2.png'))
        self.assertEqual(seq.frames, [1, 2])

    def test_fixed_number(self):
        seq = self.build('/s/file08_001.png', '/s/file08_002.png')
        self.assertEqual(seq.varyingNumericRunIndexes, [1])
        self.assertEqual(seq.get_pattern(), '/s/file08_###.png')
        self.assertFalse(seq.insert('/s/file09_003.png'))

    def test_fixed_number_must_not_change(self):
        seq = self.build('/s/file08_001.png', '/s/file08_002.png')
        # Bigger change than the frame number
        self.assertFalse(seq.insert('/s/file20_003.png'))
        # Same value, different padding
        self.assertFalse(seq.insert('/s/file8_004.png'))
        self.assertEqual(seq.paths, ['/s/file08_001.png', '/s/file08_002.png'])
        self.assertEqual(seq.get_pattern(), '/s/file08_###.png')

    def test_fixed_number_checked_on_second_file(self):
        seq = self.build('/s/file08_001.png')
        self.assertFalse(seq.insert('/s/file20_005.png'))
        self.assertFalse(seq.insert('/s/file8_002.png'))
        self.assertTrue(seq.isSingleFile)
        self.assertTrue(seq.insert('/s/file08_002.png'))

    def test_lockstep_numbers(self):
        seq = self.build('/s/a_01_01.png', '/s/a_02_02.png')
        self.assertEqual(seq.varyingNumericRunIndexes, [0, 1])
        self.assertEqual(seq.frames, [1, 2])
        self.assertEqual(seq.get_pattern(), '/s/a_##_##.png')
        self.assertFalse(seq.insert('/s/a_03_04.png'))
        self.assertTrue(seq.insert('/s/a_03_03.png'))
        self.assertEqual(seq.frames, [1, 2, 3])

    def test_lockstep_disagreement(self):
        seq = self.build('/s/a_01_05.png')
        self.assertFalse(seq.insert('/s/a_02_06.png'))
        self.assertTrue(seq.isSingleFile)

    def test_contains(self):
        seq = self.build('/shots/shotA_0001.png', '/shots/shotA_0002.png')
        self.assertTrue(seq.contains('/shots/shotA_0002.png'))
        self.assertIn('/shots/shotA_0001.png', seq)
        self.assertIn(seqparse.decompose('/shots/shotA_0001.png'), seq)
        self.assertNotIn('/shots/shotA_0003.png', seq)

    def test_first_file(self):
        seq = seqparse.FileSequence(seqparse.decompose('/shots/shotA_0001.png'), enableSizeEstimation=False)
        self.assertEqual(seq.count, 1)
        self.assertEqual(seq.files[0].name, 'shotA_0001.png')

    def test_size_estimation_disabled(self):
        seq = self.build('/nowhere/shotA_0001.png', '/nowhere/shotA_0002.png')
        self.assertFalse(seq.sizeEstimationEnabled)
        self.assertEqual(seq.estimatedTotalSize, 0)

    def test_size_estimation_missing_file(self):
        seq = seqparse.FileSequence(enableSizeEstimation=True)
        self.assertTrue(seq.insert('/this/folder/does/not/exist/a_0001.png'))
        self.assertEqual(seq.estimatedTotalSize, 0)


class TestSequencesOnDisk(ConfigIsolation, unittest.TestCase):

    def setUp(self):
        super(TestSequencesOnDisk, self).setUp()
        self.folder = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.folder)
        super(TestSequencesOnDisk, self).tearDown()

    def join(self, name):
        return seqparse.utils.join_paths(self.folder, name)

    def test_sequence_from_file(self):
        make_files(self.folder, ['shotA_0001.png', 'shotA_0002.png', 'shotA_0004.png', 'notes.txt'])
        seq = seqparse.sequence_from_file(self.join('shotA_0002.png'), enableSizeEstimation=False)
        self.assertEqual(seq.count, 3)
        self.assertEqual(seq.frames, [1, 2, 4])
        self.assertEqual(seq.get_user_friendly_pattern(), 'shotA_####.png 1-2 / 4')
        self.assertEqual(seq.get_pattern(), self.join('shotA_####.png'))

    def test_size_estimation(self):
        make_files(self.folder, ['shotA_0001.png'], b'abc')
        make_files(self.folder, ['shotA_0002.png'], b'hello')
        seq = seqparse.sequence_from_file(self.join('shotA_0001.png'), enableSizeEstimation=True)
        self.assertTrue(seq.sizeEstimationEnabled)
        self.assertEqual(seq.estimatedTotalSize, 8)

    def test_sequence_from_file_missing_folder(self):
        path = self.join('missing/shotA_0001.png')
        self.assertRaises(seqparse.DirectoryUnavailable, seqparse.sequence_from_file, path)

    def test_scan_for_sequences(self):
        make_files(self.folder, ['shotA_0001.png', 'shotA_0002.png', 'shotA_0004.png', 'notes.txt'])
        os.mkdir(os.path.join(self.folder, 'shotA_0003.png'))
        result = seqparse.scan_for_sequences(self.folder)
        self.assertEqual([s.get_user_friendly_pattern() for s in result], [
            'notes.txt',
            'shotA_####.png 1-2 / 4',
        ])

    def test_scan_missing_folder(self):
        self.assertRaises(seqparse.DirectoryUnavailable, seqparse.scan_for_sequences, self.join('missing'))

    def test_sequences_from_files(self):
        paths = ['/s/notes.txt', '/s/b.0001.png', '/s/a.0002.png', '/s/a.0001.png']
        result = seqparse.sequences_from_files(paths, enableSizeEstimation=False)
        self.assertEqual([s.get_pattern() for s in result], ['/s/a.####.png', '/s/b.0001.png', '/s/notes.txt'])

    def test_sequence_from_pattern(self):
        make_files(self.folder, [
            'shot_l.0001.exr',
            'shot_r.0001.exr',
            'shot_l.0002.exr',
            'shot_r.0002.exr',
            'shot_0003.exr',
            'notes.txt',
        ])
        os.mkdir(os.path.join(self.folder, 'shot_l.0003.exr'))

        seq = seqparse.sequence_from_pattern(self.join('shot_%v.####.exr'))
        self.assertEqual(len(seq), 2)
        self.assertEqual(list(seq), [1, 2])
        self.assertEqual(seq.frames, [1, 2])
        self.assertEqual(seq.firstFrame, 1)
        self.assertEqual(seq.lastFrame, 2)
        self.assertEqual(seq.views, [0, 1])
        self.assertEqual(seq[1], {0: self.join('shot_l.0001.exr'), 1: self.join('shot_r.0001.exr')})
        self.assertEqual(seq.get_paths(), [
            self.join('shot_l.0001.exr'),
            self.join('shot_r.0001.exr'),
            self.join('shot_l.0002.exr'),
            self.join('shot_r.0002.exr'),
        ])
        self.assertEqual(seq.get_paths(onlyView=1), [
            self.join('shot_r.0001.exr'),
            self.join('shot_r.0002.exr'),
        ])
        self.assertEqual(seq.get_ranges(), [(1, 2)])

    def test_pattern_slices(self):
        make_files(self.folder, ['render.{0:04d}.exr'.format(x) for x in (1, 2, 3, 5)])
        seq = seqparse.sequence_from_pattern(self.join('render.####.exr'))
        self.assertEqual(seq[2:5], [
            {seqparse.NO_VIEW: self.join('render.0002.exr')},
            {seqparse.NO_VIEW: self.join('render.0003.exr')},
            {seqparse.NO_VIEW: self.join('render.0005.exr')},
        ])
        self.assertEqual(len(seq[:]), 4)
        self.assertEqual(len(seq[::2]), 3)
        self.assertRaises(KeyError, seq.__getitem__, 4)

    def test_pattern_without_variables(self):
        make_files(self.folder, ['notes.txt'])
        seq = seqparse.sequence_from_pattern(self.join('notes.txt'))
        self.assertEqual(seq[0], {seqparse.NO_VIEW: self.join('notes.txt')})

    def test_pattern_missing_folder(self):
        pattern = self.join('missing/shot.####.exr')
        self.assertRaises(seqparse.DirectoryUnavailable, seqparse.sequence_from_pattern, pattern)

    def test_empty_pattern(self):
        self.assertRaises(ValueError, seqparse.sequence_from_pattern, '')

    def test_invalid_pattern(self):
        self.assertRaises(seqparse.TokenizeError, seqparse.sequence_from_pattern, self.join('shot_%02v.exr'))

    def test_empty_pattern_sequence_slices(self):
        seq = seqparse.PatternSequence(self.join('shot.####.exr'))
        self.assertEqual(seq[:], [])
        self.assertEqual(seq[1:10], [])
        self.assertEqual(seq[::2], [])

        seq = seqparse.sequence_from_pattern(self.join('shot.####.exr'))
        self.assertEqual(len(seq), 0)
        self.assertEqual(seq[:], [])

    def test_same_frame_and_view(self):
        seq = seqparse.PatternSequence('shot.####.exr')
        self.assertTrue(seq.add(1, seqparse.NO_VIEW, '/a/shot.0001.exr'))
        self.assertFalse(seq.add(1, seqparse.NO_VIEW, '/b/shot.0001.exr'))
        self.assertEqual(seq[1], {seqparse.NO_VIEW: '/a/shot.0001.exr'})


if __name__ == '__main__':
    unittest.main(verbosity=2)
